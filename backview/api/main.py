"""Executable entrypoint for the Backview FastAPI server."""

from __future__ import annotations

import argparse
import os
import socket
from pathlib import Path

from backview.core.utils.env import ENV_PREFIX, env_setting, load_dotenv

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8030
APP_FACTORY = "backview.api.app:create_app"


def _validate_port(port: int, source: str) -> int:
    if port < 1 or port > 65535:
        raise ValueError(f"{source} must be between 1 and 65535, got {port}.")
    return port


def _default_port() -> int:
    """Port from ``BACKVIEW_API_PORT`` or the built-in default."""
    raw_value = env_setting("API_PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"Invalid {ENV_PREFIX}API_PORT value: {raw_value}") from exc
    return _validate_port(port, f"{ENV_PREFIX}API_PORT")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse server options; every default can come from a ``BACKVIEW_API_*`` variable."""
    parser = argparse.ArgumentParser(description="Serve Backview dashboard views over HTTP.")
    parser.add_argument(
        "--host",
        default=env_setting("API_HOST", DEFAULT_HOST),
        help=f"Bind host (default: {DEFAULT_HOST} or {ENV_PREFIX}API_HOST).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=_default_port(),
        help=f"Bind port (default: {DEFAULT_PORT} or {ENV_PREFIX}API_PORT).",
    )
    parser.add_argument(
        "--log-level",
        default=env_setting("API_LOG_LEVEL", "info"),
        help=f"Uvicorn log level (default: info or {ENV_PREFIX}API_LOG_LEVEL).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"YAML config handed to the app factory via {ENV_PREFIX}CONFIG.",
    )
    args = parser.parse_args(argv)
    try:
        _validate_port(args.port, "--port")
    except ValueError as exc:
        parser.error(str(exc))
    return args


def _is_port_available(host: str, port: int) -> bool:
    """Return True if this process can bind ``host:port``."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def _resolve_port(host: str, requested_port: int, max_attempts: int = 50) -> int:
    """First bindable port at or after ``requested_port``."""
    last_candidate = min(65535, requested_port + max_attempts - 1)
    for candidate in range(requested_port, last_candidate + 1):
        if _is_port_available(host, candidate):
            return candidate
    raise RuntimeError(f"No available port found from {requested_port} to {last_candidate}.")


def main() -> None:
    """Run the Backview API under uvicorn."""
    import uvicorn

    load_dotenv(Path(".env"))
    args = _parse_args()
    if args.config is not None:
        os.environ[f"{ENV_PREFIX}CONFIG"] = str(args.config.expanduser().resolve())

    port = _resolve_port(args.host, args.port)
    if port != args.port:
        print(f"Port {args.port} is busy; serving Backview API on {port}.", flush=True)
    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=args.host,
        port=port,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
