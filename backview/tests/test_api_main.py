"""Unit tests for API entrypoint port resolution."""

from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from backview.api.main import _default_port, _parse_args, _resolve_port


class TestApiMain(unittest.TestCase):
    """Validate deterministic fallback behavior for occupied ports."""

    def test_resolve_port_uses_requested_when_available(self) -> None:
        with patch("backview.api.main._is_port_available", return_value=True):
            resolved = _resolve_port("127.0.0.1", 8030, max_attempts=5)
        self.assertEqual(resolved, 8030)

    def test_resolve_port_scans_forward(self) -> None:
        with patch(
            "backview.api.main._is_port_available",
            side_effect=[False, False, True],
        ):
            resolved = _resolve_port("127.0.0.1", 8030, max_attempts=5)
        self.assertEqual(resolved, 8032)

    def test_resolve_port_raises_when_no_candidate(self) -> None:
        with patch("backview.api.main._is_port_available", return_value=False):
            with self.assertRaises(RuntimeError):
                _resolve_port("127.0.0.1", 8030, max_attempts=2)

    def test_env_controls_defaults(self) -> None:
        with patch.dict(
            os.environ,
            {"BACKVIEW_API_PORT": "9100", "BACKVIEW_API_HOST": "0.0.0.0"},
        ):
            args = _parse_args([])
        self.assertEqual(args.port, 9100)
        self.assertEqual(args.host, "0.0.0.0")

    def test_out_of_range_port_flag_exits(self) -> None:
        with patch("sys.stderr"):
            with self.assertRaises(SystemExit):
                _parse_args(["--port", "70000"])

    def test_invalid_env_port_raises(self) -> None:
        with patch.dict(os.environ, {"BACKVIEW_API_PORT": "not-a-port"}):
            with self.assertRaises(ValueError):
                _default_port()


if __name__ == "__main__":
    unittest.main()
