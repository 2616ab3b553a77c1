"""Configuration models and YAML loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from babel.core import Locale, UnknownLocaleError
from pydantic import BaseModel, Field, model_validator

from backview.core.analytics.dashboard import DashboardSettings
from backview.core.analytics.formatting import FormatConfig
from backview.core.utils.env import env_setting
from backview.core.utils.errors import ConfigLoadError

DEFAULT_SERVICE_URL = "http://localhost:8080"


class ServiceConfig(BaseModel):
    """Remote backtest service connection settings."""

    base_url: str = DEFAULT_SERVICE_URL
    timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_backoff_seconds: float = 0.5

    @model_validator(mode="after")
    def validate_service(self) -> ServiceConfig:
        """Validate URL and retry settings."""
        if not self.base_url.strip():
            raise ValueError("service.base_url must be non-empty.")
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("service.base_url must start with http:// or https://.")
        if self.timeout_seconds <= 0:
            raise ValueError("service.timeout_seconds must be > 0.")
        if self.max_retries < 0:
            raise ValueError("service.max_retries must be >= 0.")
        if self.retry_backoff_seconds < 0:
            raise ValueError("service.retry_backoff_seconds must be >= 0.")
        self.base_url = self.base_url.rstrip("/")
        return self


class DisplayConfig(BaseModel):
    """Rendering budget and number formatting."""

    max_points: int = 500
    initial_capital: float = 100_000.0
    locale: str = "en_US"
    currency_code: str = "USD"
    fraction_digits: int = 2

    @model_validator(mode="after")
    def validate_display(self) -> DisplayConfig:
        """Validate point budget and locale settings."""
        if self.max_points < 1:
            raise ValueError("display.max_points must be >= 1.")
        if self.fraction_digits < 0:
            raise ValueError("display.fraction_digits must be >= 0.")
        try:
            Locale.parse(self.locale)
        except (UnknownLocaleError, ValueError) as exc:
            raise ValueError(f"display.locale is not a known locale: {self.locale}") from exc
        self.currency_code = self.currency_code.strip().upper()
        if len(self.currency_code) != 3:
            raise ValueError("display.currency_code must be a 3-letter ISO code.")
        return self

    def to_dashboard_settings(self) -> DashboardSettings:
        """Build core dashboard settings from this config."""
        return DashboardSettings(
            max_points=self.max_points,
            initial_capital=self.initial_capital,
            format=FormatConfig(
                locale=self.locale,
                currency_code=self.currency_code,
                fraction_digits=self.fraction_digits,
            ),
        )


class OutputConfig(BaseModel):
    """Output and artifact settings."""

    artifacts_dir: Path = Path("artifacts")
    save_chart: bool = True
    chart_filename: str = "dashboard.png"

    @model_validator(mode="after")
    def validate_output(self) -> OutputConfig:
        """Ensure output filenames are valid."""
        if not self.chart_filename.strip():
            raise ValueError("output.chart_filename must be non-empty.")
        return self


class LoggingConfig(BaseModel):
    """Logging settings. Without a level, ``BACKVIEW_LOG_LEVEL`` or ``INFO`` applies."""

    level: str | None = None

    @model_validator(mode="after")
    def validate_level(self) -> LoggingConfig:
        """Normalize and validate the level name."""
        if self.level is None:
            return self
        self.level = self.level.strip().upper()
        if self.level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"logging.level is not a valid level: {self.level}")
        return self


class AppConfig(BaseModel):
    """Top-level application configuration."""

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _resolve_config_path(path: Path) -> Path:
    """Resolve and validate a config file path."""
    resolved_path = path.expanduser().resolve()
    if not resolved_path.exists():
        raise ConfigLoadError(f"Config file not found: {resolved_path}")
    if not resolved_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {resolved_path}")
    return resolved_path


def _apply_env_overrides(raw_config: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``BACKVIEW_*`` environment settings onto raw config data."""
    service_url = env_setting("SERVICE_URL")
    if service_url is None:
        return raw_config
    service = dict(raw_config.get("service") or {})
    service["base_url"] = service_url
    return {**raw_config, "service": service}


def _build_config(raw_config: dict[str, Any], base_dir: Path) -> AppConfig:
    """Build and path-resolve config from raw data."""
    try:
        config = AppConfig.model_validate(_apply_env_overrides(raw_config))
    except Exception as exc:
        raise ConfigLoadError(f"Config validation failed: {exc}") from exc
    artifacts_dir = config.output.artifacts_dir
    resolved_artifacts_dir = (
        artifacts_dir.expanduser().resolve()
        if artifacts_dir.is_absolute()
        else (base_dir / artifacts_dir).resolve()
    )
    updated_output = config.output.model_copy(update={"artifacts_dir": resolved_artifacts_dir})
    return config.model_copy(update={"output": updated_output})


def load_config(path: Path) -> AppConfig:
    """
    Load and validate application config from YAML.

    Relative paths are resolved from the YAML file parent directory.

    Args:
        path: YAML config file path.

    Returns:
        Validated application config.
    """
    config_path = _resolve_config_path(path)
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw_config: Any = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigLoadError(f"Failed to read config file {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Invalid YAML in config file {config_path}: {exc}") from exc

    if not isinstance(raw_config, dict):
        raise ConfigLoadError("YAML root must be a mapping/object.")

    return _build_config(raw_config, config_path.parent)


def load_config_from_yaml_text(yaml_text: str, base_dir: Path | None = None) -> AppConfig:
    """
    Load and validate config from YAML text.

    Args:
        yaml_text: YAML string.
        base_dir: Base directory for relative paths.

    Returns:
        Validated application config.
    """
    try:
        raw_config: Any = yaml.safe_load(yaml_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Invalid YAML text: {exc}") from exc
    if not isinstance(raw_config, dict):
        raise ConfigLoadError("YAML root must be a mapping/object.")
    resolved_base_dir = (base_dir or Path.cwd()).expanduser().resolve()
    return _build_config(raw_config, resolved_base_dir)


def load_config_or_default(path: Path | None) -> AppConfig:
    """Load ``path`` when given, otherwise build the default config (env overrides apply)."""
    if path is not None:
        return load_config(path)
    return _build_config({}, Path.cwd().resolve())


def dump_config_to_yaml(config: AppConfig) -> str:
    """
    Serialize config to canonical YAML.

    Args:
        config: App config.

    Returns:
        YAML string.
    """
    payload = config.model_dump(mode="json")
    return yaml.safe_dump(payload, sort_keys=True, default_flow_style=False)
