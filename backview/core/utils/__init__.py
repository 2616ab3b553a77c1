"""Utility helpers."""

from backview.core.utils.env import env_setting, load_dotenv
from backview.core.utils.errors import (
    ArtifactError,
    BackviewError,
    ConfigLoadError,
    ResultFetchError,
    ResultValidationError,
    exit_code_for_exception,
)
from backview.core.utils.logging import configure_logging, get_logger

__all__ = [
    "ArtifactError",
    "BackviewError",
    "ConfigLoadError",
    "ResultFetchError",
    "ResultValidationError",
    "configure_logging",
    "env_setting",
    "exit_code_for_exception",
    "get_logger",
    "load_dotenv",
]
