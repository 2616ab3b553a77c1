"""Domain-specific error taxonomy for Backview."""

from __future__ import annotations


class BackviewError(Exception):
    """Base Backview error with CLI exit-code metadata."""

    exit_code: int = 1
    error_code: str = "backview_error"


class ConfigLoadError(BackviewError, ValueError):
    """Configuration loading/validation error."""

    exit_code = 2
    error_code = "config_error"


class ResultFetchError(BackviewError, ConnectionError):
    """Backtest service transport/retry error."""

    exit_code = 3
    error_code = "result_fetch_error"


class ResultValidationError(BackviewError, ValueError):
    """Backtest result payload failed schema validation."""

    exit_code = 4
    error_code = "result_validation_error"


class ArtifactError(BackviewError, RuntimeError):
    """Chart artifact write error."""

    exit_code = 5
    error_code = "artifact_error"


def exit_code_for_exception(exc: Exception) -> int:
    """
    Resolve process exit code for an exception.

    Args:
        exc: Raised exception.

    Returns:
        Integer process exit code.
    """
    return int(getattr(exc, "exit_code", 1))
