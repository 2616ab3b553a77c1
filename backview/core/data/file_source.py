"""Backtest results saved as JSON documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from backview.core.data.base import ResultSource
from backview.core.results.types import BacktestResult
from backview.core.utils.errors import ResultFetchError, ResultValidationError
from backview.core.utils.logging import get_logger

_LOGGER_NAME = "backview.core.data.file_source"


def parse_result_payload(payload: Any, origin: str) -> BacktestResult:
    """
    Validate a decoded JSON payload against the result contract.

    Args:
        payload: Decoded JSON document.
        origin: Human-readable origin used in error messages.

    Returns:
        Parsed backtest result.
    """
    if not isinstance(payload, dict):
        raise ResultValidationError(f"Backtest result from {origin} must be a JSON object.")
    try:
        return BacktestResult.model_validate(payload)
    except ValidationError as exc:
        raise ResultValidationError(f"Invalid backtest result from {origin}: {exc}") from exc


class JsonFileSource(ResultSource):
    """Read a backtest result previously saved from the service."""

    def __init__(self, path: Path) -> None:
        self._path = path.expanduser().resolve()

    @property
    def path(self) -> Path:
        """Resolved document path."""
        return self._path

    def load_result(self) -> BacktestResult:
        """Read and validate the JSON document."""
        if not self._path.is_file():
            raise ResultFetchError(f"Result file not found: {self._path}")
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ResultFetchError(f"Failed to read result file {self._path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ResultValidationError(f"Invalid JSON in result file {self._path}: {exc}") from exc

        result = parse_result_payload(payload, str(self._path))
        get_logger(_LOGGER_NAME).info(
            "Loaded result %s (%d equity points, %d trades) from %s",
            result.id,
            len(result.equity_curve),
            len(result.trades),
            self._path,
        )
        return result
