"""Abstract interfaces for backtest result sources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backview.core.results.types import BacktestResult


class ResultSource(ABC):
    """Anything that can deliver a well-formed backtest result."""

    @abstractmethod
    def load_result(self) -> BacktestResult:
        """
        Return one complete backtest result snapshot.

        Raises:
            ResultFetchError: The result could not be retrieved.
            ResultValidationError: The payload does not match the result contract.
        """
