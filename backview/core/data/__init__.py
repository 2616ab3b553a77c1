"""Backtest result sources."""

from backview.core.data.base import ResultSource
from backview.core.data.file_source import JsonFileSource, parse_result_payload
from backview.core.data.service_client import BacktestServiceClient, ServiceRunSource

__all__ = [
    "BacktestServiceClient",
    "JsonFileSource",
    "ResultSource",
    "ServiceRunSource",
    "parse_result_payload",
]
