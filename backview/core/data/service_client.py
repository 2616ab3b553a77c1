"""REST client for the remote backtest service."""

from __future__ import annotations

import time
from typing import Any

import requests
from pydantic import ValidationError

from backview.core.data.base import ResultSource
from backview.core.data.file_source import parse_result_payload
from backview.core.results.types import BacktestRequest, BacktestResult, StrategyInfo
from backview.core.utils.errors import ResultFetchError, ResultValidationError
from backview.core.utils.logging import get_logger

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})
_LOGGER_NAME = "backview.core.data.service_client"


def _error_message(response: requests.Response) -> str:
    """Extract the service's error message from a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if message:
            return f"HTTP {response.status_code}: {message}"
    return f"HTTP {response.status_code}"


class BacktestServiceClient:
    """HTTP client for running backtests and reading the strategy/symbol catalogs."""

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        session: requests.Session | None = None,
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        retry_backoff_seconds: float = 0.5,
    ) -> None:
        """
        Initialize a backtest service client.

        Args:
            base_url: Service root, without the ``/api/v1`` prefix.
            session: Optional requests session for dependency injection.
            timeout_seconds: Request timeout in seconds.
            max_retries: Number of retry attempts for transient failures.
            retry_backoff_seconds: Base seconds for exponential retry backoff.
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0.")
        if retry_backoff_seconds < 0:
            raise ValueError("retry_backoff_seconds must be >= 0.")
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._retry_backoff_seconds = retry_backoff_seconds

    def _sleep_before_retry(self, attempt: int) -> None:
        """Sleep deterministic exponential backoff before retry attempt."""
        if self._retry_backoff_seconds == 0:
            return
        time.sleep(self._retry_backoff_seconds * (2**attempt))

    def _request(self, method: str, path: str, json_body: Any = None) -> Any:
        """Send a request with retry/backoff and return the decoded JSON body."""
        url = f"{self._base_url}/api/v1{path}"
        logger = get_logger(_LOGGER_NAME)
        last_failure: str | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.request(
                    method,
                    url,
                    json=json_body,
                    timeout=self._timeout_seconds,
                )
            except requests.exceptions.RequestException as exc:
                last_failure = str(exc)
                logger.warning("%s %s failed (attempt %d): %s", method, url, attempt + 1, exc)
                if attempt >= self._max_retries:
                    break
                self._sleep_before_retry(attempt)
                continue

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self._max_retries:
                logger.warning(
                    "%s %s returned %d (attempt %d), retrying",
                    method,
                    url,
                    response.status_code,
                    attempt + 1,
                )
                self._sleep_before_retry(attempt)
                continue
            if response.status_code >= 400:
                raise ResultFetchError(f"{method} {url} failed: {_error_message(response)}")
            try:
                return response.json()
            except ValueError as exc:
                raise ResultValidationError(f"Invalid JSON response from {url}.") from exc

        raise ResultFetchError(f"{method} {url} failed after retries: {last_failure}")

    def run_backtest(self, request: BacktestRequest) -> BacktestResult:
        """
        Run a backtest remotely and return its result.

        Args:
            request: Run request.

        Returns:
            Validated backtest result.
        """
        payload = self._request(
            "POST",
            "/backtest/run",
            json_body=request.model_dump(mode="json", by_alias=True),
        )
        return parse_result_payload(payload, f"{self._base_url} backtest run")

    def list_strategies(self) -> list[StrategyInfo]:
        """Return the service's strategy catalog."""
        payload = self._request("GET", "/backtest/strategies")
        if not isinstance(payload, list):
            raise ResultValidationError("Strategy catalog response must be a JSON list.")
        try:
            return [StrategyInfo.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise ResultValidationError(f"Invalid strategy catalog entry: {exc}") from exc

    def list_symbols(self) -> list[str]:
        """Return the symbols the service has market data for."""
        payload = self._request("GET", "/market-data/symbols")
        if not isinstance(payload, list):
            raise ResultValidationError("Symbol catalog response must be a JSON list.")
        return [str(item) for item in payload]


class ServiceRunSource(ResultSource):
    """Result source that runs one backtest request on the service."""

    def __init__(self, client: BacktestServiceClient, request: BacktestRequest) -> None:
        self._client = client
        self._request = request

    def load_result(self) -> BacktestResult:
        """Run the configured request and return its result."""
        return self._client.run_backtest(self._request)
