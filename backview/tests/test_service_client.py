"""Unit tests for the backtest service client."""

from __future__ import annotations

import unittest
from datetime import date
from typing import Any
from unittest.mock import patch

import requests

from backview.core.data.service_client import BacktestServiceClient, ServiceRunSource
from backview.core.results.types import BacktestRequest
from backview.core.utils.errors import ResultFetchError, ResultValidationError
from backview.tests.helpers import result_payload


class _FakeResponse:
    """Minimal response stub for client tests."""

    def __init__(self, status_code: int, payload: object) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> object:
        """Return configured payload or fail like an undecodable body."""
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    """Scripted session stub recording each request."""

    def __init__(self, outcomes: list[object]) -> None:
        self._outcomes = outcomes
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, json: Any, timeout: float) -> _FakeResponse:
        """Return next scripted response or raise scripted exception."""
        self.calls.append({"method": method, "url": url, "json": json, "timeout": timeout})
        if not self._outcomes:
            raise RuntimeError("No scripted outcomes left.")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        assert isinstance(outcome, _FakeResponse)
        return outcome


def _request() -> BacktestRequest:
    return BacktestRequest(
        symbol="AAPL",
        strategy="SMA_CROSSOVER",
        parameters={"shortPeriod": 10, "longPeriod": 30},
        start_date=date(2020, 1, 1),
        end_date=date(2020, 12, 31),
    )


class TestBacktestServiceClient(unittest.TestCase):
    """Validate request shape, retry logic and schema checks."""

    def test_run_backtest_posts_camel_case_request(self) -> None:
        session = _FakeSession([_FakeResponse(200, result_payload())])
        client = BacktestServiceClient(base_url="http://svc:8080/", session=session)

        result = client.run_backtest(_request())

        self.assertEqual(result.id, "bt-1")
        self.assertEqual(len(session.calls), 1)
        call = session.calls[0]
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], "http://svc:8080/api/v1/backtest/run")
        self.assertEqual(call["json"]["startDate"], "2020-01-01")
        self.assertEqual(call["json"]["initialCapital"], 100_000.0)
        self.assertEqual(call["json"]["commissionRate"], 0.001)
        self.assertEqual(call["json"]["parameters"], {"shortPeriod": 10, "longPeriod": 30})

    def test_retries_transient_http_then_succeeds(self) -> None:
        session = _FakeSession(
            [
                _FakeResponse(503, {"message": "busy"}),
                requests.ConnectionError("reset"),
                _FakeResponse(200, ["AAPL", "MSFT"]),
            ]
        )
        client = BacktestServiceClient(
            session=session,
            max_retries=2,
            retry_backoff_seconds=0.01,
        )

        with patch("backview.core.data.service_client.time.sleep") as sleep_mock:
            symbols = client.list_symbols()

        self.assertEqual(symbols, ["AAPL", "MSFT"])
        self.assertEqual(len(session.calls), 3)
        self.assertEqual(sleep_mock.call_count, 2)
        self.assertEqual(sleep_mock.call_args_list[0].args, (0.01,))
        self.assertEqual(sleep_mock.call_args_list[1].args, (0.02,))

    def test_client_error_is_not_retried(self) -> None:
        session = _FakeSession([_FakeResponse(400, {"message": "Unknown strategy"})])
        client = BacktestServiceClient(session=session, max_retries=3, retry_backoff_seconds=0)

        with self.assertRaises(ResultFetchError) as context:
            client.run_backtest(_request())
        self.assertIn("Unknown strategy", str(context.exception))
        self.assertEqual(len(session.calls), 1)

    def test_exhausted_retries_raise_fetch_error(self) -> None:
        session = _FakeSession([requests.Timeout("slow"), requests.Timeout("slow")])
        client = BacktestServiceClient(session=session, max_retries=1, retry_backoff_seconds=0)

        with self.assertRaises(ResultFetchError):
            client.list_strategies()
        self.assertEqual(len(session.calls), 2)

    def test_persistent_server_error_raises_fetch_error(self) -> None:
        session = _FakeSession([_FakeResponse(502, None), _FakeResponse(502, None)])
        client = BacktestServiceClient(session=session, max_retries=1, retry_backoff_seconds=0)

        with self.assertRaises(ResultFetchError):
            client.list_symbols()

    def test_invalid_payloads_raise_validation_error(self) -> None:
        client = BacktestServiceClient(
            session=_FakeSession([_FakeResponse(200, ValueError("no json"))]),
            retry_backoff_seconds=0,
        )
        with self.assertRaises(ResultValidationError):
            client.list_symbols()

        client = BacktestServiceClient(
            session=_FakeSession([_FakeResponse(200, {"not": "a list"})]),
            retry_backoff_seconds=0,
        )
        with self.assertRaises(ResultValidationError):
            client.list_strategies()

        client = BacktestServiceClient(
            session=_FakeSession([_FakeResponse(200, {"id": "missing-fields"})]),
            retry_backoff_seconds=0,
        )
        with self.assertRaises(ResultValidationError):
            client.run_backtest(_request())

    def test_list_strategies_parses_catalog(self) -> None:
        catalog = [
            {
                "id": "SMA_CROSSOVER",
                "name": "SMA Crossover",
                "description": "Moving average crossover",
                "parameters": [
                    {"name": "shortPeriod", "type": "INTEGER", "defaultValue": 10},
                    {"name": "longPeriod", "type": "INTEGER", "defaultValue": 30},
                ],
            }
        ]
        session = _FakeSession([_FakeResponse(200, catalog)])
        client = BacktestServiceClient(session=session)

        strategies = client.list_strategies()

        self.assertEqual(session.calls[0]["url"], "http://localhost:8080/api/v1/backtest/strategies")
        self.assertEqual(strategies[0].id, "SMA_CROSSOVER")
        self.assertEqual(strategies[0].parameters[0].default_value, 10)

    def test_service_run_source_delegates_to_client(self) -> None:
        session = _FakeSession([_FakeResponse(200, result_payload(result_id="bt-9"))])
        source = ServiceRunSource(BacktestServiceClient(session=session), _request())
        self.assertEqual(source.load_result().id, "bt-9")


if __name__ == "__main__":
    unittest.main()
