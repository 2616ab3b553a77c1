"""Unit tests for JSON result documents."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from backview.core.config import AppConfig
from backview.core.data.file_source import JsonFileSource, parse_result_payload
from backview.core.results.types import TradeType
from backview.core.services.dashboard_service import render_result_file
from backview.core.utils.errors import ResultFetchError, ResultValidationError
from backview.tests.helpers import result_payload


class TestJsonFileSource(unittest.TestCase):
    """Validate contract parsing and typed failures."""

    def test_loads_camel_case_document(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "result.json"
            payload = result_payload()
            payload["trades"][0]["type"] = "ROUND_TRIP"
            path.write_text(json.dumps(payload), encoding="utf-8")

            result = JsonFileSource(path).load_result()

        self.assertEqual(result.id, "bt-1")
        self.assertEqual(len(result.equity_curve), 3)
        self.assertEqual(result.trades[0].type, TradeType.ROUND_TRIP)
        self.assertEqual(result.trades[0].entry_date, "2020-01-02")
        self.assertAlmostEqual(result.metrics.sharpe_ratio, 1.2)

    def test_unknown_trade_type_is_kept_and_renders(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "result.json"
            payload = result_payload()
            payload["trades"][0]["type"] = "BUY"
            path.write_text(json.dumps(payload), encoding="utf-8")

            outcome = render_result_file(path, AppConfig(), save_chart=False)

        self.assertEqual(outcome.result.trades[0].type, "BUY")
        self.assertEqual(len(outcome.view.markers), 2)
        self.assertEqual(outcome.artifact_paths, ())

    def test_payload_keys_are_camel_case(self) -> None:
        payload = result_payload()
        self.assertIn("equityCurve", payload)
        self.assertIn("sharpeRatio", payload["metrics"])
        self.assertIn("entryDate", payload["trades"][0])

    def test_missing_optional_sections_default_empty(self) -> None:
        result = parse_result_payload({"id": "x", "symbol": "AAPL", "strategy": "RSI"}, "test")
        self.assertEqual(result.trades, [])
        self.assertEqual(result.equity_curve, [])
        self.assertEqual(result.metrics.total_trades, 0)

    def test_missing_file_is_fetch_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(ResultFetchError):
                JsonFileSource(Path(temp_dir) / "missing.json").load_result()

    def test_bad_json_is_validation_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "broken.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(ResultValidationError):
                JsonFileSource(path).load_result()

    def test_schema_violations_are_validation_errors(self) -> None:
        with self.assertRaises(ResultValidationError):
            parse_result_payload([1, 2, 3], "test")
        with self.assertRaises(ResultValidationError):
            parse_result_payload({"id": "x", "symbol": "AAPL"}, "test")
        with self.assertRaises(ResultValidationError):
            parse_result_payload(
                {
                    "id": "x",
                    "symbol": "AAPL",
                    "strategy": "RSI",
                    "equityCurve": [{"timestamp": "soon", "value": 1}],
                },
                "test",
            )


if __name__ == "__main__":
    unittest.main()
