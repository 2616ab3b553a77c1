"""Unit tests for YAML config loading and validation."""

from __future__ import annotations

import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from backview.core.config import (
    dump_config_to_yaml,
    load_config,
    load_config_from_yaml_text,
    load_config_or_default,
)
from backview.core.utils.errors import ConfigLoadError


class TestConfig(unittest.TestCase):
    """Validate defaults, overrides and typed failures."""

    def test_defaults_without_file(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = load_config_or_default(None)
        self.assertEqual(config.service.base_url, "http://localhost:8080")
        self.assertEqual(config.display.max_points, 500)
        self.assertEqual(config.display.initial_capital, 100_000.0)
        self.assertEqual(config.display.locale, "en_US")
        self.assertIsNone(config.logging.level)
        self.assertTrue(config.output.artifacts_dir.is_absolute())

    def test_load_config_resolves_paths_from_file_parent(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config_path = root / "config.yaml"
            config_path.write_text(
                textwrap.dedent("""
                    service:
                      base_url: "http://backtest.local:9000/"
                      max_retries: 1
                    display:
                      max_points: 250
                      currency_code: eur
                      locale: de_DE
                    output:
                      artifacts_dir: out
                      save_chart: false
                    logging:
                      level: debug
                    """).strip() + "\n",
                encoding="utf-8",
            )
            with patch.dict(os.environ, {}, clear=True):
                config = load_config(config_path)

            self.assertEqual(config.service.base_url, "http://backtest.local:9000")
            self.assertEqual(config.service.max_retries, 1)
            self.assertEqual(config.display.max_points, 250)
            self.assertEqual(config.display.currency_code, "EUR")
            self.assertEqual(config.output.artifacts_dir, (root / "out").resolve())
            self.assertFalse(config.output.save_chart)
            self.assertEqual(config.logging.level, "DEBUG")

            settings = config.display.to_dashboard_settings()
            self.assertEqual(settings.max_points, 250)
            self.assertEqual(settings.format.locale, "de_DE")
            self.assertEqual(settings.format.currency_code, "EUR")

    def test_service_url_env_override(self) -> None:
        with patch.dict(os.environ, {"BACKVIEW_SERVICE_URL": "https://api.example.test"}):
            config = load_config_from_yaml_text("display:\n  max_points: 100\n")
        self.assertEqual(config.service.base_url, "https://api.example.test")
        self.assertEqual(config.display.max_points, 100)

    def test_invalid_values_raise_config_error(self) -> None:
        invalid_documents = [
            "display:\n  max_points: 0\n",
            "display:\n  locale: zz_QQ\n",
            "display:\n  currency_code: DOLLARS\n",
            "service:\n  base_url: ftp://nope\n",
            "service:\n  max_retries: -1\n",
            "logging:\n  level: LOUD\n",
            "- just\n- a list\n",
            "display: [unclosed\n",
        ]
        for document in invalid_documents:
            with self.subTest(document=document):
                with patch.dict(os.environ, {}, clear=True):
                    with self.assertRaises(ConfigLoadError):
                        load_config_from_yaml_text(document)

    def test_missing_file_raises_config_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(ConfigLoadError):
                load_config(Path(temp_dir) / "missing.yaml")

    def test_dump_round_trips(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = load_config_from_yaml_text("display:\n  max_points: 42\n")
            reloaded = load_config_from_yaml_text(dump_config_to_yaml(config))
        self.assertEqual(reloaded.display.max_points, 42)
        self.assertEqual(reloaded.output.artifacts_dir, config.output.artifacts_dir)


if __name__ == "__main__":
    unittest.main()
