"""Unit tests for dotenv loading and logging setup."""

from __future__ import annotations

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from backview.core.utils.env import env_setting, load_dotenv
from backview.core.utils.logging import configure_logging


class TestEnv(unittest.TestCase):
    """Validate dotenv parsing and prefixed settings."""

    def test_load_dotenv_parses_quotes_exports_and_comments(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / ".env"
            path.write_text(
                "# comment\n"
                "\n"
                "export BACKVIEW_SERVICE_URL='http://svc:9000'\n"
                'BACKVIEW_LOG_LEVEL="debug"\n'
                "BACKVIEW_API_PORT=8123\n",
                encoding="utf-8",
            )
            with patch.dict(os.environ, {"BACKVIEW_API_PORT": "9999"}, clear=True):
                loaded = load_dotenv(path)
                self.assertEqual(os.environ["BACKVIEW_SERVICE_URL"], "http://svc:9000")
                self.assertEqual(os.environ["BACKVIEW_API_PORT"], "9999")
                self.assertEqual(env_setting("LOG_LEVEL"), "debug")

        self.assertEqual(
            loaded,
            {"BACKVIEW_SERVICE_URL": "http://svc:9000", "BACKVIEW_LOG_LEVEL": "debug"},
        )

    def test_missing_dotenv_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            self.assertEqual(load_dotenv(Path(temp_dir) / ".env"), {})

    def test_malformed_line_raises(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / ".env"
            path.write_text("NOT_A_PAIR\n", encoding="utf-8")
            with patch.dict(os.environ, {}, clear=True):
                with self.assertRaises(ValueError):
                    load_dotenv(path)

    def test_blank_setting_falls_back_to_default(self) -> None:
        with patch.dict(os.environ, {"BACKVIEW_SERVICE_URL": "   "}, clear=True):
            self.assertEqual(env_setting("SERVICE_URL", "fallback"), "fallback")


class TestLogging(unittest.TestCase):
    """Validate level resolution."""

    def tearDown(self) -> None:
        configure_logging("WARNING")

    def test_explicit_level_wins_over_env(self) -> None:
        with patch.dict(os.environ, {"BACKVIEW_LOG_LEVEL": "ERROR"}):
            configure_logging("debug")
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)

    def test_env_level_used_without_explicit_level(self) -> None:
        with patch.dict(os.environ, {"BACKVIEW_LOG_LEVEL": "ERROR"}):
            configure_logging()
        self.assertEqual(logging.getLogger().level, logging.ERROR)

    def test_invalid_level_raises(self) -> None:
        with self.assertRaises(ValueError):
            configure_logging("LOUD")


if __name__ == "__main__":
    unittest.main()
