"""Locale-aware display formatting for backtest metrics."""

from __future__ import annotations

import math
from dataclasses import dataclass

from babel.core import Locale
from babel.dates import format_date as babel_format_date
from babel.numbers import format_currency, format_decimal, get_currency_symbol

from backview.core.analytics.dates import parse_date

NOT_AVAILABLE = "N/A"
INVALID_DATE = "Invalid Date"


def _decimal_pattern(fraction_digits: int, grouping: bool = False) -> str:
    """Build a CLDR number pattern with a fixed number of fraction digits."""
    integer_part = "#,##0" if grouping else "0"
    if fraction_digits <= 0:
        return integer_part
    return f"{integer_part}.{'0' * fraction_digits}"


@dataclass(frozen=True)
class FormatConfig:
    """Explicit formatting settings; nothing is read from the process locale."""

    locale: str = "en_US"
    currency_code: str = "USD"
    fraction_digits: int = 2

    def __post_init__(self) -> None:
        """Validate the locale identifier and digit count eagerly."""
        Locale.parse(self.locale)
        if self.fraction_digits < 0:
            raise ValueError("fraction_digits must be >= 0.")


class MetricFormatter:
    """Render metric values as display strings."""

    def __init__(self, config: FormatConfig | None = None) -> None:
        self.config = config or FormatConfig()

    def currency(self, value: float) -> str:
        """Currency with the configured fraction digits and locale grouping."""
        pattern = f"¤{_decimal_pattern(self.config.fraction_digits, grouping=True)}"
        return format_currency(
            value,
            self.config.currency_code,
            format=pattern,
            locale=self.config.locale,
            currency_digits=False,
        )

    def signed_currency(self, value: float) -> str:
        """Currency with an explicit ``+`` for non-negative values."""
        value = value + 0.0  # -0.0 -> 0.0
        text = self.currency(value)
        return f"+{text}" if value >= 0 else text

    def whole_currency(self, value: float) -> str:
        """Currency rounded to whole units, used for start/end equity."""
        return format_currency(
            value,
            self.config.currency_code,
            format="¤#,##0",
            locale=self.config.locale,
            currency_digits=False,
        )

    def compact_currency(self, value: float) -> str:
        """Thousands with one decimal, e.g. ``$123.4k`` for the equity price axis."""
        symbol = get_currency_symbol(self.config.currency_code, locale=self.config.locale)
        amount = format_decimal(value / 1000, format="0.0", locale=self.config.locale)
        return f"{symbol}{amount}k"

    def percent(self, value: float, fraction_digits: int | None = None) -> str:
        """Format a fraction as a percentage (``0.1234`` -> ``12.34%``)."""
        digits = self.config.fraction_digits if fraction_digits is None else fraction_digits
        pattern = _decimal_pattern(digits)
        formatted = format_decimal(value * 100, format=pattern, locale=self.config.locale)
        return f"{formatted}%"

    def ratio(self, value: float, fraction_digits: int = 3) -> str:
        """Plain ratio without a percent sign (Sharpe)."""
        pattern = _decimal_pattern(fraction_digits)
        return format_decimal(value, format=pattern, locale=self.config.locale)

    def percent_change(self, value: float) -> str:
        """Signed percentage that is already scaled; non-finite values render as ``N/A``."""
        if not math.isfinite(value):
            return NOT_AVAILABLE
        value = value + 0.0  # -0.0 -> 0.0
        text = format_decimal(value, format=_decimal_pattern(2), locale=self.config.locale)
        return f"+{text}%" if value >= 0 else f"{text}%"

    def date(self, value: object) -> str:
        """Medium-length date, e.g. ``Jan 5, 2020``."""
        parsed = parse_date(value)
        if parsed is None:
            return INVALID_DATE
        return babel_format_date(parsed.date(), format="medium", locale=self.config.locale)

    def count(self, value: int) -> str:
        """Integer count with locale grouping."""
        return format_decimal(value, format="#,##0", locale=self.config.locale)
