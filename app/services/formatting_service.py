"""
app/services/formatting_service.py

Locale-aware number and currency formatting for display strings.

Compact forms keep at most two fraction digits, e.g. ``12.3K`` and
``$1.23M`` in ``en_US``.
"""

from __future__ import annotations

from functools import lru_cache

from babel import Locale, default_locale
from babel.numbers import (
    format_compact_currency,
    format_compact_decimal,
    format_currency,
    format_decimal,
)

from app.config import get_display_settings

FALLBACK_LOCALE = "en_US"
COMPACT_FRACTION_DIGITS = 2


def resolve_locale(locale: str | None) -> Locale:
    """
    Parse *locale*, falling back to the runtime default (then ``en_US``).
    """

    identifier = locale or default_locale("LC_NUMERIC") or FALLBACK_LOCALE
    return Locale.parse(identifier.replace("-", "_"))


class NumberFormatters:
    """
    Formatters bound to one currency and locale.
    """

    def __init__(self, currency: str = "USD", locale: str | None = None) -> None:
        self.currency_code = currency.upper()
        self.locale = resolve_locale(locale)

    def compact_number(self, value: float) -> str:
        return format_compact_decimal(
            value,
            locale=self.locale,
            fraction_digits=COMPACT_FRACTION_DIGITS,
        )

    def compact_currency(self, value: float) -> str:
        return format_compact_currency(
            value,
            self.currency_code,
            locale=self.locale,
            fraction_digits=COMPACT_FRACTION_DIGITS,
        )

    def number(self, value: float) -> str:
        return format_decimal(value, locale=self.locale)

    def currency(self, value: float) -> str:
        return format_currency(value, self.currency_code, locale=self.locale)


@lru_cache(maxsize=1)
def get_number_formatters() -> NumberFormatters:
    settings = get_display_settings()
    return NumberFormatters(currency=settings.currency, locale=settings.locale)
