"""
tests/test_formatting_service.py

Pytest unit tests for locale-aware display formatting.
"""

from __future__ import annotations

from app.services.formatting_service import NumberFormatters, resolve_locale


class TestNumberFormatters:
    def setup_method(self) -> None:
        self.formatters = NumberFormatters("USD", "en_US")

    def test_compact_number(self) -> None:
        assert self.formatters.compact_number(12_300) == "12.3K"
        assert self.formatters.compact_number(500) == "500"

    def test_compact_currency(self) -> None:
        assert self.formatters.compact_currency(1_230_000) == "$1.23M"

    def test_full_forms(self) -> None:
        assert self.formatters.number(1234) == "1,234"
        assert self.formatters.currency(140) == "$140.00"

    def test_currency_code_is_upper_cased(self) -> None:
        assert NumberFormatters("usd", "en_US").currency_code == "USD"

    def test_other_locale_and_currency(self) -> None:
        formatters = NumberFormatters("BRL", "pt_BR")

        formatted = formatters.currency(1234.5)

        assert "R$" in formatted
        assert "1.234,50" in formatted


def test_resolve_locale_accepts_hyphenated_tags() -> None:
    locale = resolve_locale("pt-BR")

    assert (locale.language, locale.territory) == ("pt", "BR")
