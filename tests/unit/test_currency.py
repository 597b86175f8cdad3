"""Unit tests for the ISO 4217 currency registry and Currency value object."""

from decimal import Decimal

import pytest

from profithub_kernel.domain.currency import CurrencyRegistry
from profithub_kernel.domain.values import Currency
from profithub_kernel.exceptions import InvalidCurrencyError


class TestCurrencyRegistry:
    def test_operating_currencies_registered(self):
        for code in ("BRL", "USD", "EUR"):
            assert CurrencyRegistry.is_valid(code)

    def test_unknown_code_invalid(self):
        assert not CurrencyRegistry.is_valid("ZZZ")

    def test_decimal_places(self):
        assert CurrencyRegistry.get_decimal_places("BRL") == 2
        assert CurrencyRegistry.get_decimal_places("CLP") == 0
        assert CurrencyRegistry.get_decimal_places("BHD") == 3

    def test_quantum(self):
        assert CurrencyRegistry.get_quantum("BRL") == Decimal("0.01")
        assert CurrencyRegistry.get_quantum("JPY") == Decimal("1")
        assert CurrencyRegistry.get_quantum("OMR") == Decimal("0.001")

    def test_unknown_code_defaults_to_two_places(self):
        assert CurrencyRegistry.get_decimal_places("ZZZ") == 2
        assert CurrencyRegistry.get_info("ZZZ") is None

    def test_all_codes(self):
        assert "BRL" in CurrencyRegistry.all_codes()


class TestCurrency:
    def test_normalizes_case_and_whitespace(self):
        assert Currency(" usd ").code == "USD"

    def test_invalid_code_raises(self):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            Currency("XYZ")
        assert exc_info.value.code == "INVALID_CURRENCY"

    def test_invalid_code_is_value_error(self):
        with pytest.raises(ValueError):
            Currency("XYZ")

    def test_non_string_rejected(self):
        with pytest.raises(InvalidCurrencyError):
            Currency(986)

    def test_str(self):
        assert str(Currency("BRL")) == "BRL"

    def test_equality(self):
        assert Currency("brl") == Currency("BRL")
