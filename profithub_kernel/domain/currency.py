"""
Currency -- ISO 4217 codes the back office invoices, budgets and banks in.

Only the minor-unit count matters to the analytics: it fixes the rounding
quantum of projected balances.  Codes missing from the table are rejected
by ``Currency``; the lookup helpers fall back to two decimals.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar

DEFAULT_DECIMAL_PLACES = 2


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    decimal_places: int
    name: str

    @property
    def quantum(self) -> Decimal:
        """``Decimal("0.01")`` for two places, ``Decimal("1")`` for none."""
        return Decimal(1).scaleb(-self.decimal_places)


# code, minor units, name
_ISO_4217_TABLE: tuple[tuple[str, int, str], ...] = (
    # operating currencies
    ("BRL", 2, "Brazilian Real"),
    ("USD", 2, "US Dollar"),
    ("EUR", 2, "Euro"),
    ("GBP", 2, "Pound Sterling"),
    ("CHF", 2, "Swiss Franc"),
    ("CAD", 2, "Canadian Dollar"),
    ("AUD", 2, "Australian Dollar"),
    # Latin America
    ("ARS", 2, "Argentine Peso"),
    ("CLP", 0, "Chilean Peso"),
    ("COP", 2, "Colombian Peso"),
    ("MXN", 2, "Mexican Peso"),
    ("PEN", 2, "Peruvian Sol"),
    ("PYG", 0, "Paraguayan Guarani"),
    ("UYU", 2, "Uruguayan Peso"),
    # Lusophone Africa
    ("AOA", 2, "Angolan Kwanza"),
    ("CVE", 2, "Cape Verdean Escudo"),
    ("MZN", 2, "Mozambican Metical"),
    # Asia-Pacific
    ("CNY", 2, "Chinese Yuan"),
    ("INR", 2, "Indian Rupee"),
    ("JPY", 0, "Japanese Yen"),
    ("KRW", 0, "South Korean Won"),
    ("SGD", 2, "Singapore Dollar"),
    # Europe outside the euro
    ("DKK", 2, "Danish Krone"),
    ("NOK", 2, "Norwegian Krone"),
    ("PLN", 2, "Polish Zloty"),
    ("SEK", 2, "Swedish Krona"),
    # three minor units
    ("BHD", 3, "Bahraini Dinar"),
    ("KWD", 3, "Kuwaiti Dinar"),
    ("OMR", 3, "Omani Rial"),
)


class CurrencyRegistry:
    """Read-only lookup over the ISO 4217 table above."""

    _by_code: ClassVar[dict[str, CurrencyInfo]] = {
        code: CurrencyInfo(code, places, name) for code, places, name in _ISO_4217_TABLE
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return code in cls._by_code

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        return cls._by_code.get(code)

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        info = cls._by_code.get(code)
        return DEFAULT_DECIMAL_PLACES if info is None else info.decimal_places

    @classmethod
    def get_quantum(cls, code: str) -> Decimal:
        return Decimal(1).scaleb(-cls.get_decimal_places(code))

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        return frozenset(cls._by_code)
