"""
Values -- Immutable, self-validating money value objects.

Responsibility:
    Provides Currency and Money, the types every engine computation is
    expressed in.  They replace bare Decimal/str pairs wherever a monetary
    amount appears.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every engine.  No outward dependencies except
    profithub_kernel.domain.currency and profithub_kernel.exceptions.

Invariants enforced:
    - Amounts are always Decimal; floats are rejected at construction.
    - Currency codes are validated ISO 4217 codes.
    - Arithmetic and comparison never mix currencies: a mismatch raises
      MixedCurrencyError instead of silently coercing.

Failure modes:
    - InvalidCurrencyError on an unknown currency code.
    - InvalidInputError on a float or unparseable amount.
    - MixedCurrencyError when arithmetic mixes currencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

from profithub_kernel.domain.currency import CurrencyRegistry
from profithub_kernel.exceptions import (
    InvalidCurrencyError,
    InvalidInputError,
    MixedCurrencyError,
)


def _to_decimal(value: Decimal | int | str, field: str) -> Decimal:
    """Convert an exact numeric input to Decimal.  Floats are rejected."""
    if isinstance(value, (bool, float)):
        raise InvalidInputError(field, value, "must be Decimal, int or str")
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise InvalidInputError(field, value, "not a decimal number") from e
    if not number.is_finite():
        raise InvalidInputError(field, str(value), "must be a finite number")
    return number


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    Contract:
        Wraps a three-letter code, normalized to upper case and validated
        against CurrencyRegistry on construction.

    Non-goals:
        - Does NOT store exchange rates or perform conversion.
    """

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.upper().strip() if isinstance(self.code, str) else ""
        if not CurrencyRegistry.is_valid(normalized):
            raise InvalidCurrencyError(str(self.code))
        object.__setattr__(self, "code", normalized)

    @property
    def decimal_places(self) -> int:
        return CurrencyRegistry.get_decimal_places(self.code)

    @property
    def quantum(self) -> Decimal:
        """Rounding quantum derived from the currency's decimal places."""
        return CurrencyRegistry.get_quantum(self.code)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@total_ordering
@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its Currency; the two are never
        separated.

    Guarantees:
        - Immutable and hashable.
        - ``amount`` is always a Decimal.
        - ``+``, ``-`` and ordering comparisons require the same currency.

    Non-goals:
        - Does NOT convert currencies.
        - Does NOT auto-round; callers call ``round()`` explicitly.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _to_decimal(self.amount, "amount"))
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """Factory: ``Money.of("100.00", "EUR")``."""
        return cls(amount=_to_decimal(amount, "amount"), currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Zero amount in the given currency."""
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    @property
    def is_positive(self) -> bool:
        return self.amount > Decimal("0")

    @property
    def is_negative(self) -> bool:
        return self.amount < Decimal("0")

    def round(self, rounding: str = ROUND_HALF_UP) -> Money:
        """Round to the currency's decimal places (half-up by default)."""
        rounded = self.amount.quantize(self.currency.quantum, rounding=rounding)
        return Money(amount=rounded, currency=self.currency)

    def _peer_amount(self, other: object, operation: str) -> Decimal | None:
        """``other.amount`` if ``other`` is Money in this currency; None if not Money."""
        if not isinstance(other, Money):
            return None
        if other.currency != self.currency:
            raise MixedCurrencyError(self.currency.code, other.currency.code, operation)
        return other.amount

    def _scalar(self, value: object, name: str) -> Decimal | None:
        if isinstance(value, (Money, float)):
            return None
        return _to_decimal(value, name)

    def _with_amount(self, amount: Decimal) -> Money:
        return Money(amount=amount, currency=self.currency)

    def __add__(self, other: Money) -> Money:
        amount = self._peer_amount(other, "addition")
        return NotImplemented if amount is None else self._with_amount(self.amount + amount)

    def __sub__(self, other: Money) -> Money:
        amount = self._peer_amount(other, "subtraction")
        return NotImplemented if amount is None else self._with_amount(self.amount - amount)

    def __neg__(self) -> Money:
        return self._with_amount(-self.amount)

    def __abs__(self) -> Money:
        return self._with_amount(abs(self.amount))

    def __mul__(self, factor: Decimal | int | str) -> Money:
        scalar = self._scalar(factor, "factor")
        return NotImplemented if scalar is None else self._with_amount(self.amount * scalar)

    __rmul__ = __mul__

    def __truediv__(self, divisor: Decimal | int | str) -> Money:
        scalar = self._scalar(divisor, "divisor")
        return NotImplemented if scalar is None else self._with_amount(self.amount / scalar)

    def __lt__(self, other: Money) -> bool:
        amount = self._peer_amount(other, "comparison")
        return NotImplemented if amount is None else self.amount < amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"


def sum_money(amounts: list[Money] | tuple[Money, ...], currency: str | Currency) -> Money:
    """
    Sum Money values, starting from zero in ``currency``.

    Raises:
        MixedCurrencyError: if any amount is in a different currency.
    """
    total = Money.zero(currency)
    for amount in amounts:
        total = total + amount
    return total


PERCENT_QUANTUM = Decimal("0.01")
HUNDRED = Decimal("100")


def quantize_percent(value: Decimal) -> Decimal:
    """Round a percentage to two decimal places, half-up."""
    return value.quantize(PERCENT_QUANTUM, rounding=ROUND_HALF_UP)


def percent_of(part: Decimal, whole: Decimal, default: Decimal = Decimal("0")) -> Decimal:
    """
    ``part / whole * 100`` rounded to two places.

    Returns ``default`` (unrounded) when ``whole`` is zero.
    """
    if whole == 0:
        return default
    return quantize_percent(part / whole * HUNDRED)
