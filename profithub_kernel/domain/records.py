"""
Records -- flat, immutable inputs shared by every engine.

Responsibility:
    Defines the snapshot shapes callers hand to the engines: DatedRecord
    (the generic row the Aggregator groups), CashFlowLine (a dated inflow or
    outflow), and PeriodRange (an inclusive date window).

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Engines import these; selectors
    build them from ORM rows.

Invariants enforced:
    - PeriodRange.start <= PeriodRange.end.
    - Record dates are calendar dates; datetimes are truncated on entry.
    - dimension_keys is an immutable mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from profithub_kernel.domain.values import Money
from profithub_kernel.exceptions import InvalidInputError

# Group key used when a record lacks a value for a grouping dimension.
UNASSIGNED = "unassigned"

# Pseudo-dimension that reads DatedRecord.category.
CATEGORY_DIMENSION = "category"


def as_calendar_date(value: Any, field_name: str = "date") -> date:
    """
    Coerce ``value`` to a date with no time-of-day component.

    Raises:
        InvalidInputError: if ``value`` is neither a date nor a datetime.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidInputError(field_name, value, "expected a calendar date")


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, str | None]:
    if not mapping:
        return MappingProxyType({})
    return MappingProxyType(
        {str(k): (None if v is None else str(v)) for k, v in mapping.items()}
    )


@dataclass(frozen=True)
class PeriodRange:
    """
    Inclusive date window ``[start, end]``.

    Raises:
        InvalidInputError: if start is after end.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_calendar_date(self.start, "start"))
        object.__setattr__(self, "end", as_calendar_date(self.end, "end"))
        if self.start > self.end:
            raise InvalidInputError(
                "end", self.end.isoformat(), f"before start {self.start.isoformat()}"
            )

    def contains(self, day: date) -> bool:
        """True if ``day`` falls inside the window (both ends inclusive)."""
        day = as_calendar_date(day, "day")
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        """Number of calendar days covered, counting both ends."""
        return (self.end - self.start).days + 1

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class DatedRecord:
    """
    Generic flat record fed to the Aggregator.

    A budget line, an actual cost, an open receivable or a cash-flow line
    all reduce to this shape: a date, an amount, a category and free-form
    string dimensions (``project_id``, ``client_id``, ...).
    """

    date: date
    amount: Money
    category: str | None = None
    dimension_keys: Mapping[str, str | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", as_calendar_date(self.date))
        if not isinstance(self.amount, Money):
            raise InvalidInputError("amount", self.amount, "expected Money")
        object.__setattr__(self, "dimension_keys", _freeze(self.dimension_keys))

    def dimension(self, name: str) -> str:
        """
        Value of a grouping dimension, or ``UNASSIGNED`` when absent.

        ``category`` reads the record's category; any other name reads
        ``dimension_keys``.  Blank strings count as absent.
        """
        if name == CATEGORY_DIMENSION:
            raw = self.category
        else:
            raw = self.dimension_keys.get(name)
        if raw is None or not str(raw).strip():
            return UNASSIGNED
        return str(raw)

    def with_dimensions(self, **extra: Any) -> DatedRecord:
        """Copy of this record with additional or replaced dimensions."""
        merged = dict(self.dimension_keys)
        merged.update(extra)
        return DatedRecord(
            date=self.date,
            amount=self.amount,
            category=self.category,
            dimension_keys=merged,
        )


class FlowDirection(str, Enum):
    """Direction of a projected cash movement."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


@dataclass(frozen=True)
class CashFlowLine:
    """
    A dated, projected cash movement.

    ``amount`` is the unsigned magnitude; ``direction`` carries the sign.
    """

    date: date
    amount: Money
    direction: FlowDirection
    category: str | None = None
    dimension_keys: Mapping[str, str | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", as_calendar_date(self.date))
        if not isinstance(self.amount, Money):
            raise InvalidInputError("amount", self.amount, "expected Money")
        if self.amount.is_negative:
            raise InvalidInputError(
                "amount", str(self.amount), "cash flow amounts are unsigned"
            )
        object.__setattr__(self, "direction", FlowDirection(self.direction))
        object.__setattr__(self, "dimension_keys", _freeze(self.dimension_keys))

    @property
    def signed_amount(self) -> Money:
        """Positive for inflows, negative for outflows."""
        return self.amount if self.direction == FlowDirection.INFLOW else -self.amount

    def to_record(self) -> DatedRecord:
        """As a DatedRecord carrying ``flow_type`` as a dimension."""
        dims = dict(self.dimension_keys)
        dims["flow_type"] = self.direction.value
        return DatedRecord(
            date=self.date,
            amount=self.amount,
            category=self.category,
            dimension_keys=dims,
        )
