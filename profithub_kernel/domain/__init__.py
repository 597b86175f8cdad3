"""Pure domain types: money, records, clock."""

from profithub_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from profithub_kernel.domain.records import (
    CATEGORY_DIMENSION,
    UNASSIGNED,
    CashFlowLine,
    DatedRecord,
    FlowDirection,
    PeriodRange,
    as_calendar_date,
)
from profithub_kernel.domain.values import Currency, Money, sum_money

__all__ = [
    "CATEGORY_DIMENSION",
    "UNASSIGNED",
    "CashFlowLine",
    "Clock",
    "Currency",
    "DatedRecord",
    "DeterministicClock",
    "FlowDirection",
    "Money",
    "PeriodRange",
    "SystemClock",
    "as_calendar_date",
    "sum_money",
]
