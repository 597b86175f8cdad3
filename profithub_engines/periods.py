"""
profithub_engines.periods -- Named period tokens resolved to date windows.

Responsibility:
    Turn a period token such as ``current-month`` plus a reference date into
    an inclusive ``PeriodRange``.  Every report screen filters its rows
    through one of these windows.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    The reference date is always passed in; the resolver never reads a clock.

Invariants enforced:
    - Resolved ranges always satisfy start <= end.
    - Month ends honour leap years (February 2024 ends on the 29th).
    - ``next-30-days`` is pure day arithmetic: reference .. reference + 30.

Failure modes:
    - InvalidPeriodToken for any token outside ``PeriodToken``.
    - InvalidInputError if the reference is not a date.

Usage:
    from profithub_engines.periods import PeriodResolver

    period = PeriodResolver().resolve("current-quarter", date(2024, 8, 10))
    # PeriodRange(2024-07-01, 2024-09-30)
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from enum import Enum

from profithub_kernel.domain.records import PeriodRange, as_calendar_date
from profithub_kernel.exceptions import InvalidPeriodToken
from profithub_kernel.logging_config import get_logger
from profithub_engines.tracer import traced_engine

logger = get_logger("engines.periods")


class PeriodToken(str, Enum):
    """Supported period names."""

    CURRENT_WEEK = "current-week"
    CURRENT_MONTH = "current-month"
    CURRENT_QUARTER = "current-quarter"
    CURRENT_YEAR = "current-year"
    NEXT_30_DAYS = "next-30-days"

    @classmethod
    def parse(cls, token: PeriodToken | str) -> PeriodToken:
        """Accept an enum member or its string value."""
        if isinstance(token, cls):
            return token
        try:
            return cls(token)
        except ValueError:
            raise InvalidPeriodToken(token, tuple(t.value for t in cls)) from None


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


class PeriodResolver:
    """
    Resolve period tokens against a reference date.

    Contract:
        Pure; the same (token, reference) always yields the same range.
    """

    @traced_engine("periods", "1.0", fingerprint_fields=("token", "reference"))
    def resolve(self, token: PeriodToken | str, reference: date) -> PeriodRange:
        """
        Resolve ``token`` relative to ``reference``.

        Raises:
            InvalidPeriodToken: unknown token.
            InvalidInputError: reference is not a date.
        """
        period_token = PeriodToken.parse(token)
        ref = as_calendar_date(reference, "reference")

        if period_token is PeriodToken.CURRENT_WEEK:
            # Weeks start on Sunday.
            start = ref - timedelta(days=(ref.weekday() + 1) % 7)
            period = PeriodRange(start, start + timedelta(days=6))
        elif period_token is PeriodToken.CURRENT_MONTH:
            period = PeriodRange(date(ref.year, ref.month, 1), _month_end(ref.year, ref.month))
        elif period_token is PeriodToken.CURRENT_QUARTER:
            first_month = ((ref.month - 1) // 3) * 3 + 1
            period = PeriodRange(
                date(ref.year, first_month, 1),
                _month_end(ref.year, first_month + 2),
            )
        elif period_token is PeriodToken.CURRENT_YEAR:
            period = PeriodRange(date(ref.year, 1, 1), date(ref.year, 12, 31))
        else:
            period = PeriodRange(ref, ref + timedelta(days=30))

        logger.debug("period_resolved", extra={
            "token": period_token.value,
            "reference": ref.isoformat(),
            "start": period.start.isoformat(),
            "end": period.end.isoformat(),
        })
        return period
