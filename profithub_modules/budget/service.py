"""
profithub_modules.budget.service
================================

Responsibility:
    Budget-vs-actual analysis for a named period, optionally narrowed to
    one project.  Resolves the period, reads both sides through
    ``BudgetSelector`` and delegates the comparison to
    ``VarianceCalculator.budget_vs_actual``.

Architecture:
    Module layer (profithub_modules).  Read-only: never writes, never
    commits.

Failure modes:
    - InvalidPeriodToken for an unknown period token.
    - MixedCurrencyError when budgets and actuals mix currencies.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from profithub_config import AnalyticsConfig, get_active_config
from profithub_config.bridges import build_variance_calculator
from profithub_engines.periods import PeriodResolver, PeriodToken
from profithub_engines.variance import DEFAULT_BUDGET_GROUPING, BudgetVarianceReport
from profithub_kernel.domain.clock import Clock, SystemClock
from profithub_kernel.logging_config import get_logger
from profithub_modules.budget.selectors import BudgetSelector

logger = get_logger("modules.budget.service")


class BudgetService:
    """Budget-vs-actual over stored budgets and actuals."""

    def __init__(
        self,
        session: Session,
        config: AnalyticsConfig | None = None,
        clock: Clock | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._variance = build_variance_calculator(self._config)
        self._periods = PeriodResolver()
        self._selector = BudgetSelector(session)

    def budget_vs_actual(
        self,
        period_token: PeriodToken | str = PeriodToken.CURRENT_YEAR,
        reference: date | None = None,
        project_id: UUID | None = None,
        group_by: Sequence[str] | str = DEFAULT_BUDGET_GROUPING,
    ) -> BudgetVarianceReport:
        """
        Compare active budgets with actuals for the resolved period.

        Raises:
            InvalidPeriodToken: unknown ``period_token``.
            MixedCurrencyError: the compared lines mix currencies.
        """
        period = self._periods.resolve(period_token, reference or self._clock.today())
        budgets = self._selector.budget_records(period, project_id=project_id)
        actuals = self._selector.actual_records(period, project_id=project_id)

        report = self._variance.budget_vs_actual(
            budget_records=budgets,
            actual_records=actuals,
            group_by=group_by,
        )
        logger.info("budget_vs_actual_reported", extra={
            "period": str(period),
            "project_id": str(project_id) if project_id else None,
            "budget_line_count": len(budgets),
            "actual_line_count": len(actuals),
            "report_line_count": len(report.lines),
        })
        return report
