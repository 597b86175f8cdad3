"""Read-only queries over budgets and actuals."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_, select

from profithub_kernel.domain.records import DatedRecord, PeriodRange
from profithub_kernel.domain.values import Money
from profithub_kernel.selectors.base import BaseSelector
from profithub_modules.budget.orm import ActualModel, BudgetModel

ACTIVE_BUDGET_STATUS = "active"
FIXED_COST_TYPE = "fixed"


class BudgetSelector(BaseSelector[BudgetModel]):
    """Budget and actual lines as engine records."""

    def budget_records(
        self,
        period: PeriodRange,
        project_id: UUID | None = None,
    ) -> list[DatedRecord]:
        """Active budget lines whose validity window overlaps ``period``."""
        stmt = (
            select(BudgetModel)
            .where(BudgetModel.status == ACTIVE_BUDGET_STATUS)
            .where(BudgetModel.valid_from <= period.end)
            .where(or_(BudgetModel.valid_to.is_(None), BudgetModel.valid_to >= period.start))
            .order_by(BudgetModel.valid_from)
        )
        if project_id is not None:
            stmt = stmt.where(BudgetModel.project_id == project_id)
        return [
            DatedRecord(
                date=row.valid_from,
                amount=Money.of(row.amount, row.currency),
                category=row.category,
                dimension_keys={
                    "project_id": row.project_id,
                    "cost_center_id": row.cost_center_id,
                    "subcategory": row.subcategory,
                    "budget_type": row.budget_type,
                },
            )
            for row in self._rows(stmt)
        ]

    def actual_records(
        self,
        period: PeriodRange,
        project_id: UUID | None = None,
        cost_type: str | None = None,
    ) -> list[DatedRecord]:
        """Actual cost lines dated inside ``period``."""
        stmt = (
            select(ActualModel)
            .where(ActualModel.actual_date >= period.start)
            .where(ActualModel.actual_date <= period.end)
            .order_by(ActualModel.actual_date)
        )
        if project_id is not None:
            stmt = stmt.where(ActualModel.project_id == project_id)
        if cost_type is not None:
            stmt = stmt.where(ActualModel.cost_type == cost_type)
        return [
            DatedRecord(
                date=row.actual_date,
                amount=Money.of(row.amount, row.currency),
                category=row.category,
                dimension_keys={
                    "project_id": row.project_id,
                    "cost_center_id": row.cost_center_id,
                    "subcategory": row.subcategory,
                    "cost_type": row.cost_type,
                },
            )
            for row in self._rows(stmt)
        ]
