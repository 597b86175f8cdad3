"""Read-only queries over projects, time entries, expenses and billings."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from profithub_kernel.domain.records import DatedRecord, PeriodRange
from profithub_kernel.domain.values import Money
from profithub_kernel.exceptions import ProjectNotFoundError
from profithub_kernel.selectors.base import BaseSelector
from profithub_modules.projects.models import PocCalculation, UndercoverageCalculation
from profithub_modules.projects.orm import (
    PocCalculationModel,
    ProjectExpenseModel,
    ProjectModel,
    TimeEntryModel,
    UndercoverageCalculationModel,
)
from profithub_modules.receivables.orm import InvoiceModel

APPROVED_STATUS = "approved"
CANCELLED_INVOICE_STATUSES = ("cancelled",)


class ProjectSelector(BaseSelector[ProjectModel]):
    """Project cost and effort inputs for POC and undercoverage."""

    def get_project(self, project_id: UUID) -> ProjectModel:
        """
        Raises:
            ProjectNotFoundError: no project row with ``project_id``.
        """
        project = self.session.get(ProjectModel, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def worked_hours(self, project_id: UUID, cutoff_date: date) -> Decimal:
        """Approved hours booked on or before ``cutoff_date``."""
        stmt = (
            select(TimeEntryModel.hours_worked)
            .where(TimeEntryModel.project_id == project_id)
            .where(TimeEntryModel.status == APPROVED_STATUS)
            .where(TimeEntryModel.work_date <= cutoff_date)
        )
        return self._decimal_total(stmt)

    def expense_records(self, project_id: UUID, cutoff_date: date) -> list[DatedRecord]:
        """Approved expenses dated on or before ``cutoff_date``."""
        stmt = (
            select(ProjectExpenseModel)
            .where(ProjectExpenseModel.project_id == project_id)
            .where(ProjectExpenseModel.status == APPROVED_STATUS)
            .where(ProjectExpenseModel.expense_date <= cutoff_date)
            .order_by(ProjectExpenseModel.expense_date)
        )
        return [
            DatedRecord(
                date=row.expense_date,
                amount=Money.of(row.amount, row.currency),
                category=row.expense_type,
                dimension_keys={
                    "project_id": row.project_id,
                    "cost_center_id": row.cost_center_id,
                },
            )
            for row in self._rows(stmt)
        ]

    def productive_hours(self, period: PeriodRange, project_id: UUID | None = None) -> Decimal:
        """Approved hours booked inside ``period``."""
        stmt = (
            select(TimeEntryModel.hours_worked)
            .where(TimeEntryModel.status == APPROVED_STATUS)
            .where(TimeEntryModel.work_date >= period.start)
            .where(TimeEntryModel.work_date <= period.end)
        )
        if project_id is not None:
            stmt = stmt.where(TimeEntryModel.project_id == project_id)
        return self._decimal_total(stmt)

    def billing_records(self, period: PeriodRange, project_id: UUID | None = None) -> list[DatedRecord]:
        """Net amounts of invoices issued inside ``period``, cancelled ones excluded."""
        stmt = (
            select(InvoiceModel)
            .where(InvoiceModel.issue_date >= period.start)
            .where(InvoiceModel.issue_date <= period.end)
            .where(InvoiceModel.invoice_status.not_in(CANCELLED_INVOICE_STATUSES))
            .order_by(InvoiceModel.issue_date)
        )
        if project_id is not None:
            stmt = stmt.where(InvoiceModel.project_id == project_id)
        return [
            DatedRecord(
                date=row.issue_date,
                amount=Money.of(row.net_amount, row.currency),
                category="billing",
                dimension_keys={"project_id": row.project_id, "client_id": row.client_id},
            )
            for row in self._rows(stmt)
        ]

    def poc_history(self, project_id: UUID) -> list[PocCalculation]:
        stmt = (
            select(PocCalculationModel)
            .where(PocCalculationModel.project_id == project_id)
            .order_by(PocCalculationModel.calculation_date, PocCalculationModel.created_at)
        )
        return [row.to_dto() for row in self._rows(stmt)]

    def undercoverage_history(self, period: PeriodRange) -> list[UndercoverageCalculation]:
        stmt = (
            select(UndercoverageCalculationModel)
            .where(UndercoverageCalculationModel.period_start == period.start)
            .where(UndercoverageCalculationModel.period_end == period.end)
            .order_by(UndercoverageCalculationModel.created_at)
        )
        return [row.to_dto() for row in self._rows(stmt)]
