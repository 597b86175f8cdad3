"""
Project Control ORM Models (``profithub_modules.projects.orm``).

Responsibility
--------------
SQLAlchemy persistence models for projects, the time and expenses booked
against them, and the POC and undercoverage calculations recorded from
that data.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``profithub_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``profithub_kernel``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from profithub_kernel.db.base import TrackedBase


class ProjectModel(TrackedBase):
    """
    ORM model for a client project.

    ``budgeted_hours`` and ``budgeted_cost`` are the denominators of the
    POC calculation.

    Table: ``projects``
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(200))
    client_id: Mapped[UUID]
    cost_center_id: Mapped[UUID | None] = mapped_column(nullable=True)
    manager_id: Mapped[UUID | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")
    currency: Mapped[str] = mapped_column(String(3), default="BRL")
    start_date: Mapped[date | None] = mapped_column(nullable=True)
    end_date: Mapped[date | None] = mapped_column(nullable=True)
    budgeted_hours: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    budgeted_cost: Mapped[Decimal] = mapped_column(default=Decimal("0"))

    time_entries: Mapped[list["TimeEntryModel"]] = relationship(
        back_populates="project", cascade="all, delete-orphan",
    )
    expenses: Mapped[list["ProjectExpenseModel"]] = relationship(
        back_populates="project", cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_projects_client_id", "client_id"),
    )

    def __repr__(self) -> str:
        return f"<ProjectModel(id={self.id!r}, name={self.name!r}, status={self.status!r})>"


class TimeEntryModel(TrackedBase):
    """
    ORM model for hours booked on a project.

    Table: ``time_entries``
    """

    __tablename__ = "time_entries"

    project_id: Mapped[UUID] = mapped_column(ForeignKey("projects.id"))
    user_id: Mapped[UUID]
    work_date: Mapped[date]
    hours_worked: Mapped[Decimal]
    activity: Mapped[str] = mapped_column(String(200), default="")
    status: Mapped[str] = mapped_column(String(20), default="pending")

    project: Mapped["ProjectModel"] = relationship(back_populates="time_entries")

    __table_args__ = (
        Index("idx_time_entries_project_date", "project_id", "work_date"),
    )


class ProjectExpenseModel(TrackedBase):
    """
    ORM model for an expense booked on a project.

    Table: ``project_expenses``
    """

    __tablename__ = "project_expenses"

    project_id: Mapped[UUID] = mapped_column(ForeignKey("projects.id"))
    user_id: Mapped[UUID]
    expense_date: Mapped[date]
    expense_type: Mapped[str] = mapped_column(String(50))
    description: Mapped[str] = mapped_column(String(500), default="")
    amount: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    cost_center_id: Mapped[UUID | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")

    project: Mapped["ProjectModel"] = relationship(back_populates="expenses")

    __table_args__ = (
        Index("idx_project_expenses_project_date", "project_id", "expense_date"),
    )


class PocCalculationModel(TrackedBase):
    """
    ORM model for a recorded percentage-of-completion calculation.

    ``created_by_id`` is the user who ran the calculation.

    Table: ``poc_calculations``
    """

    __tablename__ = "poc_calculations"

    project_id: Mapped[UUID] = mapped_column(ForeignKey("projects.id"))
    calculation_date: Mapped[date]
    hours_based_poc: Mapped[Decimal]
    cost_based_poc: Mapped[Decimal]
    overall_poc: Mapped[Decimal]
    total_worked_hours: Mapped[Decimal]
    total_budgeted_hours: Mapped[Decimal]
    total_incurred_cost: Mapped[Decimal]
    total_budgeted_cost: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))

    __table_args__ = (
        Index("idx_poc_calculations_project_date", "project_id", "calculation_date"),
    )

    def to_dto(self):
        from profithub_modules.projects.models import PocCalculation
        return PocCalculation(
            id=self.id,
            project_id=self.project_id,
            calculation_date=self.calculation_date,
            hours_based_poc=self.hours_based_poc,
            cost_based_poc=self.cost_based_poc,
            overall_poc=self.overall_poc,
            total_worked_hours=self.total_worked_hours,
            total_budgeted_hours=self.total_budgeted_hours,
            total_incurred_cost=self.total_incurred_cost,
            total_budgeted_cost=self.total_budgeted_cost,
            currency=self.currency,
            calculated_by=self.created_by_id,
        )

    @classmethod
    def from_dto(cls, dto) -> "PocCalculationModel":
        return cls(
            id=dto.id,
            project_id=dto.project_id,
            calculation_date=dto.calculation_date,
            hours_based_poc=dto.hours_based_poc,
            cost_based_poc=dto.cost_based_poc,
            overall_poc=dto.overall_poc,
            total_worked_hours=dto.total_worked_hours,
            total_budgeted_hours=dto.total_budgeted_hours,
            total_incurred_cost=dto.total_incurred_cost,
            total_budgeted_cost=dto.total_budgeted_cost,
            currency=dto.currency,
            created_by_id=dto.calculated_by,
        )


class UndercoverageCalculationModel(TrackedBase):
    """
    ORM model for a recorded undercoverage calculation.

    Table: ``undercoverage_calculations``
    """

    __tablename__ = "undercoverage_calculations"

    calculation_date: Mapped[date]
    period_start: Mapped[date]
    period_end: Mapped[date]
    project_id: Mapped[UUID | None] = mapped_column(ForeignKey("projects.id"), nullable=True)
    cost_center_id: Mapped[UUID | None] = mapped_column(nullable=True)
    total_fixed_costs: Mapped[Decimal]
    billable_amount: Mapped[Decimal]
    coverage_percentage: Mapped[Decimal]
    undercovered_amount: Mapped[Decimal]
    productive_hours: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))

    __table_args__ = (
        Index("idx_undercoverage_period", "period_start", "period_end"),
    )

    def to_dto(self):
        from profithub_modules.projects.models import UndercoverageCalculation
        return UndercoverageCalculation(
            id=self.id,
            calculation_date=self.calculation_date,
            period_start=self.period_start,
            period_end=self.period_end,
            project_id=self.project_id,
            cost_center_id=self.cost_center_id,
            total_fixed_costs=self.total_fixed_costs,
            billable_amount=self.billable_amount,
            coverage_percentage=self.coverage_percentage,
            undercovered_amount=self.undercovered_amount,
            productive_hours=self.productive_hours,
            currency=self.currency,
            calculated_by=self.created_by_id,
        )

    @classmethod
    def from_dto(cls, dto) -> "UndercoverageCalculationModel":
        return cls(
            id=dto.id,
            calculation_date=dto.calculation_date,
            period_start=dto.period_start,
            period_end=dto.period_end,
            project_id=dto.project_id,
            cost_center_id=dto.cost_center_id,
            total_fixed_costs=dto.total_fixed_costs,
            billable_amount=dto.billable_amount,
            coverage_percentage=dto.coverage_percentage,
            undercovered_amount=dto.undercovered_amount,
            productive_hours=dto.productive_hours,
            currency=dto.currency,
            created_by_id=dto.calculated_by,
        )
