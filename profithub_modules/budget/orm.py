"""
Budget ORM Models (``profithub_modules.budget.orm``).

Responsibility
--------------
SQLAlchemy persistence models for budget lines and the actual cost lines
they are compared against.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``profithub_kernel.db.base``.
MUST NOT be imported by ``profithub_kernel``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from profithub_kernel.db.base import TrackedBase


class BudgetModel(TrackedBase):
    """
    ORM model for one budget line.

    Only ``active`` lines whose validity window overlaps the analysed
    period take part in budget-vs-actual.

    Table: ``budgets``
    """

    __tablename__ = "budgets"

    category: Mapped[str] = mapped_column(String(100))
    subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    project_id: Mapped[UUID | None] = mapped_column(ForeignKey("projects.id"), nullable=True)
    cost_center_id: Mapped[UUID | None] = mapped_column(nullable=True)
    amount: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    budget_type: Mapped[str] = mapped_column(String(20), default="operational")
    fiscal_year: Mapped[int]
    valid_from: Mapped[date]
    valid_to: Mapped[date | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")
    version: Mapped[int] = mapped_column(default=1)

    __table_args__ = (
        Index("idx_budgets_fiscal_year_status", "fiscal_year", "status"),
        Index("idx_budgets_project_id", "project_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<BudgetModel(id={self.id!r}, category={self.category!r}, "
            f"amount={self.amount!r})>"
        )


class ActualModel(TrackedBase):
    """
    ORM model for one actual cost line.

    ``cost_type`` separates fixed costs (rent, salaries, overhead) from
    variable ones; undercoverage only considers ``fixed``.

    Table: ``actuals``
    """

    __tablename__ = "actuals"

    actual_date: Mapped[date]
    category: Mapped[str] = mapped_column(String(100))
    subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    cost_type: Mapped[str] = mapped_column(String(20), default="variable")
    project_id: Mapped[UUID | None] = mapped_column(ForeignKey("projects.id"), nullable=True)
    cost_center_id: Mapped[UUID | None] = mapped_column(nullable=True)
    amount: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    source_type: Mapped[str] = mapped_column(String(50), default="manual")
    source_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        Index("idx_actuals_actual_date", "actual_date"),
        Index("idx_actuals_project_id", "project_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ActualModel(id={self.id!r}, category={self.category!r}, "
            f"amount={self.amount!r}, date={self.actual_date!r})>"
        )
