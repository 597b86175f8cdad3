"""
Treasury ORM Models (``profithub_modules.treasury.orm``).

Responsibility
--------------
SQLAlchemy persistence models for bank accounts, projected cash flows and
recorded cash-position snapshots.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``profithub_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``profithub_kernel``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from profithub_kernel.db.base import TrackedBase


class BankAccountModel(TrackedBase):
    """
    ORM model for a bank account.  ``current_balance`` is the opening
    balance of every position calculation.

    Table: ``bank_accounts``
    """

    __tablename__ = "bank_accounts"

    bank_name: Mapped[str] = mapped_column(String(200))
    bank_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    agency_branch: Mapped[str] = mapped_column(String(20), default="")
    account_number: Mapped[str] = mapped_column(String(50))
    account_holder: Mapped[str] = mapped_column(String(200), default="")
    account_type: Mapped[str] = mapped_column(String(20), default="checking")
    currency: Mapped[str] = mapped_column(String(3))
    current_balance: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    available_balance: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    overdraft_limit: Mapped[Decimal | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")

    __table_args__ = (
        Index("idx_bank_accounts_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<BankAccountModel(id={self.id!r}, bank_name={self.bank_name!r}, "
            f"currency={self.currency!r})>"
        )


class CashFlowProjectionModel(TrackedBase):
    """
    ORM model for one projected inflow or outflow.

    ``amount`` is unsigned; ``flow_type`` is ``inflow`` or ``outflow``.

    Table: ``cash_flow_projections``
    """

    __tablename__ = "cash_flow_projections"

    projection_date: Mapped[date]
    bank_account_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("bank_accounts.id"), nullable=True,
    )
    flow_type: Mapped[str] = mapped_column(String(10))
    category: Mapped[str] = mapped_column(String(100))
    amount: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    scenario_type: Mapped[str] = mapped_column(String(20), default="base")
    probability: Mapped[Decimal | None] = mapped_column(nullable=True)
    source_type: Mapped[str] = mapped_column(String(50), default="manual")
    source_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        Index("idx_cash_flow_projections_date_scenario", "projection_date", "scenario_type"),
    )


class CashPositionSnapshotModel(TrackedBase):
    """
    ORM model for a recorded cash position.  ``bank_account_id`` is NULL
    for the consolidated row of a currency.

    Table: ``cash_position_snapshots``
    """

    __tablename__ = "cash_position_snapshots"

    snapshot_date: Mapped[date]
    bank_account_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("bank_accounts.id"), nullable=True,
    )
    scenario_type: Mapped[str] = mapped_column(String(20))
    currency: Mapped[str] = mapped_column(String(3))
    opening_balance: Mapped[Decimal]
    inflows: Mapped[Decimal]
    outflows: Mapped[Decimal]
    closing_balance: Mapped[Decimal]
    projected_balance_7d: Mapped[Decimal | None] = mapped_column(nullable=True)
    projected_balance_30d: Mapped[Decimal | None] = mapped_column(nullable=True)
    projected_balance_90d: Mapped[Decimal | None] = mapped_column(nullable=True)

    __table_args__ = (
        Index("idx_cash_position_snapshots_date", "snapshot_date"),
    )

    def to_dto(self):
        from profithub_modules.treasury.models import CashPositionSnapshot
        return CashPositionSnapshot(
            id=self.id,
            snapshot_date=self.snapshot_date,
            bank_account_id=self.bank_account_id,
            scenario_type=self.scenario_type,
            currency=self.currency,
            opening_balance=self.opening_balance,
            inflows=self.inflows,
            outflows=self.outflows,
            closing_balance=self.closing_balance,
            projected_balance_7d=self.projected_balance_7d,
            projected_balance_30d=self.projected_balance_30d,
            projected_balance_90d=self.projected_balance_90d,
            calculated_by=self.created_by_id,
        )

    @classmethod
    def from_dto(cls, dto) -> "CashPositionSnapshotModel":
        return cls(
            id=dto.id,
            snapshot_date=dto.snapshot_date,
            bank_account_id=dto.bank_account_id,
            scenario_type=dto.scenario_type,
            currency=dto.currency,
            opening_balance=dto.opening_balance,
            inflows=dto.inflows,
            outflows=dto.outflows,
            closing_balance=dto.closing_balance,
            projected_balance_7d=dto.projected_balance_7d,
            projected_balance_30d=dto.projected_balance_30d,
            projected_balance_90d=dto.projected_balance_90d,
            created_by_id=dto.calculated_by,
        )
