"""
Receivables ORM Models (``profithub_modules.receivables.orm``).

Responsibility
--------------
SQLAlchemy persistence models for client invoices and the aging snapshots
recorded from them.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``profithub_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``profithub_kernel``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from profithub_kernel.db.base import TrackedBase


class InvoiceModel(TrackedBase):
    """
    ORM model for a client invoice.

    An invoice is an open receivable while its payment status is not
    ``paid`` and it has not been cancelled.

    Table: ``invoices``
    """

    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(String(50))
    client_id: Mapped[UUID]
    project_id: Mapped[UUID | None] = mapped_column(ForeignKey("projects.id"), nullable=True)
    issue_date: Mapped[date]
    due_date: Mapped[date]
    gross_amount: Mapped[Decimal]
    net_amount: Mapped[Decimal]
    tax_amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    currency: Mapped[str] = mapped_column(String(3))
    invoice_status: Mapped[str] = mapped_column(String(20), default="issued")
    payment_status: Mapped[str] = mapped_column(String(20), default="pending")

    __table_args__ = (
        UniqueConstraint("invoice_number", name="uq_invoices_invoice_number"),
        Index("idx_invoices_client_id", "client_id"),
        Index("idx_invoices_due_date", "due_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<InvoiceModel(id={self.id!r}, number={self.invoice_number!r}, "
            f"payment_status={self.payment_status!r})>"
        )


class AgingSnapshotModel(TrackedBase):
    """
    ORM model for one invoice's position in an aging snapshot.

    Table: ``aging_snapshots``
    """

    __tablename__ = "aging_snapshots"

    snapshot_date: Mapped[date]
    invoice_id: Mapped[UUID] = mapped_column(ForeignKey("invoices.id"))
    client_id: Mapped[UUID]
    aging_bucket: Mapped[str] = mapped_column(String(10))
    days_overdue: Mapped[int]
    overdue_amount: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))

    __table_args__ = (
        UniqueConstraint("snapshot_date", "invoice_id", name="uq_aging_snapshots_date_invoice"),
        Index("idx_aging_snapshots_snapshot_date", "snapshot_date"),
    )

    def to_dto(self):
        from profithub_modules.receivables.models import AgingSnapshotLine
        return AgingSnapshotLine(
            id=self.id,
            snapshot_date=self.snapshot_date,
            invoice_id=self.invoice_id,
            client_id=self.client_id,
            aging_bucket=self.aging_bucket,
            days_overdue=self.days_overdue,
            overdue_amount=self.overdue_amount,
            currency=self.currency,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "AgingSnapshotModel":
        return cls(
            id=dto.id,
            snapshot_date=dto.snapshot_date,
            invoice_id=dto.invoice_id,
            client_id=dto.client_id,
            aging_bucket=dto.aging_bucket,
            days_overdue=dto.days_overdue,
            overdue_amount=dto.overdue_amount,
            currency=dto.currency,
            created_by_id=created_by_id,
        )
