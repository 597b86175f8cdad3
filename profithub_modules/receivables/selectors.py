"""Read-only queries over invoices for the receivables module."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from profithub_kernel.domain.records import DatedRecord
from profithub_kernel.domain.values import Money
from profithub_kernel.selectors.base import BaseSelector
from profithub_modules.receivables.orm import AgingSnapshotModel, InvoiceModel

CLOSED_PAYMENT_STATUSES = ("paid",)
CANCELLED_INVOICE_STATUSES = ("cancelled",)


class ReceivablesSelector(BaseSelector[InvoiceModel]):
    """Open receivables as engine records."""

    def open_invoices(self, client_id: UUID | None = None) -> list[InvoiceModel]:
        stmt = (
            select(InvoiceModel)
            .where(InvoiceModel.payment_status.not_in(CLOSED_PAYMENT_STATUSES))
            .where(InvoiceModel.invoice_status.not_in(CANCELLED_INVOICE_STATUSES))
            .order_by(InvoiceModel.due_date, InvoiceModel.invoice_number)
        )
        if client_id is not None:
            stmt = stmt.where(InvoiceModel.client_id == client_id)
        return self._rows(stmt)

    def open_receivables(self, client_id: UUID | None = None) -> list[DatedRecord]:
        """
        Each open invoice as a DatedRecord dated on its due date.

        The net amount is the open amount; ``client_id``, ``invoice_id`` and
        ``project_id`` are carried as dimensions.
        """
        return [to_receivable_record(inv) for inv in self.open_invoices(client_id)]

    def snapshot_lines(self, snapshot_date) -> list[AgingSnapshotModel]:
        stmt = (
            select(AgingSnapshotModel)
            .where(AgingSnapshotModel.snapshot_date == snapshot_date)
            .order_by(AgingSnapshotModel.client_id, AgingSnapshotModel.invoice_id)
        )
        return self._rows(stmt)


def to_receivable_record(invoice: InvoiceModel) -> DatedRecord:
    return DatedRecord(
        date=invoice.due_date,
        amount=Money.of(invoice.net_amount, invoice.currency),
        category="receivable",
        dimension_keys={
            "client_id": invoice.client_id,
            "invoice_id": invoice.id,
            "project_id": invoice.project_id,
        },
    )
