"""
profithub_modules.receivables.models
====================================

Frozen DTOs for the receivables module.  Structure only; the aging math
lives in ``profithub_engines.aging``.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from profithub_engines.aging import AgingReport


@dataclass(frozen=True)
class AgingSnapshotLine:
    """One invoice as recorded in an aging snapshot."""

    id: UUID
    snapshot_date: date
    invoice_id: UUID
    client_id: UUID
    aging_bucket: str
    days_overdue: int
    overdue_amount: Decimal
    currency: str


@dataclass(frozen=True)
class AgingSnapshot:
    """Result of ``ReceivablesService.snapshot_aging``."""

    snapshot_date: date
    report: AgingReport
    lines: tuple[AgingSnapshotLine, ...]
    calculated_by: UUID
