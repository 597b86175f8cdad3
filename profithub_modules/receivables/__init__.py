"""Receivables: open invoices, aging report, aging snapshots."""

from profithub_modules.receivables.models import AgingSnapshot, AgingSnapshotLine
from profithub_modules.receivables.service import ReceivablesService

__all__ = ["AgingSnapshot", "AgingSnapshotLine", "ReceivablesService"]
