"""
profithub_modules.receivables.service
=====================================

Responsibility:
    Builds the receivables aging report from open invoices and records
    aging snapshots.  Thin glue: the bucket math lives in
    ``profithub_engines.aging``.

Architecture:
    Module layer (profithub_modules).  Reads through
    ``ReceivablesSelector``; writes ``AgingSnapshotModel`` rows and owns the
    transaction boundary (commit on success, rollback on failure).

Invariants enforced:
    - Every snapshot row carries the caller's ``actor_id``.
    - The reference date defaults to the injected clock, never to
      ``date.today()``.

Failure modes:
    - MixedCurrencyError when open invoices span currencies; the session
      is rolled back and the error re-raised.

Usage::

    service = ReceivablesService(session, clock=clock)
    report = service.aging_report()
    snapshot = service.snapshot_aging(actor_id=actor_id)
"""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from profithub_config import AnalyticsConfig, get_active_config
from profithub_config.bridges import build_aging_calculator
from profithub_engines.aging import AgingReport
from profithub_kernel.domain.clock import Clock, SystemClock
from profithub_kernel.logging_config import LogContext, get_logger
from profithub_modules.receivables.models import AgingSnapshot, AgingSnapshotLine
from profithub_modules.receivables.orm import AgingSnapshotModel
from profithub_modules.receivables.selectors import ReceivablesSelector

logger = get_logger("modules.receivables.service")


class ReceivablesService:
    """
    Aging analysis over open invoices.

    Contract:
        Read methods never write.  ``snapshot_aging`` either commits all
        snapshot rows or rolls back and re-raises.
    """

    def __init__(
        self,
        session: Session,
        config: AnalyticsConfig | None = None,
        clock: Clock | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._aging = build_aging_calculator(self._config)
        self._selector = ReceivablesSelector(session)

    def aging_report(
        self,
        as_of: date | None = None,
        client_id: UUID | None = None,
    ) -> AgingReport:
        """Aging matrix of open invoices as of ``as_of`` (default: today)."""
        as_of = as_of or self._clock.today()
        records = self._selector.open_receivables(client_id=client_id)
        return self._aging.build_report(items=records, as_of=as_of)

    def snapshot_aging(self, actor_id: UUID, as_of: date | None = None) -> AgingSnapshot:
        """
        Record one aging snapshot row per open invoice.

        Postconditions:
            - On success: rows committed, stamped with ``actor_id``.
            - On failure: session rolled back, exception re-raised.
        """
        as_of = as_of or self._clock.today()
        with LogContext.bind(actor_id=str(actor_id), module="receivables"):
            try:
                logger.info("aging_snapshot_started", extra={"as_of": as_of.isoformat()})
                invoices = self._selector.open_invoices()
                records = self._selector.open_receivables()
                report = self._aging.build_report(items=records, as_of=as_of)

                lines: list[AgingSnapshotLine] = []
                for invoice in invoices:
                    days_late = self._aging.classifier.days_late(invoice.due_date, as_of)
                    line = AgingSnapshotLine(
                        id=uuid4(),
                        snapshot_date=as_of,
                        invoice_id=invoice.id,
                        client_id=invoice.client_id,
                        aging_bucket=self._aging.classifier.bucket_for_days(days_late).value,
                        days_overdue=max(0, days_late),
                        overdue_amount=invoice.net_amount,
                        currency=invoice.currency,
                    )
                    self._session.add(AgingSnapshotModel.from_dto(line, created_by_id=actor_id))
                    lines.append(line)

                self._session.commit()
                logger.info("aging_snapshot_recorded", extra={
                    "as_of": as_of.isoformat(),
                    "line_count": len(lines),
                    "total_overdue": str(report.total_overdue.amount),
                })
                return AgingSnapshot(
                    snapshot_date=as_of,
                    report=report,
                    lines=tuple(lines),
                    calculated_by=actor_id,
                )
            except Exception:
                self._session.rollback()
                raise

    def snapshot_lines(self, snapshot_date: date) -> tuple[AgingSnapshotLine, ...]:
        """Previously recorded snapshot rows for ``snapshot_date``."""
        return tuple(row.to_dto() for row in self._selector.snapshot_lines(snapshot_date))
