"""
Tests for the Receivables Module Service.

Validates:
- Open-invoice selection (paid and cancelled invoices excluded)
- Aging report built from stored invoices
- Snapshot persistence, actor stamping and rollback on failure
"""

from __future__ import annotations

import inspect
from datetime import date, timedelta
from decimal import Decimal

import pytest

from profithub_engines.aging import AgingBucket, RiskLevel
from profithub_kernel.exceptions import MixedCurrencyError
from profithub_modules.receivables.orm import AgingSnapshotModel
from profithub_modules.receivables.selectors import ReceivablesSelector
from profithub_modules.receivables.service import ReceivablesService
from tests.modules.conftest import TEST_CLIENT_ID, TEST_OTHER_CLIENT_ID

TODAY = date(2024, 6, 15)


@pytest.fixture
def receivables_service(session, analytics_config, clock):
    return ReceivablesService(session, config=analytics_config, clock=clock)


def _days_ago(days: int) -> date:
    return TODAY - timedelta(days=days)


class TestReceivablesServiceStructure:
    """Verify ReceivablesService follows the module service pattern."""

    def test_constructor_signature(self):
        params = list(inspect.signature(ReceivablesService.__init__).parameters)
        assert params[:2] == ["self", "session"]
        assert "config" in params
        assert "clock" in params

    def test_default_config_loaded(self, session, clock):
        service = ReceivablesService(session, clock=clock)
        assert service.aging_report().currency.code == "BRL"


class TestOpenReceivables:
    def test_paid_and_cancelled_excluded(self, session, make_invoice):
        make_invoice(_days_ago(10), "100")
        make_invoice(_days_ago(10), "200", payment_status="paid")
        make_invoice(_days_ago(10), "300", invoice_status="cancelled")
        make_invoice(_days_ago(10), "400", payment_status="partial")

        records = ReceivablesSelector(session).open_receivables()
        assert sorted(r.amount.amount for r in records) == [Decimal("100"), Decimal("400")]

    def test_record_shape(self, session, make_invoice):
        invoice = make_invoice(_days_ago(3), "150.75")
        record = ReceivablesSelector(session).open_receivables()[0]
        assert record.date == invoice.due_date
        assert record.dimension("client_id") == str(TEST_CLIENT_ID)
        assert record.dimension("invoice_id") == str(invoice.id)

    def test_filter_by_client(self, session, make_invoice):
        make_invoice(_days_ago(10), "100")
        make_invoice(_days_ago(10), "200", client_id=TEST_OTHER_CLIENT_ID)
        records = ReceivablesSelector(session).open_receivables(client_id=TEST_OTHER_CLIENT_ID)
        assert len(records) == 1
        assert records[0].amount.amount == Decimal("200")


class TestAgingReport:
    def test_buckets_from_stored_invoices(self, receivables_service, make_invoice):
        make_invoice(TODAY + timedelta(days=5), "1000")
        make_invoice(_days_ago(15), "200")
        make_invoice(_days_ago(45), "300")
        make_invoice(_days_ago(100), "12000")

        report = receivables_service.aging_report()

        assert report.as_of == TODAY
        row = report.client(str(TEST_CLIENT_ID))
        assert row.amount_in(AgingBucket.CURRENT).amount == Decimal("1000")
        assert row.amount_in(AgingBucket.DAYS_1_30).amount == Decimal("200")
        assert row.amount_in(AgingBucket.DAYS_31_60).amount == Decimal("300")
        assert row.amount_in(AgingBucket.OVER_90).amount == Decimal("12000")
        assert row.risk_level is RiskLevel.HIGH
        assert report.total_overdue.amount == Decimal("12500")

    def test_explicit_as_of(self, receivables_service, make_invoice):
        make_invoice(date(2024, 1, 1), "100")
        report = receivables_service.aging_report(as_of=date(2024, 1, 20))
        assert report.summary_for(AgingBucket.DAYS_1_30).total.amount == Decimal("100")

    def test_two_clients(self, receivables_service, make_invoice):
        make_invoice(_days_ago(10), "100")
        make_invoice(_days_ago(70), "6000", client_id=TEST_OTHER_CLIENT_ID)
        report = receivables_service.aging_report()
        assert len(report.clients) == 2
        assert report.client(str(TEST_OTHER_CLIENT_ID)).risk_level is RiskLevel.MEDIUM

    def test_no_invoices(self, receivables_service):
        report = receivables_service.aging_report()
        assert report.clients == ()
        assert report.total_overdue.is_zero


class TestSnapshotAging:
    def test_rows_written_and_stamped(self, session, receivables_service, make_invoice, actor_id):
        overdue = make_invoice(_days_ago(40), "250")
        not_due = make_invoice(TODAY + timedelta(days=10), "100")

        snapshot = receivables_service.snapshot_aging(actor_id=actor_id)

        assert snapshot.snapshot_date == TODAY
        assert snapshot.calculated_by == actor_id
        rows = session.query(AgingSnapshotModel).all()
        assert len(rows) == 2
        assert all(row.created_by_id == actor_id for row in rows)

        by_invoice = {line.invoice_id: line for line in snapshot.lines}
        assert by_invoice[overdue.id].aging_bucket == "31-60"
        assert by_invoice[overdue.id].days_overdue == 40
        assert by_invoice[not_due.id].aging_bucket == "current"
        assert by_invoice[not_due.id].days_overdue == 0

    def test_snapshot_lines_read_back(self, receivables_service, make_invoice, actor_id):
        make_invoice(_days_ago(5), "10")
        receivables_service.snapshot_aging(actor_id=actor_id)
        lines = receivables_service.snapshot_lines(TODAY)
        assert len(lines) == 1
        assert lines[0].overdue_amount == Decimal("10")
        assert lines[0].currency == "BRL"

    def test_report_included(self, receivables_service, make_invoice, actor_id):
        make_invoice(_days_ago(5), "10")
        snapshot = receivables_service.snapshot_aging(actor_id=actor_id)
        assert snapshot.report.total_overdue.amount == Decimal("10")

    def test_actor_bound_in_logs(self, receivables_service, make_invoice, actor_id, captured_logs):
        make_invoice(_days_ago(5), "10")
        receivables_service.snapshot_aging(actor_id=actor_id)
        recorded = [r for r in captured_logs() if r["message"] == "aging_snapshot_recorded"]
        assert recorded[0]["actor_id"] == str(actor_id)
        assert recorded[0]["module"] == "receivables"

    def test_mixed_currency_rolls_back(self, session, receivables_service, make_invoice, actor_id):
        make_invoice(_days_ago(5), "10", currency="BRL")
        make_invoice(_days_ago(5), "10", currency="USD")
        session.commit()

        with pytest.raises(MixedCurrencyError):
            receivables_service.snapshot_aging(actor_id=actor_id)

        assert session.query(AgingSnapshotModel).count() == 0
