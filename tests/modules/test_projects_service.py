"""
Tests for the Project Control Module Service.

Validates:
- POC from approved hours and expenses against the project budget
- Undercoverage from fixed costs, billings and productive hours
- Persistence of calculations with the caller's actor id
- Lookup failures and rollback
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from profithub_engines.coverage import CoverageStatus, PocBand
from profithub_kernel.exceptions import InvalidPeriodToken, MixedCurrencyError, ProjectNotFoundError
from profithub_modules.projects.orm import PocCalculationModel, UndercoverageCalculationModel
from profithub_modules.projects.service import ProjectControlService
from tests.modules.conftest import TEST_COST_CENTER_ID, TEST_PROJECT_ID

CUTOFF = date(2024, 6, 30)
UNKNOWN_PROJECT_ID = UUID("00000000-0000-4000-a000-0000000000ff")


@pytest.fixture
def project_service(session, analytics_config, clock):
    return ProjectControlService(session, config=analytics_config, clock=clock)


class TestCalculatePoc:
    def test_blended_poc(self, project_service, test_project, make_time_entry, make_expense, actor_id):
        make_time_entry(TEST_PROJECT_ID, date(2024, 2, 1), "300")
        make_time_entry(TEST_PROJECT_ID, date(2024, 5, 1), "100")
        make_expense(TEST_PROJECT_ID, date(2024, 3, 1), "60000")

        poc = project_service.calculate_poc(TEST_PROJECT_ID, CUTOFF, actor_id)

        assert poc.hours_based_poc == Decimal("40.00")
        assert poc.cost_based_poc == Decimal("60.00")
        assert poc.overall_poc == Decimal("50.00")
        assert poc.band is PocBand.MIDWAY
        assert poc.total_budgeted_hours == Decimal("1000")
        assert poc.currency == "BRL"
        assert poc.calculated_by == actor_id
        assert poc.calculation_date == date(2024, 6, 15)

    def test_only_approved_entries_up_to_cutoff(
        self, project_service, test_project, make_time_entry, make_expense, actor_id
    ):
        make_time_entry(TEST_PROJECT_ID, date(2024, 6, 30), "100")
        make_time_entry(TEST_PROJECT_ID, date(2024, 7, 1), "500")
        make_time_entry(TEST_PROJECT_ID, date(2024, 6, 1), "200", status="pending")
        make_expense(TEST_PROJECT_ID, date(2024, 6, 1), "10000")
        make_expense(TEST_PROJECT_ID, date(2024, 6, 1), "50000", status="rejected")

        poc = project_service.calculate_poc(TEST_PROJECT_ID, CUTOFF, actor_id)

        assert poc.total_worked_hours == Decimal("100")
        assert poc.total_incurred_cost == Decimal("10000")

    def test_no_activity(self, project_service, test_project, actor_id):
        poc = project_service.calculate_poc(TEST_PROJECT_ID, CUTOFF, actor_id)
        assert poc.overall_poc == Decimal("0.00")
        assert poc.band is PocBand.EARLY

    def test_persisted_with_actor(self, session, project_service, test_project, make_time_entry, actor_id):
        make_time_entry(TEST_PROJECT_ID, date(2024, 2, 1), "950")
        project_service.calculate_poc(TEST_PROJECT_ID, CUTOFF, actor_id)

        row = session.query(PocCalculationModel).one()
        assert row.created_by_id == actor_id
        assert row.project_id == TEST_PROJECT_ID
        assert row.hours_based_poc == Decimal("95.00")

    def test_calculation_id_bound_in_logs(self, project_service, test_project, actor_id, captured_logs):
        poc = project_service.calculate_poc(TEST_PROJECT_ID, CUTOFF, actor_id)
        recorded = [r for r in captured_logs() if r["message"] == "poc_recorded"]
        assert recorded[0]["calculation_id"] == str(poc.id)
        assert recorded[0]["actor_id"] == str(actor_id)
        engine_traces = [r for r in captured_logs() if r["message"] == "PROFITHUB_ENGINE_TRACE"]
        assert all(r["calculation_id"] == str(poc.id) for r in engine_traces)

    def test_history(self, project_service, test_project, make_time_entry, actor_id):
        make_time_entry(TEST_PROJECT_ID, date(2024, 2, 1), "100")
        project_service.calculate_poc(TEST_PROJECT_ID, date(2024, 3, 31), actor_id)
        project_service.calculate_poc(TEST_PROJECT_ID, CUTOFF, actor_id)

        history = project_service.poc_history(TEST_PROJECT_ID)
        assert len(history) == 2
        assert all(h.calculated_by == actor_id for h in history)

    def test_unknown_project(self, project_service, actor_id):
        with pytest.raises(ProjectNotFoundError) as exc_info:
            project_service.calculate_poc(UNKNOWN_PROJECT_ID, CUTOFF, actor_id)
        assert exc_info.value.code == "PROJECT_NOT_FOUND"
        assert exc_info.value.project_id == str(UNKNOWN_PROJECT_ID)

    def test_history_unknown_project(self, project_service):
        with pytest.raises(ProjectNotFoundError):
            project_service.poc_history(UNKNOWN_PROJECT_ID)

    def test_expense_currency_mismatch_rolls_back(
        self, session, project_service, test_project, make_expense, actor_id
    ):
        make_expense(TEST_PROJECT_ID, date(2024, 3, 1), "100", currency="USD")
        session.commit()

        with pytest.raises(MixedCurrencyError):
            project_service.calculate_poc(TEST_PROJECT_ID, CUTOFF, actor_id)
        assert session.query(PocCalculationModel).count() == 0


class TestCalculateUndercoverage:
    def test_company_wide_month(
        self, project_service, make_actual, make_invoice, test_project, make_time_entry, actor_id
    ):
        make_actual("rent", "60000", date(2024, 6, 1), cost_type="fixed")
        make_actual("salaries", "40000", date(2024, 6, 5), cost_type="fixed")
        make_actual("travel", "99999", date(2024, 6, 5))
        make_actual("rent", "77777", date(2024, 5, 1), cost_type="fixed")
        make_invoice(date(2024, 7, 10), "60000", issue_date=date(2024, 6, 10))
        make_invoice(date(2024, 7, 10), "5000", issue_date=date(2024, 6, 11), invoice_status="cancelled")
        make_time_entry(TEST_PROJECT_ID, date(2024, 6, 3), "160")

        result = project_service.calculate_undercoverage("current-month", actor_id)

        assert result.period_start == date(2024, 6, 1)
        assert result.period_end == date(2024, 6, 30)
        assert result.total_fixed_costs == Decimal("100000")
        assert result.billable_amount == Decimal("60000")
        assert result.undercovered_amount == Decimal("40000")
        assert result.coverage_percentage == Decimal("60.00")
        assert result.productive_hours == Decimal("160")
        assert result.status is CoverageStatus.UNCOVERED
        assert result.currency == "BRL"
        assert result.project_id is None

    def test_paid_invoices_still_billed(self, project_service, make_actual, make_invoice, actor_id):
        make_actual("rent", "1000", date(2024, 6, 1), cost_type="fixed")
        make_invoice(date(2024, 6, 20), "900", issue_date=date(2024, 6, 2), payment_status="paid")

        result = project_service.calculate_undercoverage("current-month", actor_id)

        assert result.coverage_percentage == Decimal("90.00")
        assert result.status is CoverageStatus.NEARLY_COVERED

    def test_project_scope(
        self, project_service, test_project, make_actual, make_invoice, actor_id
    ):
        make_actual("rent", "1000", date(2024, 6, 1), cost_type="fixed", project_id=TEST_PROJECT_ID)
        make_actual("rent", "5000", date(2024, 6, 1), cost_type="fixed")
        make_invoice(date(2024, 7, 1), "1200", issue_date=date(2024, 6, 1), project_id=TEST_PROJECT_ID)

        result = project_service.calculate_undercoverage(
            "current-month", actor_id, project_id=TEST_PROJECT_ID
        )

        assert result.total_fixed_costs == Decimal("1000")
        assert result.coverage_percentage == Decimal("120.00")
        assert result.undercovered_amount == Decimal("0")
        assert result.status is CoverageStatus.COVERED
        assert result.cost_center_id == TEST_COST_CENTER_ID

    def test_no_fixed_costs_fully_covered(self, project_service, actor_id):
        result = project_service.calculate_undercoverage("current-quarter", actor_id)
        assert result.coverage_percentage == Decimal("100")
        assert result.status is CoverageStatus.COVERED

    def test_persisted_and_listed(self, session, project_service, make_actual, actor_id):
        make_actual("rent", "1000", date(2024, 6, 1), cost_type="fixed")
        project_service.calculate_undercoverage("current-month", actor_id)

        assert session.query(UndercoverageCalculationModel).count() == 1
        history = project_service.undercoverage_history("current-month")
        assert len(history) == 1
        assert history[0].calculated_by == actor_id
        assert history[0].total_fixed_costs == Decimal("1000")
        assert project_service.undercoverage_history("current-year") == []

    def test_explicit_reference(self, project_service, make_actual, actor_id):
        make_actual("rent", "500", date(2023, 2, 1), cost_type="fixed")
        result = project_service.calculate_undercoverage(
            "current-month", actor_id, reference=date(2023, 2, 14)
        )
        assert result.total_fixed_costs == Decimal("500")
        assert result.period_end == date(2023, 2, 28)

    def test_unknown_token(self, project_service, actor_id):
        with pytest.raises(InvalidPeriodToken):
            project_service.calculate_undercoverage("last-week", actor_id)

    def test_unknown_project(self, project_service, actor_id):
        with pytest.raises(ProjectNotFoundError):
            project_service.calculate_undercoverage(
                "current-month", actor_id, project_id=UNKNOWN_PROJECT_ID
            )

    def test_billing_in_other_currency(self, session, project_service, make_actual, make_invoice, actor_id):
        make_actual("rent", "1000", date(2024, 6, 1), cost_type="fixed")
        make_invoice(date(2024, 7, 1), "500", issue_date=date(2024, 6, 1), currency="USD")
        session.commit()

        with pytest.raises(MixedCurrencyError):
            project_service.calculate_undercoverage("current-month", actor_id)
        assert session.query(UndercoverageCalculationModel).count() == 0
