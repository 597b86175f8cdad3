"""
Shared fixtures for module tests.

Provides deterministic parent entity IDs and small row factories for the
module ORM models.  Every factory stamps ``created_by_id`` with the test
actor and flushes, so the rows are visible to selectors in the same
session.

DESIGN RULE: Every fixture is opt-in.  No autouse.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from profithub_modules.budget.orm import ActualModel, BudgetModel
from profithub_modules.projects.orm import ProjectExpenseModel, ProjectModel, TimeEntryModel
from profithub_modules.receivables.orm import InvoiceModel
from profithub_modules.treasury.orm import BankAccountModel, CashFlowProjectionModel

# ---------------------------------------------------------------------------
# Deterministic parent entity IDs
# ---------------------------------------------------------------------------

TEST_CLIENT_ID = UUID("00000000-0000-4000-a000-000000000002")
TEST_OTHER_CLIENT_ID = UUID("00000000-0000-4000-a000-000000000003")
TEST_EMPLOYEE_ID = UUID("00000000-0000-4000-a000-000000000004")
TEST_COST_CENTER_ID = UUID("00000000-0000-4000-a000-000000000030")
TEST_PROJECT_ID = UUID("00000000-0000-4000-a000-000000000070")


@pytest.fixture
def test_project(session, actor_id) -> ProjectModel:
    """Active BRL project budgeted at 1000 hours and 100000 BRL."""
    project = ProjectModel(
        id=TEST_PROJECT_ID,
        name="ERP rollout",
        client_id=TEST_CLIENT_ID,
        cost_center_id=TEST_COST_CENTER_ID,
        currency="BRL",
        start_date=date(2024, 1, 1),
        budgeted_hours=Decimal("1000"),
        budgeted_cost=Decimal("100000"),
        created_by_id=actor_id,
    )
    session.add(project)
    session.flush()
    return project


@pytest.fixture
def make_invoice(session, actor_id):
    counter = {"n": 0}

    def _make(
        due_date: date,
        net_amount: str,
        client_id: UUID = TEST_CLIENT_ID,
        issue_date: date | None = None,
        project_id: UUID | None = None,
        currency: str = "BRL",
        payment_status: str = "pending",
        invoice_status: str = "issued",
    ) -> InvoiceModel:
        counter["n"] += 1
        invoice = InvoiceModel(
            invoice_number=f"INV-{counter['n']:05d}",
            client_id=client_id,
            project_id=project_id,
            issue_date=issue_date or due_date,
            due_date=due_date,
            gross_amount=Decimal(net_amount),
            net_amount=Decimal(net_amount),
            currency=currency,
            payment_status=payment_status,
            invoice_status=invoice_status,
            created_by_id=actor_id,
        )
        session.add(invoice)
        session.flush()
        return invoice

    return _make


@pytest.fixture
def make_budget(session, actor_id):
    def _make(
        category: str,
        amount: str,
        valid_from: date = date(2024, 1, 1),
        valid_to: date | None = date(2024, 12, 31),
        project_id: UUID | None = None,
        cost_center_id: UUID | None = None,
        status: str = "active",
        currency: str = "BRL",
    ) -> BudgetModel:
        budget = BudgetModel(
            category=category,
            project_id=project_id,
            cost_center_id=cost_center_id,
            amount=Decimal(amount),
            currency=currency,
            fiscal_year=valid_from.year,
            valid_from=valid_from,
            valid_to=valid_to,
            status=status,
            created_by_id=actor_id,
        )
        session.add(budget)
        session.flush()
        return budget

    return _make


@pytest.fixture
def make_actual(session, actor_id):
    def _make(
        category: str,
        amount: str,
        actual_date: date,
        cost_type: str = "variable",
        project_id: UUID | None = None,
        cost_center_id: UUID | None = None,
        currency: str = "BRL",
    ) -> ActualModel:
        actual = ActualModel(
            actual_date=actual_date,
            category=category,
            cost_type=cost_type,
            project_id=project_id,
            cost_center_id=cost_center_id,
            amount=Decimal(amount),
            currency=currency,
            created_by_id=actor_id,
        )
        session.add(actual)
        session.flush()
        return actual

    return _make


@pytest.fixture
def make_time_entry(session, actor_id):
    def _make(
        project_id: UUID,
        work_date: date,
        hours: str,
        status: str = "approved",
    ) -> TimeEntryModel:
        entry = TimeEntryModel(
            project_id=project_id,
            user_id=TEST_EMPLOYEE_ID,
            work_date=work_date,
            hours_worked=Decimal(hours),
            status=status,
            created_by_id=actor_id,
        )
        session.add(entry)
        session.flush()
        return entry

    return _make


@pytest.fixture
def make_expense(session, actor_id):
    def _make(
        project_id: UUID,
        expense_date: date,
        amount: str,
        status: str = "approved",
        currency: str = "BRL",
    ) -> ProjectExpenseModel:
        expense = ProjectExpenseModel(
            project_id=project_id,
            user_id=TEST_EMPLOYEE_ID,
            expense_date=expense_date,
            expense_type="travel",
            amount=Decimal(amount),
            currency=currency,
            status=status,
            created_by_id=actor_id,
        )
        session.add(expense)
        session.flush()
        return expense

    return _make


@pytest.fixture
def make_bank_account(session, actor_id):
    def _make(
        bank_name: str,
        balance: str,
        currency: str = "BRL",
        status: str = "active",
    ) -> BankAccountModel:
        account = BankAccountModel(
            bank_name=bank_name,
            account_number=f"{bank_name[:3].upper()}-0001",
            currency=currency,
            current_balance=Decimal(balance),
            available_balance=Decimal(balance),
            status=status,
            created_by_id=actor_id,
        )
        session.add(account)
        session.flush()
        return account

    return _make


@pytest.fixture
def make_cash_flow(session, actor_id):
    def _make(
        projection_date: date,
        flow_type: str,
        amount: str,
        bank_account_id: UUID | None = None,
        scenario_type: str = "base",
        currency: str = "BRL",
        category: str = "operations",
    ) -> CashFlowProjectionModel:
        flow = CashFlowProjectionModel(
            projection_date=projection_date,
            bank_account_id=bank_account_id,
            flow_type=flow_type,
            category=category,
            amount=Decimal(amount),
            currency=currency,
            scenario_type=scenario_type,
            created_by_id=actor_id,
        )
        session.add(flow)
        session.flush()
        return flow

    return _make
