"""
profithub_modules.projects.service
==================================

Responsibility:
    Project control: percentage of completion per project and
    undercoverage of fixed costs per period.  Gathers the inputs through
    selectors, delegates the math to ``CoverageCalculator`` and records
    each calculation.

Architecture:
    Module layer (profithub_modules).  Owns the transaction boundary:
    every public write method commits on success and rolls back on failure.

Invariants enforced:
    - Budgeted hours and cost come from the project row.
    - Every recorded calculation carries the caller's ``actor_id`` as
      ``created_by_id``; there is no fallback identity.
    - The calculation date comes from the injected clock.

Failure modes:
    - ProjectNotFoundError for an unknown project id.
    - InvalidPeriodToken for an unknown period token.
    - InvalidInputError for negative hours or costs in stored rows.
    - MixedCurrencyError when expenses or billings differ from the
      project (or reporting) currency.

Usage::

    service = ProjectControlService(session, clock=clock)
    poc = service.calculate_poc(project_id, cutoff_date=date(2024, 6, 30), actor_id=actor_id)
"""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from profithub_config import AnalyticsConfig, get_active_config
from profithub_config.bridges import build_coverage_calculator
from profithub_engines.periods import PeriodResolver, PeriodToken
from profithub_kernel.domain.clock import Clock, SystemClock
from profithub_kernel.domain.values import Money, sum_money
from profithub_kernel.logging_config import LogContext, get_logger
from profithub_modules.budget.selectors import FIXED_COST_TYPE, BudgetSelector
from profithub_modules.projects.models import PocCalculation, UndercoverageCalculation
from profithub_modules.projects.orm import PocCalculationModel, UndercoverageCalculationModel
from profithub_modules.projects.selectors import ProjectSelector

logger = get_logger("modules.projects.service")


class ProjectControlService:
    """
    POC and undercoverage calculations over stored project data.

    Contract:
        Each ``calculate_*`` method either commits one recorded calculation
        and returns it, or rolls back and re-raises.
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
        self._coverage = build_coverage_calculator(self._config)
        self._periods = PeriodResolver()
        self._projects = ProjectSelector(session)
        self._budget = BudgetSelector(session)

    def calculate_poc(
        self,
        project_id: UUID,
        cutoff_date: date,
        actor_id: UUID,
    ) -> PocCalculation:
        """
        Compute and record the POC of ``project_id`` at ``cutoff_date``.

        Hours are approved time entries up to the cutoff; incurred cost is
        approved project expenses up to the cutoff.

        Raises:
            ProjectNotFoundError: unknown project.
            MixedCurrencyError: an expense is not in the project currency.
        """
        calculation_id = uuid4()
        with LogContext.bind(actor_id=actor_id, module="projects", calculation_id=calculation_id):
            try:
                project = self._projects.get_project(project_id)
                worked = self._projects.worked_hours(project_id, cutoff_date)
                expenses = self._projects.expense_records(project_id, cutoff_date)
                incurred = sum_money([r.amount for r in expenses], project.currency)

                result = self._coverage.percentage_of_completion(
                    worked_hours=worked,
                    budgeted_hours=project.budgeted_hours,
                    incurred_cost=incurred,
                    budgeted_cost=Money.of(project.budgeted_cost, project.currency),
                )

                calculation = PocCalculation(
                    id=calculation_id,
                    project_id=project_id,
                    calculation_date=self._clock.today(),
                    hours_based_poc=result.hours_based_poc,
                    cost_based_poc=result.cost_based_poc,
                    overall_poc=result.overall_poc,
                    total_worked_hours=result.worked_hours,
                    total_budgeted_hours=result.budgeted_hours,
                    total_incurred_cost=result.incurred_cost.amount,
                    total_budgeted_cost=result.budgeted_cost.amount,
                    currency=result.incurred_cost.currency.code,
                    calculated_by=actor_id,
                    band=self._coverage.poc_band(result.overall_poc),
                )
                self._session.add(PocCalculationModel.from_dto(calculation))
                self._session.commit()

                logger.info("poc_recorded", extra={
                    "project_id": str(project_id),
                    "cutoff_date": cutoff_date.isoformat(),
                    "overall_poc": str(calculation.overall_poc),
                    "band": calculation.band.value,
                })
                return calculation
            except Exception:
                self._session.rollback()
                raise

    def calculate_undercoverage(
        self,
        period_token: PeriodToken | str,
        actor_id: UUID,
        reference: date | None = None,
        project_id: UUID | None = None,
    ) -> UndercoverageCalculation:
        """
        Compute and record undercoverage for the resolved period.

        Fixed costs are ``fixed`` actual cost lines in the period; the
        billable amount is the net of invoices issued in the period;
        productive hours are approved hours in the period.  With a
        ``project_id`` all three are narrowed to that project.

        Raises:
            InvalidPeriodToken: unknown token.
            ProjectNotFoundError: unknown project.
            MixedCurrencyError: costs or billings differ from the currency.
        """
        calculation_id = uuid4()
        with LogContext.bind(actor_id=actor_id, module="projects", calculation_id=calculation_id):
            try:
                period = self._periods.resolve(period_token, reference or self._clock.today())
                currency = self._config.reporting_currency
                cost_center_id = None
                if project_id is not None:
                    project = self._projects.get_project(project_id)
                    currency = project.currency
                    cost_center_id = project.cost_center_id

                fixed_lines = self._budget.actual_records(
                    period, project_id=project_id, cost_type=FIXED_COST_TYPE
                )
                billings = self._projects.billing_records(period, project_id=project_id)
                hours = self._projects.productive_hours(period, project_id=project_id)

                result = self._coverage.undercoverage(
                    fixed_costs=sum_money([r.amount for r in fixed_lines], currency),
                    billable_amount=sum_money([r.amount for r in billings], currency),
                    productive_hours=hours,
                )

                calculation = UndercoverageCalculation(
                    id=calculation_id,
                    calculation_date=self._clock.today(),
                    period_start=period.start,
                    period_end=period.end,
                    project_id=project_id,
                    cost_center_id=cost_center_id,
                    total_fixed_costs=result.fixed_costs.amount,
                    billable_amount=result.billable_amount.amount,
                    coverage_percentage=result.coverage_percent,
                    undercovered_amount=result.undercovered_amount.amount,
                    productive_hours=result.productive_hours,
                    currency=result.fixed_costs.currency.code,
                    calculated_by=actor_id,
                    status=self._coverage.coverage_status(result.coverage_percent),
                )
                self._session.add(UndercoverageCalculationModel.from_dto(calculation))
                self._session.commit()

                logger.info("undercoverage_recorded", extra={
                    "period": str(period),
                    "project_id": str(project_id) if project_id else None,
                    "coverage_percent": str(calculation.coverage_percentage),
                    "status": calculation.status.value,
                })
                return calculation
            except Exception:
                self._session.rollback()
                raise

    def poc_history(self, project_id: UUID) -> list[PocCalculation]:
        """Recorded POC calculations of a project, oldest first."""
        self._projects.get_project(project_id)
        return self._projects.poc_history(project_id)

    def undercoverage_history(
        self,
        period_token: PeriodToken | str,
        reference: date | None = None,
    ) -> list[UndercoverageCalculation]:
        """Recorded undercoverage calculations for the resolved period."""
        period = self._periods.resolve(period_token, reference or self._clock.today())
        return self._projects.undercoverage_history(period)
