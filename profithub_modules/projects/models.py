"""
profithub_modules.projects.models
=================================

Frozen DTOs for recorded project-control calculations.  All monetary
fields are ``Decimal`` with a separate ISO currency code, mirroring the
stored rows.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from profithub_engines.coverage import CoverageStatus, PocBand


@dataclass(frozen=True)
class PocCalculation:
    """A recorded POC calculation for one project at one cutoff date."""

    id: UUID
    project_id: UUID
    calculation_date: date
    hours_based_poc: Decimal
    cost_based_poc: Decimal
    overall_poc: Decimal
    total_worked_hours: Decimal
    total_budgeted_hours: Decimal
    total_incurred_cost: Decimal
    total_budgeted_cost: Decimal
    currency: str
    calculated_by: UUID
    band: PocBand | None = None


@dataclass(frozen=True)
class UndercoverageCalculation:
    """A recorded undercoverage calculation for one period."""

    id: UUID
    calculation_date: date
    period_start: date
    period_end: date
    project_id: UUID | None
    cost_center_id: UUID | None
    total_fixed_costs: Decimal
    billable_amount: Decimal
    coverage_percentage: Decimal
    undercovered_amount: Decimal
    productive_hours: Decimal
    currency: str
    calculated_by: UUID
    status: CoverageStatus | None = None
