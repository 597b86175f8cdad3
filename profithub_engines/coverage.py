"""
profithub_engines.coverage -- Undercoverage and percentage-of-completion.

Responsibility:
    Measure how well billable revenue covers fixed costs (undercoverage),
    and how far a project has progressed against its hour and cost budgets
    (POC).  Also bands both percentages for reporting.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import profithub_kernel.

Invariants enforced:
    - undercovered_amount = max(0, fixed_costs - billable_amount).
    - coverage_percent = billable / fixed * 100 when fixed > 0, else 100.
      Coverage above 100 is reported as-is, never capped.
    - POC sub-percentages are 0 when their budget is 0.
    - overall POC = hours_based * w + cost_based * (1 - w), w in [0, 1].
    - Percentages are rounded to two places, half-up.

Failure modes:
    - InvalidInputError for negative amounts or hours, or a blend weight
      outside [0, 1].
    - MixedCurrencyError when fixed costs and billable amounts (or incurred
      and budgeted costs) are in different currencies.

Usage:
    from profithub_engines.coverage import CoverageCalculator

    calc = CoverageCalculator()
    result = calc.undercoverage(Money.of("100000", "BRL"), Money.of("60000", "BRL"))
    result.undercovered_amount  # 40000 BRL
    result.coverage_percent     # Decimal("60.00")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Sequence

from profithub_kernel.domain.values import (
    HUNDRED,
    Currency,
    Money,
    percent_of,
    quantize_percent,
)
from profithub_kernel.exceptions import InvalidInputError, MixedCurrencyError
from profithub_kernel.logging_config import get_logger
from profithub_engines.tracer import traced_engine

logger = get_logger("engines.coverage")

_ZERO = Decimal("0")


class CoverageStatus(str, Enum):
    COVERED = "covered"
    NEARLY_COVERED = "nearly_covered"
    UNCOVERED = "uncovered"


class PocBand(str, Enum):
    ADVANCED = "advanced"
    PROGRESSING = "progressing"
    MIDWAY = "midway"
    EARLY = "early"


@dataclass(frozen=True)
class CoverageResult:
    """Undercoverage for one period (and optionally one project)."""

    fixed_costs: Money
    billable_amount: Money
    coverage_percent: Decimal
    undercovered_amount: Money
    productive_hours: Decimal = _ZERO

    @property
    def is_covered(self) -> bool:
        return self.undercovered_amount.is_zero


@dataclass(frozen=True)
class PocResult:
    """Percentage of completion for one project at a cutoff."""

    hours_based_poc: Decimal
    cost_based_poc: Decimal
    overall_poc: Decimal
    worked_hours: Decimal
    budgeted_hours: Decimal
    incurred_cost: Money
    budgeted_cost: Money


@dataclass(frozen=True)
class CoverageSummary:
    """Totals across several coverage results."""

    total_fixed_costs: Money
    total_billable: Money
    total_undercovered: Money
    average_coverage_percent: Decimal
    count: int


def _require_non_negative(field: str, value: Decimal) -> None:
    if value < _ZERO:
        raise InvalidInputError(field, str(value), "must not be negative")


def _as_hours(field: str, value: Decimal | int | str) -> Decimal:
    if isinstance(value, (bool, float)):
        raise InvalidInputError(field, value, "hours must be Decimal, int or str")
    try:
        hours = Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidInputError(field, value, "not a decimal number") from e
    if not hours.is_finite():
        raise InvalidInputError(field, value, "must be a finite number")
    _require_non_negative(field, hours)
    return hours


class CoverageCalculator:
    """
    Pure calculator for undercoverage and POC.

    Contract:
        No I/O; thresholds and the POC blend weight are constructor
        parameters so configuration can supply them.
    """

    def __init__(
        self,
        poc_hours_weight: Decimal = Decimal("0.5"),
        covered_threshold: Decimal = Decimal("100"),
        nearly_covered_threshold: Decimal = Decimal("80"),
        poc_advanced_threshold: Decimal = Decimal("90"),
        poc_progressing_threshold: Decimal = Decimal("70"),
        poc_midway_threshold: Decimal = Decimal("50"),
        default_currency: str = "BRL",
    ):
        weight = Decimal(poc_hours_weight)
        if weight < _ZERO or weight > Decimal("1"):
            raise InvalidInputError("poc_hours_weight", str(weight), "must be within [0, 1]")
        self.poc_hours_weight = weight
        self.covered_threshold = Decimal(covered_threshold)
        self.nearly_covered_threshold = Decimal(nearly_covered_threshold)
        self.poc_advanced_threshold = Decimal(poc_advanced_threshold)
        self.poc_progressing_threshold = Decimal(poc_progressing_threshold)
        self.poc_midway_threshold = Decimal(poc_midway_threshold)
        self.default_currency = Currency(default_currency)

    @traced_engine(
        "coverage.undercoverage", "1.0",
        fingerprint_fields=("fixed_costs", "billable_amount", "productive_hours"),
    )
    def undercoverage(
        self,
        fixed_costs: Money,
        billable_amount: Money,
        productive_hours: Decimal | int | str = _ZERO,
    ) -> CoverageResult:
        """
        How much of ``fixed_costs`` the billable amount leaves uncovered.

        Raises:
            InvalidInputError: negative costs, billables or hours.
            MixedCurrencyError: the two amounts differ in currency.
        """
        _require_non_negative("fixed_costs", fixed_costs.amount)
        _require_non_negative("billable_amount", billable_amount.amount)
        hours = _as_hours("productive_hours", productive_hours)
        if fixed_costs.currency != billable_amount.currency:
            logger.error("undercoverage_currency_mismatch", extra={
                "fixed_currency": fixed_costs.currency.code,
                "billable_currency": billable_amount.currency.code,
            })
            raise MixedCurrencyError(
                fixed_costs.currency.code, billable_amount.currency.code, "undercoverage"
            )

        gap = fixed_costs - billable_amount
        undercovered = gap if gap.is_positive else Money.zero(fixed_costs.currency)
        coverage = percent_of(billable_amount.amount, fixed_costs.amount, default=HUNDRED)

        logger.info("undercoverage_calculated", extra={
            "fixed_costs": str(fixed_costs.amount),
            "billable_amount": str(billable_amount.amount),
            "coverage_percent": str(coverage),
            "undercovered_amount": str(undercovered.amount),
        })

        return CoverageResult(
            fixed_costs=fixed_costs,
            billable_amount=billable_amount,
            coverage_percent=coverage,
            undercovered_amount=undercovered,
            productive_hours=hours,
        )

    @traced_engine(
        "coverage.poc", "1.0",
        fingerprint_fields=("worked_hours", "budgeted_hours", "incurred_cost", "budgeted_cost"),
    )
    def percentage_of_completion(
        self,
        worked_hours: Decimal | int | str,
        budgeted_hours: Decimal | int | str,
        incurred_cost: Money,
        budgeted_cost: Money,
    ) -> PocResult:
        """
        Blend hour- and cost-based progress into an overall POC.

        Raises:
            InvalidInputError: negative hours or costs.
            MixedCurrencyError: incurred and budgeted costs differ in currency.
        """
        worked = _as_hours("worked_hours", worked_hours)
        budgeted = _as_hours("budgeted_hours", budgeted_hours)
        _require_non_negative("incurred_cost", incurred_cost.amount)
        _require_non_negative("budgeted_cost", budgeted_cost.amount)
        if incurred_cost.currency != budgeted_cost.currency:
            logger.error("poc_currency_mismatch", extra={
                "incurred_currency": incurred_cost.currency.code,
                "budgeted_currency": budgeted_cost.currency.code,
            })
            raise MixedCurrencyError(
                incurred_cost.currency.code, budgeted_cost.currency.code, "percentage of completion"
            )

        hours_based = percent_of(worked, budgeted)
        cost_based = percent_of(incurred_cost.amount, budgeted_cost.amount)
        overall = quantize_percent(
            hours_based * self.poc_hours_weight
            + cost_based * (Decimal("1") - self.poc_hours_weight)
        )

        logger.info("poc_calculated", extra={
            "hours_based_poc": str(hours_based),
            "cost_based_poc": str(cost_based),
            "overall_poc": str(overall),
            "hours_weight": str(self.poc_hours_weight),
        })

        return PocResult(
            hours_based_poc=hours_based,
            cost_based_poc=cost_based,
            overall_poc=overall,
            worked_hours=worked,
            budgeted_hours=budgeted,
            incurred_cost=incurred_cost,
            budgeted_cost=budgeted_cost,
        )

    def coverage_status(self, coverage_percent: Decimal) -> CoverageStatus:
        if coverage_percent >= self.covered_threshold:
            return CoverageStatus.COVERED
        if coverage_percent >= self.nearly_covered_threshold:
            return CoverageStatus.NEARLY_COVERED
        return CoverageStatus.UNCOVERED

    def poc_band(self, poc_percent: Decimal) -> PocBand:
        if poc_percent >= self.poc_advanced_threshold:
            return PocBand.ADVANCED
        if poc_percent >= self.poc_progressing_threshold:
            return PocBand.PROGRESSING
        if poc_percent >= self.poc_midway_threshold:
            return PocBand.MIDWAY
        return PocBand.EARLY

    def summarize(self, results: Sequence[CoverageResult]) -> CoverageSummary:
        """
        Totals and average coverage over ``results``.

        Raises:
            MixedCurrencyError: results are in different currencies.
        """
        currency = results[0].fixed_costs.currency if results else self.default_currency
        fixed = billable = undercovered = Money.zero(currency)
        coverage_sum = _ZERO
        for result in results:
            fixed = fixed + result.fixed_costs
            billable = billable + result.billable_amount
            undercovered = undercovered + result.undercovered_amount
            coverage_sum += result.coverage_percent

        average = quantize_percent(coverage_sum / len(results)) if results else _ZERO
        return CoverageSummary(
            total_fixed_costs=fixed,
            total_billable=billable,
            total_undercovered=undercovered,
            average_coverage_percent=average,
            count=len(results),
        )
