"""
profithub_engines.variance -- Baseline-versus-actual variance and budget comparison.

Responsibility:
    Compare an actual amount against a baseline (budget, forecast) and
    classify the percentage deviation.  Builds the budget-vs-actual report
    by aggregating both sides and joining them per group key.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import profithub_kernel and sibling engines.

Invariants enforced:
    - variance_amount = actual - baseline (positive means over budget).
    - variance_percent = variance_amount / baseline * 100, rounded to two
      places; exactly 0 when the baseline is zero.
    - Baseline and actual always share a currency.

Failure modes:
    - MixedCurrencyError when baseline and actual currencies differ, or a
      group on either side mixes currencies.

Usage:
    from profithub_engines.variance import VarianceCalculator

    result = VarianceCalculator().compare(
        baseline=Money.of("1000.00", "BRL"),
        actual=Money.of("1100.00", "BRL"),
    )
    result.variance_percent  # Decimal("10.00")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Mapping, Sequence

from profithub_kernel.domain.records import CATEGORY_DIMENSION, DatedRecord
from profithub_kernel.domain.values import Currency, Money, percent_of
from profithub_kernel.exceptions import MixedCurrencyError
from profithub_kernel.logging_config import get_logger
from profithub_engines.aggregation import Aggregator, GroupKey, as_dimensions
from profithub_engines.tracer import traced_engine

logger = get_logger("engines.variance")

DEFAULT_BUDGET_GROUPING: tuple[str, ...] = (CATEGORY_DIMENSION, "project_id", "cost_center_id")


class VarianceStatus(str, Enum):
    """How far an actual strays from its baseline."""

    WITHIN_EXPECTATION = "within_expectation"
    OVER_BUDGET = "over_budget"
    UNDER_BUDGET = "under_budget"


@dataclass(frozen=True)
class VarianceResult:
    """
    Result of one baseline/actual comparison.

    All fields are immutable and computed at construction time by
    ``VarianceCalculator.compare``.
    """

    baseline: Money
    actual: Money
    variance_amount: Money
    variance_percent: Decimal

    @property
    def is_over(self) -> bool:
        return self.variance_amount.is_positive

    @property
    def absolute_variance(self) -> Money:
        return abs(self.variance_amount)


@dataclass(frozen=True)
class BudgetVarianceLine:
    """One group of the budget-vs-actual report."""

    key: GroupKey
    dimensions: tuple[str, ...]
    result: VarianceResult
    status: VarianceStatus

    def dimension(self, name: str) -> str:
        return self.key[self.dimensions.index(name)]


@dataclass(frozen=True)
class BudgetVarianceReport:
    """
    Budget-vs-actual report.

    Guarantees:
        - ``lines`` is sorted by key.
        - totals equal the sums over ``lines``.
    """

    group_by: tuple[str, ...]
    currency: Currency
    lines: tuple[BudgetVarianceLine, ...]
    total_budget: Money
    total_actual: Money
    total_variance: Money

    @property
    def total_variance_percent(self) -> Decimal:
        return percent_of(self.total_variance.amount, self.total_budget.amount)

    def lines_with_status(self, status: VarianceStatus) -> tuple[BudgetVarianceLine, ...]:
        return tuple(line for line in self.lines if line.status is status)


class VarianceCalculator:
    """
    Pure function calculator for variances.

    Contract:
        No I/O, no database access, fully deterministic.
    Guarantees:
        - ``compare`` formula: actual - baseline; percent over the baseline.
        - ``classify`` is a separate helper; ``compare`` never classifies.
    """

    def __init__(
        self,
        threshold_percent: Decimal = Decimal("5"),
        aggregator: Aggregator | None = None,
        default_currency: str = "BRL",
    ):
        self.threshold_percent = Decimal(threshold_percent)
        self.aggregator = aggregator or Aggregator()
        self.default_currency = Currency(default_currency)

    @traced_engine("variance", "1.0", fingerprint_fields=("baseline", "actual"))
    def compare(self, baseline: Money, actual: Money) -> VarianceResult:
        """
        Compare ``actual`` against ``baseline``.

        Raises:
            MixedCurrencyError: the two amounts are in different currencies.
        """
        if baseline.currency != actual.currency:
            logger.error("variance_currency_mismatch", extra={
                "baseline_currency": baseline.currency.code,
                "actual_currency": actual.currency.code,
            })
            raise MixedCurrencyError(baseline.currency.code, actual.currency.code, "variance")

        variance_amount = actual - baseline
        variance_percent = percent_of(variance_amount.amount, baseline.amount)

        logger.debug("variance_calculated", extra={
            "baseline": str(baseline.amount),
            "actual": str(actual.amount),
            "variance_amount": str(variance_amount.amount),
            "variance_percent": str(variance_percent),
            "currency": baseline.currency.code,
        })

        return VarianceResult(
            baseline=baseline,
            actual=actual,
            variance_amount=variance_amount,
            variance_percent=variance_percent,
        )

    def classify(self, variance_percent: Decimal) -> VarianceStatus:
        """Within the threshold (exclusive) is within expectation; otherwise the sign decides."""
        if abs(variance_percent) < self.threshold_percent:
            return VarianceStatus.WITHIN_EXPECTATION
        if variance_percent > 0:
            return VarianceStatus.OVER_BUDGET
        return VarianceStatus.UNDER_BUDGET

    @traced_engine(
        "variance.budget_vs_actual", "1.0",
        fingerprint_fields=("budget_records", "actual_records", "group_by"),
    )
    def budget_vs_actual(
        self,
        budget_records: Sequence[DatedRecord],
        actual_records: Sequence[DatedRecord],
        group_by: Sequence[str] | str = DEFAULT_BUDGET_GROUPING,
    ) -> BudgetVarianceReport:
        """
        Aggregate budgets and actuals by ``group_by`` and compare per key.

        A key present on one side only counts as zero on the other.

        Raises:
            MixedCurrencyError: the two sides (or any group) mix currencies.
        """
        dims = as_dimensions(group_by)
        budgets = self.aggregator.aggregate(budget_records, dims)
        actuals = self.aggregator.aggregate(actual_records, dims)

        currency = self._report_currency(budgets, actuals)
        zero = Money.zero(currency)

        lines: list[BudgetVarianceLine] = []
        total_budget = zero
        total_actual = zero
        for key in sorted(set(budgets) | set(actuals)):
            baseline = budgets.get(key, zero)
            actual = actuals.get(key, zero)
            result = self.compare(baseline=baseline, actual=actual)
            lines.append(BudgetVarianceLine(
                key=key,
                dimensions=dims,
                result=result,
                status=self.classify(result.variance_percent),
            ))
            total_budget = total_budget + baseline
            total_actual = total_actual + actual

        logger.info("budget_vs_actual_calculated", extra={
            "group_by": list(dims),
            "line_count": len(lines),
            "total_budget": str(total_budget.amount),
            "total_actual": str(total_actual.amount),
            "currency": currency.code,
        })

        return BudgetVarianceReport(
            group_by=dims,
            currency=currency,
            lines=tuple(lines),
            total_budget=total_budget,
            total_actual=total_actual,
            total_variance=total_actual - total_budget,
        )

    def _report_currency(self, *sides: Mapping[GroupKey, Money]) -> Currency:
        currency: Currency | None = None
        for side in sides:
            for amount in side.values():
                if currency is None:
                    currency = amount.currency
                elif amount.currency != currency:
                    logger.error("budget_vs_actual_currency_mismatch", extra={
                        "expected_currency": currency.code,
                        "actual_currency": amount.currency.code,
                    })
                    raise MixedCurrencyError(
                        currency.code, amount.currency.code, "budget vs actual"
                    )
        return currency or self.default_currency
