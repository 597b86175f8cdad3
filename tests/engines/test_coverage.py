"""
Tests for the coverage engine.

Covers:
- Undercoverage amount and coverage percentage
- Zero fixed costs
- Percentage of completion blending
- Status and band classification
- Input validation
"""

from decimal import Decimal

import pytest

from profithub_engines.coverage import (
    CoverageCalculator,
    CoverageStatus,
    PocBand,
)
from profithub_kernel.domain.values import Money
from profithub_kernel.exceptions import InvalidInputError, MixedCurrencyError


def brl(amount: str) -> Money:
    return Money.of(amount, "BRL")


class TestUndercoverage:
    def setup_method(self):
        self.calculator = CoverageCalculator()

    def test_partially_covered(self):
        result = self.calculator.undercoverage(brl("100000"), brl("60000"))
        assert result.undercovered_amount == brl("40000")
        assert result.coverage_percent == Decimal("60.00")
        assert result.is_covered is False

    def test_fully_covered(self):
        result = self.calculator.undercoverage(brl("50000"), brl("50000"))
        assert result.undercovered_amount.is_zero
        assert result.coverage_percent == Decimal("100.00")
        assert result.is_covered is True

    def test_over_covered_not_capped(self):
        result = self.calculator.undercoverage(brl("1000"), brl("1500"))
        assert result.undercovered_amount == brl("0")
        assert result.coverage_percent == Decimal("150.00")

    def test_zero_fixed_costs(self):
        result = self.calculator.undercoverage(brl("0"), brl("0"))
        assert result.coverage_percent == Decimal("100")
        assert result.undercovered_amount.is_zero

    def test_productive_hours_carried(self):
        result = self.calculator.undercoverage(brl("10"), brl("5"), productive_hours="160.5")
        assert result.productive_hours == Decimal("160.5")

    def test_negative_fixed_costs_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            self.calculator.undercoverage(brl("-1"), brl("0"))
        assert exc_info.value.field == "fixed_costs"

    def test_negative_hours_rejected(self):
        with pytest.raises(InvalidInputError):
            self.calculator.undercoverage(brl("1"), brl("0"), productive_hours=-1)

    def test_float_hours_rejected(self):
        with pytest.raises(InvalidInputError):
            self.calculator.undercoverage(brl("1"), brl("0"), productive_hours=1.5)

    @pytest.mark.parametrize("hours", ["NaN", "Infinity", "-Infinity", "abc", ""])
    def test_malformed_hours_rejected(self, hours):
        with pytest.raises(InvalidInputError) as exc_info:
            self.calculator.undercoverage(brl("1"), brl("0"), productive_hours=hours)
        assert exc_info.value.field == "productive_hours"

    def test_currency_mismatch(self):
        with pytest.raises(MixedCurrencyError):
            self.calculator.undercoverage(brl("1"), Money.of("1", "USD"))


class TestPercentageOfCompletion:
    def setup_method(self):
        self.calculator = CoverageCalculator()

    def test_equal_blend(self):
        result = self.calculator.percentage_of_completion(
            worked_hours=Decimal("400"),
            budgeted_hours=Decimal("1000"),
            incurred_cost=brl("60000"),
            budgeted_cost=brl("100000"),
        )
        assert result.hours_based_poc == Decimal("40.00")
        assert result.cost_based_poc == Decimal("60.00")
        assert result.overall_poc == Decimal("50.00")

    def test_weighted_blend(self):
        calculator = CoverageCalculator(poc_hours_weight=Decimal("0.75"))
        result = calculator.percentage_of_completion(
            worked_hours=80, budgeted_hours=100,
            incurred_cost=brl("40"), budgeted_cost=brl("100"),
        )
        assert result.overall_poc == Decimal("70.00")

    def test_hours_only_weight(self):
        calculator = CoverageCalculator(poc_hours_weight=Decimal("1"))
        result = calculator.percentage_of_completion(
            worked_hours=30, budgeted_hours=100,
            incurred_cost=brl("99"), budgeted_cost=brl("100"),
        )
        assert result.overall_poc == Decimal("30.00")

    def test_zero_budgets(self):
        result = self.calculator.percentage_of_completion(
            worked_hours=10, budgeted_hours=0,
            incurred_cost=brl("10"), budgeted_cost=brl("0"),
        )
        assert result.hours_based_poc == Decimal("0")
        assert result.cost_based_poc == Decimal("0")
        assert result.overall_poc == Decimal("0.00")

    def test_overrun_above_100(self):
        result = self.calculator.percentage_of_completion(
            worked_hours=150, budgeted_hours=100,
            incurred_cost=brl("100"), budgeted_cost=brl("100"),
        )
        assert result.hours_based_poc == Decimal("150.00")
        assert result.overall_poc == Decimal("125.00")

    def test_result_keeps_inputs(self):
        result = self.calculator.percentage_of_completion(
            worked_hours="12.5", budgeted_hours="50",
            incurred_cost=brl("1"), budgeted_cost=brl("4"),
        )
        assert result.worked_hours == Decimal("12.5")
        assert result.budgeted_cost == brl("4")

    def test_negative_hours_rejected(self):
        with pytest.raises(InvalidInputError):
            self.calculator.percentage_of_completion(
                worked_hours=-1, budgeted_hours=10,
                incurred_cost=brl("0"), budgeted_cost=brl("0"),
            )

    @pytest.mark.parametrize("hours", ["abc", "NaN", "Infinity", Decimal("NaN")])
    def test_malformed_hours_rejected(self, hours):
        with pytest.raises(InvalidInputError) as exc_info:
            self.calculator.percentage_of_completion(
                worked_hours=hours, budgeted_hours=10,
                incurred_cost=brl("0"), budgeted_cost=brl("0"),
            )
        assert exc_info.value.field == "worked_hours"

    def test_currency_mismatch(self):
        with pytest.raises(MixedCurrencyError):
            self.calculator.percentage_of_completion(
                worked_hours=1, budgeted_hours=10,
                incurred_cost=brl("1"), budgeted_cost=Money.of("10", "USD"),
            )

    @pytest.mark.parametrize("weight", [Decimal("-0.1"), Decimal("1.01")])
    def test_weight_out_of_range(self, weight):
        with pytest.raises(InvalidInputError):
            CoverageCalculator(poc_hours_weight=weight)


class TestClassification:
    def setup_method(self):
        self.calculator = CoverageCalculator()

    @pytest.mark.parametrize(
        "percent, expected",
        [
            (Decimal("150"), CoverageStatus.COVERED),
            (Decimal("100"), CoverageStatus.COVERED),
            (Decimal("99.99"), CoverageStatus.NEARLY_COVERED),
            (Decimal("80"), CoverageStatus.NEARLY_COVERED),
            (Decimal("79.99"), CoverageStatus.UNCOVERED),
            (Decimal("0"), CoverageStatus.UNCOVERED),
        ],
    )
    def test_coverage_status(self, percent, expected):
        assert self.calculator.coverage_status(percent) is expected

    @pytest.mark.parametrize(
        "percent, expected",
        [
            (Decimal("90"), PocBand.ADVANCED),
            (Decimal("89.99"), PocBand.PROGRESSING),
            (Decimal("70"), PocBand.PROGRESSING),
            (Decimal("50"), PocBand.MIDWAY),
            (Decimal("49.99"), PocBand.EARLY),
        ],
    )
    def test_poc_band(self, percent, expected):
        assert self.calculator.poc_band(percent) is expected


class TestSummarize:
    def setup_method(self):
        self.calculator = CoverageCalculator()

    def test_totals_and_average(self):
        results = [
            self.calculator.undercoverage(brl("100"), brl("50")),
            self.calculator.undercoverage(brl("100"), brl("100")),
        ]
        summary = self.calculator.summarize(results)
        assert summary.total_fixed_costs == brl("200")
        assert summary.total_billable == brl("150")
        assert summary.total_undercovered == brl("50")
        assert summary.average_coverage_percent == Decimal("75.00")
        assert summary.count == 2

    def test_empty(self):
        summary = self.calculator.summarize([])
        assert summary.count == 0
        assert summary.total_fixed_costs == brl("0")
        assert summary.average_coverage_percent == Decimal("0")
