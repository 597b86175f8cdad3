"""
Module: profithub_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    profithub_config and profithub_modules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import profithub_kernel (and sibling engine modules).
    MUST NOT import profithub_config or profithub_modules.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Reference dates are explicit parameters supplied by services.
    - Decimal-only arithmetic: all monetary amounts use ``Money``.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from profithub_engines import PeriodResolver, VarianceCalculator
    from profithub_engines.cash_position import CashScenario
"""

from profithub_engines.aggregation import Aggregator, GroupKey
from profithub_engines.aging import (
    AgingBucket,
    AgingCalculator,
    AgingReport,
    BucketSummary,
    ClientAging,
    RiskLevel,
    TimeBucketClassifier,
)
from profithub_engines.cash_position import (
    CashAlert,
    CashPosition,
    CashPositionProjector,
    CashScenario,
    FlowTotals,
    ScenarioMultipliers,
)
from profithub_engines.coverage import (
    CoverageCalculator,
    CoverageResult,
    CoverageStatus,
    CoverageSummary,
    PocBand,
    PocResult,
)
from profithub_engines.periods import PeriodResolver, PeriodToken
from profithub_engines.tracer import traced_engine
from profithub_engines.variance import (
    BudgetVarianceLine,
    BudgetVarianceReport,
    VarianceCalculator,
    VarianceResult,
    VarianceStatus,
)

__all__ = [
    "AgingBucket",
    "AgingCalculator",
    "AgingReport",
    "Aggregator",
    "BucketSummary",
    "BudgetVarianceLine",
    "BudgetVarianceReport",
    "CashAlert",
    "CashPosition",
    "CashPositionProjector",
    "CashScenario",
    "ClientAging",
    "CoverageCalculator",
    "CoverageResult",
    "CoverageStatus",
    "CoverageSummary",
    "FlowTotals",
    "GroupKey",
    "PeriodResolver",
    "PeriodToken",
    "PocBand",
    "PocResult",
    "RiskLevel",
    "ScenarioMultipliers",
    "TimeBucketClassifier",
    "VarianceCalculator",
    "VarianceResult",
    "VarianceStatus",
    "traced_engine",
]
