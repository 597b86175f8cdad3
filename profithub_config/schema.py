"""
AnalyticsConfig schema.

Frozen dataclasses holding every policy constant the engines use: risk
and alert thresholds, band limits, the POC blend weight, scenario
multipliers and projection horizons.  YAML files are parsed into these
types by ``profithub_config.loader``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class AgingPolicy:
    """Collections-risk thresholds applied per client."""

    high_risk_threshold: Decimal
    medium_risk_threshold: Decimal


@dataclass(frozen=True)
class VariancePolicy:
    """Absolute percentage under which a variance is within expectation."""

    threshold_percent: Decimal


@dataclass(frozen=True)
class CoveragePolicy:
    covered_threshold: Decimal
    nearly_covered_threshold: Decimal


@dataclass(frozen=True)
class PocPolicy:
    """Hours weight of the overall POC blend and the reporting bands."""

    hours_weight: Decimal
    advanced_threshold: Decimal
    progressing_threshold: Decimal
    midway_threshold: Decimal


@dataclass(frozen=True)
class CashPolicy:
    base_multiplier: Decimal
    optimistic_multiplier: Decimal
    conservative_multiplier: Decimal
    horizons_days: tuple[int, ...]
    low_balance_threshold: Decimal


@dataclass(frozen=True)
class AnalyticsConfig:
    """
    The runtime configuration artifact.

    ``checksum`` is the SHA-256 of the source document, so two configs with
    the same checksum drive the engines identically.
    """

    config_id: str
    version: int
    reporting_currency: str
    aging: AgingPolicy
    variance: VariancePolicy
    coverage: CoveragePolicy
    poc: PocPolicy
    cash: CashPolicy
    checksum: str = ""
