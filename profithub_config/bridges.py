"""
Config -> Engine Bridges.

Functions that turn an ``AnalyticsConfig`` into configured engine
instances.  They live in profithub_config (the producer) because the
engines must never import profithub_config.

Usage:
    from profithub_config import get_active_config
    from profithub_config.bridges import build_cash_projector

    projector = build_cash_projector(get_active_config())
"""

from __future__ import annotations

from profithub_config.schema import AnalyticsConfig
from profithub_engines.aging import AgingCalculator
from profithub_engines.cash_position import CashPositionProjector, ScenarioMultipliers
from profithub_engines.coverage import CoverageCalculator
from profithub_engines.variance import VarianceCalculator


def build_aging_calculator(config: AnalyticsConfig) -> AgingCalculator:
    return AgingCalculator(
        high_risk_threshold=config.aging.high_risk_threshold,
        medium_risk_threshold=config.aging.medium_risk_threshold,
        default_currency=config.reporting_currency,
    )


def build_variance_calculator(config: AnalyticsConfig) -> VarianceCalculator:
    return VarianceCalculator(
        threshold_percent=config.variance.threshold_percent,
        default_currency=config.reporting_currency,
    )


def build_coverage_calculator(config: AnalyticsConfig) -> CoverageCalculator:
    return CoverageCalculator(
        poc_hours_weight=config.poc.hours_weight,
        covered_threshold=config.coverage.covered_threshold,
        nearly_covered_threshold=config.coverage.nearly_covered_threshold,
        poc_advanced_threshold=config.poc.advanced_threshold,
        poc_progressing_threshold=config.poc.progressing_threshold,
        poc_midway_threshold=config.poc.midway_threshold,
        default_currency=config.reporting_currency,
    )


def build_cash_projector(config: AnalyticsConfig) -> CashPositionProjector:
    """Projector using the configured multipliers, horizons and alert threshold."""
    return CashPositionProjector(
        multipliers=ScenarioMultipliers(
            base=config.cash.base_multiplier,
            optimistic=config.cash.optimistic_multiplier,
            conservative=config.cash.conservative_multiplier,
        ),
        horizons=config.cash.horizons_days,
        low_balance_threshold=config.cash.low_balance_threshold,
    )
