"""
Configuration Loader (``profithub_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed
``profithub_config.schema`` dataclasses.  Runtime callers go through
``profithub_config.get_active_config()`` rather than calling this directly.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Numbers are parsed into ``Decimal`` through their string form, so a
  YAML float such as ``1.15`` becomes ``Decimal("1.15")`` exactly.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Out-of-range or inconsistent values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from profithub_config.schema import (
    AgingPolicy,
    AnalyticsConfig,
    CashPolicy,
    CoveragePolicy,
    PocPolicy,
    VariancePolicy,
)
from profithub_kernel.domain.values import Currency


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, key: str) -> Decimal:
    """Parse a YAML scalar into a Decimal via its string form."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{key}: expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{key}: expected a number, got {value!r}") from None


def _non_negative(value: Any, key: str) -> Decimal:
    parsed = parse_decimal(value, key)
    if parsed < 0:
        raise ValueError(f"{key}: must not be negative, got {parsed}")
    return parsed


def parse_aging(data: dict[str, Any]) -> AgingPolicy:
    return AgingPolicy(
        high_risk_threshold=_non_negative(data["high_risk_threshold"], "aging.high_risk_threshold"),
        medium_risk_threshold=_non_negative(
            data["medium_risk_threshold"], "aging.medium_risk_threshold"
        ),
    )


def parse_variance(data: dict[str, Any]) -> VariancePolicy:
    return VariancePolicy(
        threshold_percent=_non_negative(data["threshold_percent"], "variance.threshold_percent"),
    )


def parse_coverage(data: dict[str, Any]) -> CoveragePolicy:
    policy = CoveragePolicy(
        covered_threshold=_non_negative(data["covered_threshold"], "coverage.covered_threshold"),
        nearly_covered_threshold=_non_negative(
            data["nearly_covered_threshold"], "coverage.nearly_covered_threshold"
        ),
    )
    if policy.nearly_covered_threshold > policy.covered_threshold:
        raise ValueError("coverage.nearly_covered_threshold exceeds covered_threshold")
    return policy


def parse_poc(data: dict[str, Any]) -> PocPolicy:
    """
    Parse the POC policy.

    Raises:
        KeyError: if a required key is missing.
        ValueError: if the hours weight is outside [0, 1] or the bands
            are not in descending order.
    """
    policy = PocPolicy(
        hours_weight=parse_decimal(data["hours_weight"], "poc.hours_weight"),
        advanced_threshold=_non_negative(data["advanced_threshold"], "poc.advanced_threshold"),
        progressing_threshold=_non_negative(
            data["progressing_threshold"], "poc.progressing_threshold"
        ),
        midway_threshold=_non_negative(data["midway_threshold"], "poc.midway_threshold"),
    )
    if not Decimal("0") <= policy.hours_weight <= Decimal("1"):
        raise ValueError(f"poc.hours_weight must be within [0, 1], got {policy.hours_weight}")
    if not (policy.midway_threshold <= policy.progressing_threshold <= policy.advanced_threshold):
        raise ValueError("poc band thresholds must satisfy midway <= progressing <= advanced")
    return policy


def parse_cash(data: dict[str, Any]) -> CashPolicy:
    """
    Parse the cash policy.

    Raises:
        KeyError: if a required key is missing.
        ValueError: if a multiplier is not positive or the horizon list is
            empty or holds non-positive values.
    """
    multipliers = data["scenario_multipliers"]
    parsed = {}
    for scenario in ("base", "optimistic", "conservative"):
        value = parse_decimal(multipliers[scenario], f"cash.scenario_multipliers.{scenario}")
        if value <= 0:
            raise ValueError(f"cash.scenario_multipliers.{scenario} must be positive")
        parsed[scenario] = value

    horizons = data["horizons_days"]
    if not horizons:
        raise ValueError("cash.horizons_days must list at least one horizon")
    for horizon in horizons:
        if isinstance(horizon, bool) or not isinstance(horizon, int) or horizon <= 0:
            raise ValueError(f"cash.horizons_days: invalid horizon {horizon!r}")

    return CashPolicy(
        base_multiplier=parsed["base"],
        optimistic_multiplier=parsed["optimistic"],
        conservative_multiplier=parsed["conservative"],
        horizons_days=tuple(sorted(set(horizons))),
        low_balance_threshold=_non_negative(
            data["low_balance_threshold"], "cash.low_balance_threshold"
        ),
    )


def parse_analytics_config(data: dict[str, Any]) -> AnalyticsConfig:
    """
    Parse a full configuration document.

    Raises:
        KeyError: if required keys are missing.
        ValueError: if any value is invalid (including an unknown
            reporting currency).
    """
    currency = Currency(data["reporting_currency"])
    return AnalyticsConfig(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        reporting_currency=currency.code,
        aging=parse_aging(data["aging"]),
        variance=parse_variance(data["variance"]),
        coverage=parse_coverage(data["coverage"]),
        poc=parse_poc(data["poc"]),
        cash=parse_cash(data["cash"]),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
