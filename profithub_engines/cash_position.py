"""
profithub_engines.cash_position -- Cash roll-forward and scenario projection.

Responsibility:
    Roll an opening bank balance forward through projected inflows and
    outflows, scale the result by a scenario multiplier, and raise balance
    alerts.  Also totals flows over a period and consolidates positions
    across bank accounts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    ``as_of`` is always passed in; the projector never reads a clock.

Invariants enforced:
    - projected = (opening + inflows - outflows) * multiplier(scenario),
      rounded to the currency's decimals (half-up).
    - Only flows dated within [as_of, as_of + horizon_days] are included.
    - Horizons are restricted to the configured set (7, 30, 90 by default).
    - Flow amounts are unsigned; direction carries the sign.

Failure modes:
    - InvalidInputError for an unsupported horizon or a negative flow.
    - MixedCurrencyError when flows and the opening balance differ in
      currency, or positions in different currencies are consolidated.

Usage:
    from profithub_engines.cash_position import CashPositionProjector, CashScenario

    projector = CashPositionProjector()
    projector.project(
        opening_balance=Money.of("100000", "BRL"),
        flows=flows,
        horizon_days=30,
        scenario=CashScenario.OPTIMISTIC,
        as_of=date(2024, 1, 1),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from profithub_kernel.domain.records import (
    CashFlowLine,
    FlowDirection,
    PeriodRange,
    as_calendar_date,
)
from profithub_kernel.domain.values import Currency, Money
from profithub_kernel.exceptions import InvalidInputError, MixedCurrencyError
from profithub_kernel.logging_config import get_logger
from profithub_engines.tracer import traced_engine

logger = get_logger("engines.cash_position")


class CashScenario(str, Enum):
    BASE = "base"
    OPTIMISTIC = "optimistic"
    CONSERVATIVE = "conservative"

    @classmethod
    def parse(cls, scenario: CashScenario | str) -> CashScenario:
        try:
            return cls(scenario)
        except ValueError:
            raise InvalidInputError(
                "scenario", scenario, f"expected one of {[s.value for s in cls]}"
            ) from None


class CashAlert(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"


@dataclass(frozen=True)
class ScenarioMultipliers:
    """Scaling factor applied to a projected balance per scenario."""

    base: Decimal = Decimal("1.0")
    optimistic: Decimal = Decimal("1.15")
    conservative: Decimal = Decimal("0.80")

    def for_scenario(self, scenario: CashScenario | str) -> Decimal:
        return getattr(self, CashScenario.parse(scenario).value)


@dataclass(frozen=True)
class FlowTotals:
    """Inflows, outflows and net movement over a period."""

    period: PeriodRange
    inflows: Money
    outflows: Money

    @property
    def net(self) -> Money:
        return self.inflows - self.outflows


@dataclass(frozen=True)
class CashPosition:
    """
    Position of one account (or a consolidation) on one day.

    ``projections`` maps each configured horizon in days to the projected
    balance under ``scenario``.
    """

    as_of: date
    scenario: CashScenario
    opening_balance: Money
    inflows: Money
    outflows: Money
    closing_balance: Money
    projections: Mapping[int, Money]

    def projected(self, horizon_days: int) -> Money:
        return self.projections[horizon_days]


class CashPositionProjector:
    """
    Pure projector for cash positions.

    Contract:
        Multipliers, horizons and the low-balance threshold come from the
        constructor so configuration can supply them.
    """

    def __init__(
        self,
        multipliers: ScenarioMultipliers | None = None,
        horizons: Sequence[int] = (7, 30, 90),
        low_balance_threshold: Decimal = Decimal("50000"),
    ):
        self.multipliers = multipliers or ScenarioMultipliers()
        self.horizons = tuple(sorted(horizons))
        self.low_balance_threshold = Decimal(low_balance_threshold)

    def _check_flows(self, currency_code: str, flows: Sequence[CashFlowLine]) -> None:
        for flow in flows:
            if flow.amount.is_negative:
                raise InvalidInputError("flow.amount", str(flow.amount), "must not be negative")
            if flow.amount.currency.code != currency_code:
                logger.error("cash_flow_currency_mismatch", extra={
                    "expected_currency": currency_code,
                    "actual_currency": flow.amount.currency.code,
                })
                raise MixedCurrencyError(currency_code, flow.amount.currency.code, "cash projection")

    @staticmethod
    def _sum_direction(
        flows: Sequence[CashFlowLine],
        direction: FlowDirection,
        window: PeriodRange,
        zero: Money,
    ) -> Money:
        total = zero
        for flow in flows:
            if flow.direction == direction and window.contains(flow.date):
                total = total + flow.amount
        return total

    @traced_engine(
        "cash_position.project", "1.0",
        fingerprint_fields=("opening_balance", "flows", "horizon_days", "scenario", "as_of"),
    )
    def project(
        self,
        opening_balance: Money,
        flows: Sequence[CashFlowLine],
        horizon_days: int,
        scenario: CashScenario | str,
        as_of: date,
    ) -> Money:
        """
        Projected balance ``horizon_days`` after ``as_of`` under ``scenario``.

        Raises:
            InvalidInputError: unsupported horizon or negative flow amount.
            MixedCurrencyError: a flow differs in currency from the opening balance.
        """
        if horizon_days not in self.horizons:
            raise InvalidInputError(
                "horizon_days", horizon_days, f"supported horizons are {list(self.horizons)}"
            )
        start = as_calendar_date(as_of, "as_of")
        scenario = CashScenario.parse(scenario)
        self._check_flows(opening_balance.currency.code, flows)

        window = PeriodRange(start, start + timedelta(days=horizon_days))
        zero = Money.zero(opening_balance.currency)
        inflows = self._sum_direction(flows, FlowDirection.INFLOW, window, zero)
        outflows = self._sum_direction(flows, FlowDirection.OUTFLOW, window, zero)

        base = opening_balance + inflows - outflows
        projected = (base * self.multipliers.for_scenario(scenario)).round()

        logger.debug("cash_position_projected", extra={
            "as_of": start.isoformat(),
            "horizon_days": horizon_days,
            "scenario": scenario.value,
            "base_balance": str(base.amount),
            "projected_balance": str(projected.amount),
        })
        return projected

    def position(
        self,
        opening_balance: Money,
        flows: Sequence[CashFlowLine],
        as_of: date,
        scenario: CashScenario | str = CashScenario.BASE,
    ) -> CashPosition:
        """
        Snapshot for ``as_of``: the day's movements, closing balance and
        one projection per configured horizon.
        """
        day = as_calendar_date(as_of, "as_of")
        scenario = CashScenario.parse(scenario)
        self._check_flows(opening_balance.currency.code, flows)

        today = PeriodRange(day, day)
        zero = Money.zero(opening_balance.currency)
        inflows = self._sum_direction(flows, FlowDirection.INFLOW, today, zero)
        outflows = self._sum_direction(flows, FlowDirection.OUTFLOW, today, zero)

        projections = {
            horizon: self.project(
                opening_balance=opening_balance,
                flows=flows,
                horizon_days=horizon,
                scenario=scenario,
                as_of=day,
            )
            for horizon in self.horizons
        }

        position = CashPosition(
            as_of=day,
            scenario=scenario,
            opening_balance=opening_balance,
            inflows=inflows,
            outflows=outflows,
            closing_balance=opening_balance + inflows - outflows,
            projections=MappingProxyType(projections),
        )
        logger.info("cash_position_calculated", extra={
            "as_of": day.isoformat(),
            "scenario": scenario.value,
            "closing_balance": str(position.closing_balance.amount),
            "currency": opening_balance.currency.code,
        })
        return position

    def flow_totals(
        self,
        flows: Sequence[CashFlowLine],
        period: PeriodRange,
        currency: str | None = None,
    ) -> FlowTotals:
        """
        Inflows and outflows dated inside ``period``.

        ``currency`` fixes the report currency; without it the first flow's
        currency is used.

        Raises:
            InvalidInputError: no flows and no currency to report in.
            MixedCurrencyError: flows differ in currency.
        """
        if currency is None:
            if not flows:
                raise InvalidInputError("flows", [], "at least one flow is needed to fix the currency")
            currency = flows[0].amount.currency.code
        currency = Currency(currency).code
        self._check_flows(currency, flows)
        zero = Money.zero(currency)
        return FlowTotals(
            period=period,
            inflows=self._sum_direction(flows, FlowDirection.INFLOW, period, zero),
            outflows=self._sum_direction(flows, FlowDirection.OUTFLOW, period, zero),
        )

    def consolidate(self, positions: Sequence[CashPosition]) -> CashPosition:
        """
        Sum positions of several accounts into one.

        Raises:
            InvalidInputError: no positions, or positions differ in date or scenario.
            MixedCurrencyError: positions differ in currency.
        """
        if not positions:
            raise InvalidInputError("positions", [], "nothing to consolidate")
        first = positions[0]
        for other in positions[1:]:
            if other.as_of != first.as_of or other.scenario != first.scenario:
                raise InvalidInputError(
                    "positions",
                    f"{other.as_of}/{other.scenario.value}",
                    f"expected {first.as_of}/{first.scenario.value}",
                )

        opening = inflows = outflows = closing = Money.zero(first.opening_balance.currency)
        projections = {h: Money.zero(first.opening_balance.currency) for h in first.projections}
        for pos in positions:
            opening = opening + pos.opening_balance
            inflows = inflows + pos.inflows
            outflows = outflows + pos.outflows
            closing = closing + pos.closing_balance
            for horizon in projections:
                projections[horizon] = projections[horizon] + pos.projections[horizon]

        return CashPosition(
            as_of=first.as_of,
            scenario=first.scenario,
            opening_balance=opening,
            inflows=inflows,
            outflows=outflows,
            closing_balance=closing,
            projections=MappingProxyType(projections),
        )

    def alert(self, balance: Money) -> CashAlert | None:
        """Critical below zero, warning below the low-balance threshold."""
        if balance.is_negative:
            return CashAlert.CRITICAL
        if balance.amount < self.low_balance_threshold:
            return CashAlert.WARNING
        return None
