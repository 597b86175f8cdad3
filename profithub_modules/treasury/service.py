"""
profithub_modules.treasury.service
==================================

Responsibility:
    Cash position per active bank account and consolidated per currency,
    under a chosen scenario, plus inflow/outflow totals for a period.
    Roll-forward and projection math lives in
    ``profithub_engines.cash_position``.

Architecture:
    Module layer (profithub_modules).  ``calculate_cash_position`` writes
    snapshot rows and owns the transaction boundary (commit on success,
    rollback on failure).  ``flow_totals`` is read-only.

Invariants enforced:
    - Projections always start from the ``base`` stored flows; the
      scenario is applied through its configured multiplier.
    - Flows with no bank account only count towards the consolidated
      position of their currency.
    - Every snapshot row carries the caller's ``actor_id``.

Failure modes:
    - InvalidInputError for an unknown scenario.
    - InvalidPeriodToken for an unknown period token.
    - MixedCurrencyError when an account's flows are not in its currency.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from profithub_config import AnalyticsConfig, get_active_config
from profithub_config.bridges import build_cash_projector
from profithub_engines.cash_position import CashAlert, CashPosition, CashScenario, FlowTotals
from profithub_engines.periods import PeriodResolver, PeriodToken
from profithub_kernel.domain.clock import Clock, SystemClock
from profithub_kernel.domain.records import CashFlowLine
from profithub_kernel.domain.values import Money
from profithub_kernel.logging_config import LogContext, get_logger
from profithub_modules.treasury.models import CashPositionSnapshot, TreasuryPosition
from profithub_modules.treasury.orm import CashPositionSnapshotModel
from profithub_modules.treasury.selectors import TreasurySelector

logger = get_logger("modules.treasury.service")

BASE_FLOW_SCENARIO = CashScenario.BASE.value
_SNAPSHOT_HORIZONS = (7, 30, 90)


class TreasuryService:
    """
    Cash positions over stored bank accounts and projected flows.

    Contract:
        ``calculate_cash_position`` commits every snapshot of one run
        together or none of them.
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
        self._projector = build_cash_projector(self._config)
        self._periods = PeriodResolver()
        self._selector = TreasurySelector(session)

    def calculate_cash_position(
        self,
        scenario: CashScenario | str,
        actor_id: UUID,
        as_of: date | None = None,
    ) -> TreasuryPosition:
        """
        Record one snapshot per active bank account and one consolidated
        snapshot per currency.

        Raises:
            InvalidInputError: unknown scenario.
            MixedCurrencyError: a flow differs from its account's currency.
        """
        scenario = CashScenario.parse(scenario)
        as_of = as_of or self._clock.today()
        with LogContext.bind(actor_id=str(actor_id), module="treasury"):
            try:
                horizon_end = as_of + timedelta(days=max(self._projector.horizons))
                flows_by_account: dict[UUID | None, list[CashFlowLine]] = defaultdict(list)
                for account_id, line in self._selector.flow_lines(
                    as_of, horizon_end, BASE_FLOW_SCENARIO
                ):
                    flows_by_account[account_id].append(line)

                positions: dict[str, CashPosition] = {}
                by_currency: dict[str, list[CashPosition]] = defaultdict(list)
                account_snapshots: list[CashPositionSnapshot] = []

                for account in self._selector.active_accounts():
                    position = self._projector.position(
                        opening_balance=Money.of(account.current_balance, account.currency),
                        flows=flows_by_account.get(account.id, []),
                        as_of=as_of,
                        scenario=scenario,
                    )
                    positions[str(account.id)] = position
                    by_currency[account.currency].append(position)
                    account_snapshots.append(self._snapshot(position, account.id, actor_id))

                unassigned: dict[str, list[CashFlowLine]] = defaultdict(list)
                for line in flows_by_account.get(None, []):
                    unassigned[line.amount.currency.code].append(line)
                for currency, lines in unassigned.items():
                    by_currency[currency].append(self._projector.position(
                        opening_balance=Money.zero(currency),
                        flows=lines,
                        as_of=as_of,
                        scenario=scenario,
                    ))

                consolidated_snapshots: list[CashPositionSnapshot] = []
                for currency in sorted(by_currency):
                    consolidated = self._projector.consolidate(by_currency[currency])
                    positions[f"consolidated:{currency}"] = consolidated
                    consolidated_snapshots.append(self._snapshot(consolidated, None, actor_id))

                for snapshot in account_snapshots + consolidated_snapshots:
                    self._session.add(CashPositionSnapshotModel.from_dto(snapshot))
                self._session.commit()

                alerts: dict[str, CashAlert] = {}
                for key, position in positions.items():
                    alert = self._projector.alert(position.closing_balance)
                    if alert is not None:
                        alerts[key] = alert
                        logger.warning("cash_balance_alert", extra={
                            "position": key,
                            "alert": alert.value,
                            "closing_balance": str(position.closing_balance.amount),
                        })

                logger.info("cash_position_recorded", extra={
                    "as_of": as_of.isoformat(),
                    "scenario": scenario.value,
                    "account_count": len(account_snapshots),
                    "currency_count": len(consolidated_snapshots),
                })
                return TreasuryPosition(
                    as_of=as_of,
                    scenario=scenario.value,
                    accounts=tuple(account_snapshots),
                    consolidated=tuple(consolidated_snapshots),
                    positions=positions,
                    alerts=alerts,
                )
            except Exception:
                self._session.rollback()
                raise

    def flow_totals(
        self,
        period_token: PeriodToken | str,
        scenario: CashScenario | str = CashScenario.BASE,
        reference: date | None = None,
    ) -> FlowTotals:
        """
        Inflows, outflows and net of the stored ``scenario`` flows in the
        resolved period, in the reporting currency.

        Raises:
            InvalidPeriodToken: unknown token.
            InvalidInputError: unknown scenario.
            MixedCurrencyError: a flow is not in the reporting currency.
        """
        scenario = CashScenario.parse(scenario)
        period = self._periods.resolve(period_token, reference or self._clock.today())
        lines = [
            line
            for _, line in self._selector.flow_lines(period.start, period.end, scenario.value)
        ]
        totals = self._projector.flow_totals(
            lines, period, currency=self._config.reporting_currency
        )
        logger.info("cash_flow_totals_calculated", extra={
            "period": str(period),
            "scenario": scenario.value,
            "flow_count": len(lines),
            "net": str(totals.net.amount),
        })
        return totals

    def snapshots(
        self,
        snapshot_date: date,
        scenario: CashScenario | str = CashScenario.BASE,
    ) -> tuple[CashPositionSnapshot, ...]:
        """Previously recorded snapshots for a date and scenario."""
        scenario = CashScenario.parse(scenario)
        return tuple(row.to_dto() for row in self._selector.snapshots(snapshot_date, scenario.value))

    def _snapshot(
        self,
        position: CashPosition,
        bank_account_id: UUID | None,
        actor_id: UUID,
    ) -> CashPositionSnapshot:
        projected = {
            h: (position.projections[h].amount if h in position.projections else None)
            for h in _SNAPSHOT_HORIZONS
        }
        return CashPositionSnapshot(
            id=uuid4(),
            snapshot_date=position.as_of,
            bank_account_id=bank_account_id,
            scenario_type=position.scenario.value,
            currency=position.opening_balance.currency.code,
            opening_balance=position.opening_balance.amount,
            inflows=position.inflows.amount,
            outflows=position.outflows.amount,
            closing_balance=position.closing_balance.amount,
            projected_balance_7d=projected[7],
            projected_balance_30d=projected[30],
            projected_balance_90d=projected[90],
            calculated_by=actor_id,
        )
