"""
profithub_modules.treasury.models
=================================

Frozen DTOs for recorded cash positions.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from profithub_engines.cash_position import CashAlert, CashPosition


@dataclass(frozen=True)
class CashPositionSnapshot:
    """
    One recorded position.  ``bank_account_id`` is None for the
    consolidated row of a currency.
    """

    id: UUID
    snapshot_date: date
    bank_account_id: UUID | None
    scenario_type: str
    currency: str
    opening_balance: Decimal
    inflows: Decimal
    outflows: Decimal
    closing_balance: Decimal
    projected_balance_7d: Decimal | None
    projected_balance_30d: Decimal | None
    projected_balance_90d: Decimal | None
    calculated_by: UUID

    @property
    def is_consolidated(self) -> bool:
        return self.bank_account_id is None


@dataclass(frozen=True)
class TreasuryPosition:
    """Result of ``TreasuryService.calculate_cash_position``."""

    as_of: date
    scenario: str
    accounts: tuple[CashPositionSnapshot, ...]
    consolidated: tuple[CashPositionSnapshot, ...]
    positions: dict[str, CashPosition]
    alerts: dict[str, CashAlert]

    def consolidated_for(self, currency: str) -> CashPositionSnapshot:
        for snapshot in self.consolidated:
            if snapshot.currency == currency:
                return snapshot
        raise KeyError(currency)
