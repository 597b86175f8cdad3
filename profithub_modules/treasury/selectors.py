"""Read-only queries over bank accounts and projected cash flows."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select

from profithub_kernel.domain.records import CashFlowLine, FlowDirection
from profithub_kernel.domain.values import Money
from profithub_kernel.selectors.base import BaseSelector
from profithub_modules.treasury.orm import (
    BankAccountModel,
    CashFlowProjectionModel,
    CashPositionSnapshotModel,
)

ACTIVE_ACCOUNT_STATUS = "active"


class TreasurySelector(BaseSelector[BankAccountModel]):
    """Bank balances and projected flows as engine inputs."""

    def active_accounts(self) -> list[BankAccountModel]:
        stmt = (
            select(BankAccountModel)
            .where(BankAccountModel.status == ACTIVE_ACCOUNT_STATUS)
            .order_by(BankAccountModel.bank_name, BankAccountModel.account_number)
        )
        return self._rows(stmt)

    def flow_lines(
        self,
        start: date,
        end: date,
        scenario_type: str,
    ) -> list[tuple[UUID | None, CashFlowLine]]:
        """
        Projected flows dated in ``[start, end]`` for one stored scenario,
        paired with their bank account id (None when unassigned).
        """
        stmt = (
            select(CashFlowProjectionModel)
            .where(CashFlowProjectionModel.projection_date >= start)
            .where(CashFlowProjectionModel.projection_date <= end)
            .where(CashFlowProjectionModel.scenario_type == scenario_type)
            .order_by(CashFlowProjectionModel.projection_date)
        )
        return [
            (
                row.bank_account_id,
                CashFlowLine(
                    date=row.projection_date,
                    amount=Money.of(row.amount, row.currency),
                    direction=FlowDirection(row.flow_type),
                    category=row.category,
                    dimension_keys={
                        "bank_account_id": row.bank_account_id,
                        "source_type": row.source_type,
                    },
                ),
            )
            for row in self._rows(stmt)
        ]

    def snapshots(self, snapshot_date: date, scenario_type: str) -> list[CashPositionSnapshotModel]:
        stmt = (
            select(CashPositionSnapshotModel)
            .where(CashPositionSnapshotModel.snapshot_date == snapshot_date)
            .where(CashPositionSnapshotModel.scenario_type == scenario_type)
            .order_by(CashPositionSnapshotModel.created_at)
        )
        return self._rows(stmt)
