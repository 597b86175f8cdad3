"""Treasury: bank accounts, projected flows, cash positions."""

from profithub_modules.treasury.models import CashPositionSnapshot, TreasuryPosition
from profithub_modules.treasury.service import TreasuryService

__all__ = ["CashPositionSnapshot", "TreasuryPosition", "TreasuryService"]
