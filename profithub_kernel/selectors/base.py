"""
Module: profithub_kernel.selectors.base
Responsibility: Base class for the read-only query objects that feed the
    engines.  A selector turns stored rows into engine records
    (``DatedRecord``, ``CashFlowLine``) or frozen DTOs.
Architecture position: Kernel > Selectors.  May import from db/ only.

Invariants enforced:
    - Selectors never add, delete, flush or commit; the caller owns the
      session and its transaction.
"""

from abc import ABC
from decimal import Decimal
from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from profithub_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """Holds the caller's session; subclasses add the domain queries."""

    def __init__(self, session: Session):
        self.session = session

    def _rows(self, stmt: Select[Any]) -> list[Any]:
        return list(self.session.scalars(stmt))

    def _decimal_total(self, stmt: Select[Any]) -> Decimal:
        """Sum of a single numeric column; zero when nothing matches."""
        return sum((Decimal(value) for value in self.session.scalars(stmt)), Decimal("0"))
