"""
Module: profithub_kernel.db.base
Responsibility: Declarative bases for the analytics tables.
Architecture position: Kernel > DB.  Every module ``orm.py`` imports from
    here; this module imports nothing from the project.

Column conventions:
    - Primary keys are uuid4 values stored as 36-character strings so the
      same schema runs on SQLite and server databases.
    - Money amounts, hours and percentages are ``Decimal`` and map to
      Numeric(38, 9); nothing is stored as float.
    - Calendar dates (due dates, projection dates, period bounds) map to
      DATE; audit timestamps are timezone-aware.
    - Every tracked row names its creator (``created_by_id`` NOT NULL).
      Services stamp it with the caller's actor id.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import Date, DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUID column stored as its canonical string; accepts UUID or str on bind."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None:
            return None
        return str(value if isinstance(value, PyUUID) else PyUUID(str(value)))

    def process_result_value(self, value: Any, dialect: Any) -> PyUUID | None:
        return None if value is None else PyUUID(value)


class Base(DeclarativeBase):
    """Declarative base: uuid4 primary key plus the column type map above."""

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9, asdecimal=True),
        date: Date(),
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(primary_key=True, default=uuid4)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id}>"


class TrackedBase(Base):
    """Abstract base adding who/when audit columns."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())
    created_by_id: Mapped[PyUUID]
    updated_by_id: Mapped[PyUUID | None]
