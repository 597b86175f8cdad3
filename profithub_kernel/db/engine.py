"""
Module: profithub_kernel.db.engine
Responsibility: The process-wide SQLAlchemy engine and session factory.
Architecture position: Kernel > DB.  Imports db/base.py and logging only.

Notes:
    - Server databases get a pooled engine at READ COMMITTED; their DBAPI
      driver is installed separately.
    - SQLite URLs are accepted for local runs and the test suite; in-memory
      SQLite shares one connection through StaticPool so every session sees
      the same database.
    - Module services never open sessions themselves: callers hand them one,
      usually from ``session_scope()`` or ``get_session()``.

Failure modes:
    - RuntimeError from every accessor until ``init_engine_from_url()`` ran.
"""

import atexit
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from profithub_kernel.db.base import Base
from profithub_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _engine_options(
    database_url: str,
    pool_size: int,
    max_overflow: int,
    pool_pre_ping: bool,
    pool_timeout: int,
    pool_recycle: int,
) -> dict[str, Any]:
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": pool_pre_ping,
        "pool_timeout": pool_timeout,
        "pool_recycle": pool_recycle,
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 10,
    max_overflow: int = 5,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the engine for ``database_url`` and bind a session factory to it.

    Calling again disposes the previous engine first.  The pool arguments
    only apply to server databases.
    """
    global _engine, _SessionFactory

    reset_engine()
    _engine = create_engine(
        database_url,
        echo=echo,
        **_engine_options(
            database_url, pool_size, max_overflow, pool_pre_ping, pool_timeout, pool_recycle
        ),
    )
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info("engine_initialized", extra={"dialect": _engine.dialect.name, "echo": echo})
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory


def get_session() -> Session:
    """A new session; the caller closes it."""
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Session committed on normal exit, rolled back on error, always closed."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """
    Create every table registered on ``Base.metadata``.

    Import the module ORMs first (``profithub_modules._orm_registry``) or
    nothing is registered.
    """
    Base.metadata.create_all(get_engine())
    logger.info("tables_created", extra={"table_count": len(Base.metadata.tables)})


def drop_tables() -> None:
    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None


atexit.register(reset_engine)
