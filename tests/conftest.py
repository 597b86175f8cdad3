"""
Pytest fixtures for the SynchroProfitHub test suite.

Provides:
- Structured logging configured once per session, plus a ``captured_logs``
  fixture that returns parsed JSON records
- A fresh in-memory SQLite database per test with every module table
- The default analytics configuration, a deterministic clock and an actor id
"""

import json
import logging
from datetime import date
from io import StringIO
from typing import Generator
from uuid import UUID

import pytest
from sqlalchemy.orm import Session

from profithub_config import AnalyticsConfig, get_active_config
from profithub_kernel.db.engine import get_session, init_engine_from_url, reset_engine
from profithub_kernel.domain.clock import DeterministicClock
from profithub_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from profithub_modules._orm_registry import create_all_tables

TEST_ACTOR_ID = UUID("00000000-0000-4000-a000-000000000001")
TEST_TODAY = date(2024, 6, 15)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session", autouse=True)
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture profithub logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculator.compare(baseline, actual)
            logs = captured_logs()
            assert any(r["message"] == "variance_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("profithub")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """A session on a fresh in-memory database holding every module table."""
    init_engine_from_url("sqlite://")
    create_all_tables()
    db_session = get_session()
    try:
        yield db_session
    finally:
        db_session.close()
        reset_engine()


# ---------------------------------------------------------------------------
# Configuration, time and identity
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def analytics_config() -> AnalyticsConfig:
    """The default configuration set shipped with the package."""
    return get_active_config()


@pytest.fixture
def clock() -> DeterministicClock:
    """Clock fixed at noon UTC on TEST_TODAY."""
    return DeterministicClock.on(TEST_TODAY)


@pytest.fixture
def actor_id() -> UUID:
    return TEST_ACTOR_ID
