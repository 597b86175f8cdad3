"""
Module: profithub_kernel.logging_config
Responsibility: Structured JSON logging for the analytics kernel, engines
    and module services.
Architecture position: Kernel.  Imports nothing from the rest of the
    project so every layer can log.

Every record becomes one JSON object per line::

    {"ts": "...", "level": "INFO", "logger": "profithub.modules.treasury.service",
     "message": "cash_position_recorded", "actor_id": "...", "module": "treasury",
     "scenario": "base", "account_count": 3}

Messages are snake_case event names; data goes in ``extra=``.  Context
fields (``LogContext``) are attached to every record written while they
are bound, so a service binds ``actor_id`` once and every engine log line
underneath carries it.
"""

__all__ = [
    "CONTEXT_FIELDS",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

LOGGER_NAMESPACE = "profithub"

CONTEXT_FIELDS: tuple[str, ...] = (
    "correlation_id",
    "actor_id",
    "module",
    "calculation_id",
    "trace_id",
)

_context_vars: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"{LOGGER_NAMESPACE}_{name}", default=None) for name in CONTEXT_FIELDS
}


def _context_var(name: str) -> ContextVar[str | None]:
    try:
        return _context_vars[name]
    except KeyError:
        raise TypeError(
            f"unknown log context field {name!r}; expected one of {list(CONTEXT_FIELDS)}"
        ) from None


class LogContext:
    """
    Request-scoped log fields backed by ``contextvars``.

    Values are stored as strings; ``None`` means "leave as is" for ``set``
    and ``bind``.  Safe across threads and asyncio tasks.
    """

    @staticmethod
    def set(**fields: Any) -> None:
        """Set context fields for the rest of the current context."""
        for name, value in fields.items():
            var = _context_var(name)
            if value is not None:
                var.set(str(value))

    @staticmethod
    def get_all() -> dict[str, str]:
        """Bound fields only, in ``CONTEXT_FIELDS`` order."""
        bound: dict[str, str] = {}
        for name in CONTEXT_FIELDS:
            value = _context_vars[name].get()
            if value is not None:
                bound[name] = value
        return bound

    @staticmethod
    def clear() -> None:
        for var in _context_vars.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: Any) -> Iterator[type["LogContext"]]:
        """
        Bind fields for the duration of a ``with`` block.

        Previous values (or their absence) come back on exit, including
        when the block raises.
        """
        tokens: list[tuple[ContextVar[str | None], Token[str | None]]] = []
        for name, value in fields.items():
            var = _context_var(name)
            if value is not None:
                tokens.append((var, var.set(str(value))))
        try:
            yield LogContext
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON formatting
# ---------------------------------------------------------------------------

_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _json_default(value: Any) -> Any:
    """Serialize the value types engines and services put in ``extra=``."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """
    ``exc_type``/``exc_message`` plus the error ``code`` and every public
    attribute the exception carries, each prefixed with ``exc_``.
    """
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for attr, value in vars(exc).items():
        if attr.startswith("_") or attr == "code":
            continue
        fields[f"exc_{attr}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: base fields, context, extras, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and key not in payload
        )

        exc = record.exc_info[1] if record.exc_info else None
        if exc is not None:
            payload.update(_exception_fields(exc))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Logger factory and setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger named ``profithub.<name>``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_setup_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``profithub`` logger.

    Only the first call has any effect until ``reset_logging``.  Records do
    not propagate to the root logger.
    """
    global _installed_handler
    with _setup_lock:
        if _installed_handler is not None:
            return
        _installed_handler = handler or logging.StreamHandler(stream or sys.stderr)
        _installed_handler.setFormatter(StructuredFormatter())

        namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
        namespace_logger.setLevel(level)
        namespace_logger.propagate = False
        namespace_logger.addHandler(_installed_handler)


def reset_logging() -> None:
    """
    Detach the handler installed by ``configure_logging``. For tests.

    Handlers attached by anything else (pytest log capture included) stay.
    """
    global _installed_handler
    with _setup_lock:
        namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
        if _installed_handler is not None:
            namespace_logger.removeHandler(_installed_handler)
            _installed_handler.close()
        _installed_handler = None
        namespace_logger.setLevel(logging.WARNING)
