"""
profithub_engines.tracer -- ``@traced_engine`` and input fingerprints.

Responsibility:
    Wrap pure engine calls so every successful call leaves one
    PROFITHUB_ENGINE_TRACE record naming the engine, its version, a
    fingerprint of the inputs that determine the result, and the duration.
    Two calls with equal fingerprints and versions must return equal
    results; the trace is how a recorded figure is tied to its inputs.

Architecture position:
    Engines -- support for the pure calculation layer.  Emits a log record
    under ``profithub.engines.tracer`` and nothing else.

Invariants enforced:
    - The fingerprint is the first 16 hex chars of SHA-256 over a canonical
      text form: mapping keys sorted, enums by value, dates in ISO form,
      dataclasses (Money, DatedRecord, CashFlowLine) field by field.
    - Positional and keyword spellings of the same call fingerprint alike.
    - A call that raises writes no trace; the exception propagates as is.

Usage:
    from profithub_engines.tracer import traced_engine

    @traced_engine("variance", "1.0", fingerprint_fields=("baseline", "actual"))
    def compare(self, baseline, actual):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from datetime import date
from enum import Enum
from typing import Any

_logger = logging.getLogger("profithub.engines.tracer")

TRACE_TYPE = "PROFITHUB_ENGINE_TRACE"
FINGERPRINT_LENGTH = 16


def _canonicalize(value: Any) -> str:
    """Stable text form of an engine input; unknown types use ``str()``."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        return type(value).__name__ + _canonicalize(fields)
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda item: str(item[0]))
        return "{" + ",".join(f"{key}:{_canonicalize(val)}" for key, val in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(item) for item in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: dict[str, Any],
) -> str:
    """Fingerprint of ``kwargs[field]`` for each listed field; absent fields count as None."""
    canonical = "|".join(
        f"{field}={_canonicalize(kwargs.get(field))}" for field in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorator emitting PROFITHUB_ENGINE_TRACE after each successful call.

    Args:
        engine_name: Engine identifier, e.g. ``"aging"``.
        engine_version: Bumped whenever the engine's results change.
        fingerprint_fields: Parameter names that determine the result.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                arguments = signature.bind_partial(*args, **kwargs).arguments
                fingerprint = compute_input_fingerprint(fingerprint_fields, dict(arguments))

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

            _logger.info(TRACE_TYPE, extra={
                "trace_type": TRACE_TYPE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": elapsed_ms,
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
