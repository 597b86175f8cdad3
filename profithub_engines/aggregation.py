"""
profithub_engines.aggregation -- Group-by-and-sum over DatedRecords.

Responsibility:
    The one reduction every report shares: group flat records by a list of
    dimensions and sum their amounts per group.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by the variance engine and by module services.

Invariants enforced:
    - Records are never dropped: a missing, ``None`` or blank dimension
      value groups under ``"unassigned"``.
    - Sums stay inside one currency per group.
    - Output order is unspecified; callers sort when they need order.

Failure modes:
    - MixedCurrencyError when a single group mixes currencies.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from profithub_kernel.domain.records import DatedRecord
from profithub_kernel.domain.values import Money
from profithub_kernel.exceptions import MixedCurrencyError
from profithub_kernel.logging_config import get_logger
from profithub_engines.tracer import traced_engine

logger = get_logger("engines.aggregation")

GroupKey = tuple[str, ...]


def as_dimensions(group_by: Sequence[str] | str) -> tuple[str, ...]:
    """``group_by`` as a tuple; a bare string names one dimension."""
    if isinstance(group_by, str):
        return (group_by,)
    return tuple(group_by)


def group_key(record: DatedRecord, group_by: Sequence[str] | str) -> GroupKey:
    """The record's values for ``group_by``, in order."""
    return tuple(record.dimension(name) for name in as_dimensions(group_by))


class Aggregator:
    """Sum record amounts per group key."""

    @traced_engine("aggregation", "1.0", fingerprint_fields=("records", "group_by"))
    def aggregate(
        self,
        records: Iterable[DatedRecord],
        group_by: Sequence[str] | str,
    ) -> Mapping[GroupKey, Money]:
        """
        Group ``records`` by ``group_by`` and sum amounts.

        ``category`` reads the record category; any other name reads
        ``dimension_keys``.  An empty ``group_by`` produces a single group
        keyed by ``()``.  A bare string is one dimension.

        Raises:
            MixedCurrencyError: a group contains more than one currency.
        """
        dims = as_dimensions(group_by)
        totals: dict[GroupKey, Money] = {}
        count = 0

        for record in records:
            count += 1
            key = group_key(record, dims)
            current = totals.get(key)
            if current is None:
                totals[key] = record.amount
                continue
            if current.currency != record.amount.currency:
                logger.error("aggregation_currency_mismatch", extra={
                    "group_key": list(key),
                    "expected_currency": current.currency.code,
                    "actual_currency": record.amount.currency.code,
                })
                raise MixedCurrencyError(
                    current.currency.code,
                    record.amount.currency.code,
                    f"group {key}",
                )
            totals[key] = current + record.amount

        logger.debug("records_aggregated", extra={
            "group_by": list(dims),
            "record_count": count,
            "group_count": len(totals),
        })
        return totals

    def count(
        self,
        records: Iterable[DatedRecord],
        group_by: Sequence[str] | str,
    ) -> Mapping[GroupKey, int]:
        """Number of records per group key (same keys as ``aggregate``)."""
        dims = as_dimensions(group_by)
        counts: dict[GroupKey, int] = {}
        for record in records:
            key = group_key(record, dims)
            counts[key] = counts.get(key, 0) + 1
        return counts
