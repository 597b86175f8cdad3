"""
Module: profithub_engines.aging
Responsibility:
    Classify open receivables into the five standard aging buckets and
    build the per-client aging matrix used by collections.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import profithub_kernel.

Invariants enforced:
    - Purity: no clock access; ``as_of`` is always a parameter.
    - Bucket upper bounds are inclusive: 30 days late is ``1-30``, 90 is
      ``61-90``, 91 is ``90+``.  Not yet due (<= 0 days) is ``current``.
    - Total overdue excludes the ``current`` bucket.
    - A report never mixes currencies.

Failure modes:
    - InvalidInputError when a due date or as_of date is not a date.
    - MixedCurrencyError when receivables in different currencies are
      combined into one report.

Usage:
    from profithub_engines.aging import AgingCalculator, TimeBucketClassifier

    bucket = TimeBucketClassifier().classify(date(2024, 1, 1), date(2024, 1, 31))
    # AgingBucket.DAYS_1_30

    report = AgingCalculator().build_report(receivables, as_of=date(2024, 3, 31))
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from profithub_kernel.domain.records import DatedRecord, as_calendar_date
from profithub_kernel.domain.values import Currency, Money, percent_of
from profithub_kernel.exceptions import MixedCurrencyError
from profithub_kernel.logging_config import get_logger
from profithub_engines.tracer import traced_engine

logger = get_logger("engines.aging")

CLIENT_DIMENSION = "client_id"


class AgingBucket(str, Enum):
    """Standard receivable aging buckets, in ascending order of lateness."""

    CURRENT = "current"
    DAYS_1_30 = "1-30"
    DAYS_31_60 = "31-60"
    DAYS_61_90 = "61-90"
    OVER_90 = "90+"

    @property
    def is_overdue(self) -> bool:
        return self is not AgingBucket.CURRENT


class RiskLevel(str, Enum):
    """Collections risk for a client."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TimeBucketClassifier:
    """Map a due date to an aging bucket relative to ``as_of``."""

    def days_late(self, due_date: date, as_of: date) -> int:
        """Calendar days between ``due_date`` and ``as_of`` (negative if not due)."""
        due = as_calendar_date(due_date, "due_date")
        ref = as_calendar_date(as_of, "as_of")
        return (ref - due).days

    def classify(self, due_date: date, as_of: date) -> AgingBucket:
        """
        Classify a receivable by days late.

        Raises:
            InvalidInputError: either argument is not a date.
        """
        return self.bucket_for_days(self.days_late(due_date, as_of))

    @staticmethod
    def bucket_for_days(days_late: int) -> AgingBucket:
        if days_late <= 0:
            return AgingBucket.CURRENT
        if days_late <= 30:
            return AgingBucket.DAYS_1_30
        if days_late <= 60:
            return AgingBucket.DAYS_31_60
        if days_late <= 90:
            return AgingBucket.DAYS_61_90
        return AgingBucket.OVER_90


@dataclass(frozen=True)
class ClientAging:
    """One row of the aging matrix: a client's open amounts per bucket."""

    client_id: str
    buckets: Mapping[AgingBucket, Money]
    total_overdue: Money
    risk_level: RiskLevel

    def amount_in(self, bucket: AgingBucket) -> Money:
        return self.buckets[bucket]


@dataclass(frozen=True)
class BucketSummary:
    """Totals for one bucket across all clients."""

    bucket: AgingBucket
    total: Money
    item_count: int
    share_of_overdue: Decimal


@dataclass(frozen=True)
class AgingReport:
    """
    Aging snapshot as of one date.

    Contract:
        Frozen; ``clients`` is sorted by client id and ``summaries`` follows
        bucket order.
    Guarantees:
        - ``total_overdue`` equals the sum of the non-current summaries.
        - Bucket shares are 0 when nothing is overdue.
    """

    as_of: date
    currency: Currency
    clients: tuple[ClientAging, ...]
    summaries: tuple[BucketSummary, ...]
    total_overdue: Money
    total_outstanding: Money

    @property
    def item_count(self) -> int:
        return sum(s.item_count for s in self.summaries)

    def summary_for(self, bucket: AgingBucket) -> BucketSummary:
        for summary in self.summaries:
            if summary.bucket is bucket:
                return summary
        raise KeyError(bucket)

    def client(self, client_id: str) -> ClientAging:
        for row in self.clients:
            if row.client_id == client_id:
                return row
        raise KeyError(client_id)

    def clients_at_risk(self, level: RiskLevel = RiskLevel.HIGH) -> tuple[ClientAging, ...]:
        return tuple(c for c in self.clients if c.risk_level is level)


class AgingCalculator:
    """
    Build aging reports from receivable records.

    Contract:
        Pure functions -- no I/O, no database access.
        Each input ``DatedRecord`` carries the due date as ``date``, the open
        amount as ``amount`` and the client in the ``client_id`` dimension.
    Guarantees:
        - Every record lands in exactly one bucket; records without a client
          are grouped under ``unassigned``.
    Non-goals:
        - Does not persist reports; callers are responsible for storage.
    """

    def __init__(
        self,
        high_risk_threshold: Decimal = Decimal("10000"),
        medium_risk_threshold: Decimal = Decimal("5000"),
        default_currency: str = "BRL",
        classifier: TimeBucketClassifier | None = None,
    ):
        self.high_risk_threshold = Decimal(high_risk_threshold)
        self.medium_risk_threshold = Decimal(medium_risk_threshold)
        self.default_currency = Currency(default_currency)
        self.classifier = classifier or TimeBucketClassifier()

    def risk_level(self, over_90: Money, days_61_90: Money) -> RiskLevel:
        """High when 90+ exceeds the high threshold, medium when 61-90 exceeds the medium one."""
        if over_90.amount > self.high_risk_threshold:
            return RiskLevel.HIGH
        if days_61_90.amount > self.medium_risk_threshold:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    @traced_engine("aging", "1.0", fingerprint_fields=("items", "as_of"))
    def build_report(
        self,
        items: Sequence[DatedRecord],
        as_of: date,
    ) -> AgingReport:
        """
        Generate the aging matrix.

        Raises:
            MixedCurrencyError: items are not all in one currency.
            InvalidInputError: as_of is not a date.
        """
        ref = as_calendar_date(as_of, "as_of")
        currency = items[0].amount.currency if items else self.default_currency

        zero = Money.zero(currency)
        bucket_totals = {b: zero for b in AgingBucket}
        bucket_counts = {b: 0 for b in AgingBucket}
        per_client: dict[str, dict[AgingBucket, Money]] = {}

        for item in items:
            if item.amount.currency != currency:
                logger.error("aging_currency_mismatch", extra={
                    "expected_currency": currency.code,
                    "actual_currency": item.amount.currency.code,
                })
                raise MixedCurrencyError(currency.code, item.amount.currency.code, "aging report")

            bucket = self.classifier.classify(item.date, ref)
            client_id = item.dimension(CLIENT_DIMENSION)
            row = per_client.setdefault(client_id, {b: zero for b in AgingBucket})
            row[bucket] = row[bucket] + item.amount
            bucket_totals[bucket] = bucket_totals[bucket] + item.amount
            bucket_counts[bucket] += 1

        total_overdue = zero
        for bucket in AgingBucket:
            if bucket.is_overdue:
                total_overdue = total_overdue + bucket_totals[bucket]
        total_outstanding = total_overdue + bucket_totals[AgingBucket.CURRENT]

        summaries = tuple(
            BucketSummary(
                bucket=bucket,
                total=bucket_totals[bucket],
                item_count=bucket_counts[bucket],
                share_of_overdue=(
                    percent_of(bucket_totals[bucket].amount, total_overdue.amount)
                    if bucket.is_overdue
                    else Decimal("0")
                ),
            )
            for bucket in AgingBucket
        )

        clients = []
        for client_id in sorted(per_client):
            row = per_client[client_id]
            client_overdue = zero
            for bucket in AgingBucket:
                if bucket.is_overdue:
                    client_overdue = client_overdue + row[bucket]
            clients.append(ClientAging(
                client_id=client_id,
                buckets=MappingProxyType(dict(row)),
                total_overdue=client_overdue,
                risk_level=self.risk_level(row[AgingBucket.OVER_90], row[AgingBucket.DAYS_61_90]),
            ))

        logger.info("aging_report_generated", extra={
            "as_of": ref.isoformat(),
            "item_count": len(items),
            "client_count": len(clients),
            "total_overdue": str(total_overdue.amount),
            "currency": currency.code,
        })

        return AgingReport(
            as_of=ref,
            currency=currency,
            clients=tuple(clients),
            summaries=summaries,
            total_overdue=total_overdue,
            total_outstanding=total_outstanding,
        )
