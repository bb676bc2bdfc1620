"""
Analyzer — annotates secret metadata with access recency and staleness.

A secret is stale when the time since its last access (or since creation,
for secrets never read) exceeds the recency threshold.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from secretsweep.source.base import SecretSource
from secretsweep.source.models import SecretRecord

logger = logging.getLogger(__name__)

RECENCY_THRESHOLD = timedelta(days=14)
NEVER = "Never"
DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class AnalysisResult:
    """Staleness-annotated view of one secret."""

    name: str
    created_at: datetime
    last_accessed_at: datetime | None
    age: timedelta
    stale: bool
    description: str = ""

    @property
    def last_accessed_label(self) -> str:
        if self.last_accessed_at is None:
            return NEVER
        return self.last_accessed_at.strftime(DATE_FORMAT)

    @property
    def created_label(self) -> str:
        return self.created_at.strftime(DATE_FORMAT)


def staleness_age(record: SecretRecord, now: datetime) -> timedelta:
    """Time since last access, falling back to time since creation."""
    reference = record.last_accessed_at or record.created_at
    return now - reference


def analyze(
    records: Iterable[SecretRecord],
    apply_recency_filter: bool,
    *,
    threshold: timedelta = RECENCY_THRESHOLD,
    now: datetime | None = None,
) -> list[AnalysisResult]:
    """Annotate records, keeping only stale ones when ``apply_recency_filter``.

    Upstream order is preserved. Errors raised while iterating ``records``
    propagate unchanged.
    """
    now = now or datetime.now(UTC)
    results: list[AnalysisResult] = []
    for record in records:
        age = staleness_age(record, now)
        stale = age > threshold
        if apply_recency_filter and not stale:
            continue
        results.append(
            AnalysisResult(
                name=record.name,
                created_at=record.created_at,
                last_accessed_at=record.last_accessed_at,
                age=age,
                stale=stale,
                description=record.description,
            )
        )
    return results


def rank(results: Iterable[AnalysisResult]) -> list[AnalysisResult]:
    """Order by last access, oldest first; never-accessed secrets go last by creation date."""

    def _key(result: AnalysisResult) -> tuple[int, datetime]:
        if result.last_accessed_at is None:
            return (1, result.created_at)
        return (0, result.last_accessed_at)

    return sorted(results, key=_key)


def scan(
    source: SecretSource,
    apply_recency_filter: bool,
    *,
    threshold: timedelta = RECENCY_THRESHOLD,
    sort_oldest_first: bool = False,
    now: datetime | None = None,
) -> list[AnalysisResult]:
    """List every secret from ``source`` and analyze the lot."""
    results = analyze(
        source.list_secrets(),
        apply_recency_filter,
        threshold=threshold,
        now=now,
    )
    logger.info(
        "Scan found %d secret(s) (recency filter %s)",
        len(results),
        "on" if apply_recency_filter else "off",
    )
    if sort_oldest_first:
        return rank(results)
    return results
