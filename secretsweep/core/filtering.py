"""
Filter engine — fuzzy include/exclude filtering over a result set.

A filter session snapshots the result set it was opened on. Every preview is
recomputed from that snapshot, so keystrokes never narrow an already
narrowed view, and cancelling hands the snapshot back untouched.
"""

from __future__ import annotations

from enum import StrEnum

from secretsweep.core.analyzer import AnalysisResult
from secretsweep.core.resultset import ResultSet


class FilterMode(StrEnum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


def is_match(query: str, target: str) -> bool:
    """True when the query characters appear in order (not necessarily adjacent) in target."""
    remaining = iter(target.lower())
    return all(ch in remaining for ch in query.lower())


def apply_filter(
    baseline: ResultSet | list[AnalysisResult],
    query: str,
    mode: FilterMode,
) -> list[AnalysisResult]:
    """Results from ``baseline`` kept by ``query`` under ``mode``.

    An empty query keeps everything regardless of mode.
    """
    results = baseline.results if isinstance(baseline, ResultSet) else baseline
    if not query:
        return list(results)
    keep = mode is FilterMode.INCLUDE
    return [r for r in results if is_match(query, r.name) is keep]


class FilterSession:
    """One live filter interaction, from opening to commit or cancel."""

    def __init__(self, mode: FilterMode, snapshot: ResultSet) -> None:
        self.mode = mode
        self.snapshot = snapshot
        self.query = ""
        self.view = self.snapshot.copy()

    def preview(self, query: str) -> ResultSet:
        self.query = query
        if not query:
            self.view = self.snapshot.copy()
        else:
            self.view = ResultSet.fresh(apply_filter(self.snapshot, query, self.mode))
        return self.view

    def cancel(self) -> ResultSet:
        """The set the session was opened on, selections included."""
        return self.snapshot

    def commit(self) -> ResultSet:
        return ResultSet.fresh(apply_filter(self.snapshot, self.query, self.mode))
