"""
secretsweep core — analysis, filtering, selection and the session state machine.

Nothing in here touches the terminal or the network directly: the session
hands out Jobs and the presentation layer runs them.
"""

from __future__ import annotations

from secretsweep.core.analyzer import RECENCY_THRESHOLD, AnalysisResult, analyze, rank, scan
from secretsweep.core.deletion import DeleteOutcome, DeleteReport, delete_all
from secretsweep.core.filtering import FilterMode, FilterSession, apply_filter, is_match
from secretsweep.core.resultset import ResultSet
from secretsweep.core.session import (
    InvalidTransition,
    Job,
    JobKind,
    Session,
    SessionState,
    SessionView,
)

__all__ = [
    "RECENCY_THRESHOLD",
    "AnalysisResult",
    "DeleteOutcome",
    "DeleteReport",
    "FilterMode",
    "FilterSession",
    "InvalidTransition",
    "Job",
    "JobKind",
    "ResultSet",
    "Session",
    "SessionState",
    "SessionView",
    "analyze",
    "apply_filter",
    "delete_all",
    "is_match",
    "rank",
    "scan",
]
