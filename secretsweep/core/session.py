"""
Session — the interactive state machine behind the secretsweep UI.

Owns every piece of mutable UI state: which screen is active, the result
set generations (base, current, pre-filter snapshot), the selection mask,
the detail view's versions, and transient error/status text.

Commands either mutate state synchronously or return a Job: a detached unit
of work that the presentation layer runs off the event loop and reports back
through ``complete()``. State is only ever touched from the caller's thread;
jobs return values and never mutate the session themselves.

Each dispatched job carries a monotonically increasing generation. The
session remembers the live generation per (kind, key) slot and discards any
completion that no longer matches, e.g. versions arriving after the user
already left the detail view.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from functools import partial
from typing import TYPE_CHECKING, Any

from secretsweep.core.analyzer import DATE_FORMAT, NEVER, RECENCY_THRESHOLD, AnalysisResult, scan
from secretsweep.core.deletion import DeleteReport, delete_all
from secretsweep.core.filtering import FilterMode, FilterSession
from secretsweep.core.resultset import ResultSet
from secretsweep.source.base import SecretSource
from secretsweep.source.models import VersionRecord

if TYPE_CHECKING:
    from secretsweep.config import Config

logger = logging.getLogger(__name__)

MASK = "•" * 8


class SessionState(StrEnum):
    BANNER = "banner"
    SCANNING = "scanning"
    RESULTS = "results"
    FILTER_INCLUDE = "filter_include"
    FILTER_EXCLUDE = "filter_exclude"
    VIEW_SECRET = "view_secret"
    CONFIRM_DELETE = "confirm_delete"
    ERROR = "error"


TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.BANNER: frozenset({SessionState.SCANNING, SessionState.ERROR}),
    SessionState.SCANNING: frozenset({SessionState.RESULTS}),
    SessionState.RESULTS: frozenset(
        {
            SessionState.BANNER,
            SessionState.FILTER_INCLUDE,
            SessionState.FILTER_EXCLUDE,
            SessionState.VIEW_SECRET,
            SessionState.CONFIRM_DELETE,
        }
    ),
    SessionState.FILTER_INCLUDE: frozenset({SessionState.RESULTS}),
    SessionState.FILTER_EXCLUDE: frozenset({SessionState.RESULTS}),
    SessionState.VIEW_SECRET: frozenset({SessionState.RESULTS}),
    SessionState.CONFIRM_DELETE: frozenset({SessionState.RESULTS}),
    SessionState.ERROR: frozenset(),
}

FILTER_STATES = {
    FilterMode.INCLUDE: SessionState.FILTER_INCLUDE,
    FilterMode.EXCLUDE: SessionState.FILTER_EXCLUDE,
}


class InvalidTransition(RuntimeError):
    """A state change not allowed by TRANSITIONS was attempted."""


class JobKind(StrEnum):
    PACE = "pace"
    SCAN = "scan"
    LIST_VERSIONS = "list_versions"
    REVEAL = "reveal"
    DELETE = "delete"
    CLEAR_STATUS = "clear_status"


@dataclass(frozen=True)
class Job:
    """One dispatched unit of work.

    Jobs with ``work`` run in the background and complete with its return
    value or exception. Jobs without it complete after ``delay`` seconds.
    """

    kind: JobKind
    generation: int
    key: str = ""
    work: Callable[[], Any] | None = field(default=None, compare=False, repr=False)
    delay: float = 0.0


@dataclass(frozen=True)
class ResultRow:
    name: str
    description: str
    selected: bool
    last_accessed: str
    created: str
    stale: bool


@dataclass(frozen=True)
class VersionRow:
    version_id: str
    created: str
    last_accessed: str
    stages: tuple[str, ...]
    value: str
    revealed: bool
    pending: bool


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot of the session for rendering."""

    state: SessionState
    rows: tuple[ResultRow, ...]
    cursor: int
    selected: tuple[str, ...]
    filter_active: bool
    filter_query: str
    apply_recency_filter: bool
    secret_name: str | None = None
    versions: tuple[VersionRow, ...] | None = None
    version_cursor: int = 0
    deleting: bool = False
    error: str | None = None
    status: str | None = None


def _row(result: AnalysisResult, selected: bool) -> ResultRow:
    return ResultRow(
        name=result.name,
        description=result.description,
        selected=selected,
        last_accessed=result.last_accessed_label,
        created=result.created_label,
        stale=result.stale,
    )


def _date(value: datetime | None, default: str = NEVER) -> str:
    return value.strftime(DATE_FORMAT) if value else default


class Session:
    """Single-writer owner of all interactive state."""

    def __init__(
        self,
        source: SecretSource | None,
        *,
        init_error: str | None = None,
        threshold: timedelta = RECENCY_THRESHOLD,
        sort_oldest_first: bool = False,
        apply_recency_filter: bool = True,
        banner_delay: float = 1.0,
        status_clear_delay: float = 2.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.source = source
        self.init_error = init_error
        self.threshold = threshold
        self.sort_oldest_first = sort_oldest_first
        self.apply_recency_filter = apply_recency_filter
        self.banner_delay = banner_delay
        self.status_clear_delay = status_clear_delay
        self._clock = clock

        self.state = SessionState.BANNER
        self.base = ResultSet()
        self.current = self.base
        self.filter: FilterSession | None = None
        self.filter_active = False
        self.cursor = 0
        self._saved_cursor = 0

        self.detail_name: str | None = None
        self.versions: list[VersionRecord] | None = None
        self.version_cursor = 0

        self.deleting = False
        self.error: str | None = None
        self.status: str | None = None

        self._generation = 0
        self._inflight: dict[tuple[JobKind, str], int] = {}

    @classmethod
    def from_config(
        cls,
        config: Config,
        source: SecretSource | None,
        *,
        init_error: str | None = None,
    ) -> Session:
        return cls(
            source,
            init_error=init_error,
            threshold=config.recency_threshold,
            sort_oldest_first=config.sort_oldest_first,
            banner_delay=config.banner_delay,
            status_clear_delay=config.status_clear_delay,
        )

    # ─── Plumbing ──────────────────────────────────────────────────────

    def _transition(self, target: SessionState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidTransition(f"{self.state} -> {target}")
        logger.debug("State %s -> %s", self.state, target)
        self.state = target

    def _dispatch(
        self,
        kind: JobKind,
        work: Callable[[], Any] | None = None,
        *,
        key: str = "",
        delay: float = 0.0,
    ) -> Job:
        self._generation += 1
        self._inflight[(kind, key)] = self._generation
        return Job(kind=kind, generation=self._generation, key=key, work=work, delay=delay)

    def _invalidate(self, *kinds: JobKind) -> None:
        for slot in [s for s in self._inflight if s[0] in kinds]:
            del self._inflight[slot]

    def is_pending(self, kind: JobKind, key: str = "") -> bool:
        return (kind, key) in self._inflight

    def _flash(self, message: str) -> Job:
        """Show a status message that clears itself after a delay."""
        self.status = message
        return self._dispatch(JobKind.CLEAR_STATUS, delay=self.status_clear_delay)

    def _clamp(self, index: int, size: int) -> int:
        return max(0, min(index, size - 1)) if size else 0

    def _merge_selection(self) -> ResultSet:
        """Base with the current view's selections carried over by name.

        While a filter is committed the base mask is kept all-false, so the
        filtered view is the only place selections live.
        """
        selected = set(self.current.selected_names)
        return ResultSet(
            list(self.base.results),
            [r.name in selected for r in self.base.results],
        )

    @property
    def focused(self) -> AnalysisResult | None:
        if self.state is SessionState.RESULTS and self.current.results:
            return self.current.results[self.cursor]
        return None

    # ─── Lifecycle and scanning ────────────────────────────────────────

    def start(self) -> Job | None:
        """Leave the banner: fail over to ``error`` or schedule the first scan."""
        if self.state is not SessionState.BANNER:
            return None
        if self.source is None:
            self.error = self.init_error or "Secret source unavailable"
            self._transition(SessionState.ERROR)
            return None
        return self._dispatch(JobKind.PACE, delay=self.banner_delay)

    def rescan(self, apply_recency_filter: bool) -> Job | None:
        """Return to the banner and scan again, stale-only or everything."""
        if self.state is not SessionState.RESULTS:
            return None
        self.apply_recency_filter = apply_recency_filter
        self._transition(SessionState.BANNER)
        self.base = ResultSet()
        self.current = self.base
        self.filter_active = False
        self.cursor = 0
        self.error = None
        return self._dispatch(JobKind.PACE, delay=self.banner_delay)

    def _on_paced(self, job: Job, result: Any, error: Exception | None) -> Job | None:
        if self.state is not SessionState.BANNER or self.source is None:
            return None
        self._transition(SessionState.SCANNING)
        now = self._clock() if self._clock else None
        work = partial(
            scan,
            self.source,
            self.apply_recency_filter,
            threshold=self.threshold,
            sort_oldest_first=self.sort_oldest_first,
            now=now,
        )
        return self._dispatch(JobKind.SCAN, work)

    def _on_scanned(self, job: Job, result: Any, error: Exception | None) -> Job | None:
        self._transition(SessionState.RESULTS)
        if error is not None:
            logger.error("Scan failed: %s", error)
            self.error = f"Scan failed: {error}"
            results: list[AnalysisResult] = []
        else:
            self.error = None
            results = list(result)
        self.base = ResultSet.fresh(results)
        self.current = self.base
        self.filter = None
        self.filter_active = False
        self.cursor = 0
        return None

    # ─── Browsing ──────────────────────────────────────────────────────

    def move_cursor(self, delta: int) -> None:
        if self.state is SessionState.RESULTS:
            self.cursor = self._clamp(self.cursor + delta, len(self.current))
        elif self.state is SessionState.VIEW_SECRET and self.versions:
            self.version_cursor = self._clamp(self.version_cursor + delta, len(self.versions))

    def toggle_selection(self) -> None:
        if self.state is SessionState.RESULTS and self.current.results:
            self.current.toggle(self.cursor)

    # ─── Filtering ─────────────────────────────────────────────────────

    def open_filter(self, mode: FilterMode) -> None:
        if self.state is not SessionState.RESULTS:
            return
        self._saved_cursor = self.cursor
        self.filter = FilterSession(mode, self.current)
        self._transition(FILTER_STATES[mode])
        self.current = self.filter.view

    def update_filter(self, query: str) -> None:
        if self.filter is None:
            return
        self.current = self.filter.preview(query)
        self.cursor = self._clamp(self.cursor, len(self.current))

    def cancel_filter(self) -> None:
        """Drop the preview and restore the exact pre-filter set and mask."""
        if self.filter is None:
            return
        self.current = self.filter.cancel()
        self.filter = None
        self.cursor = self._clamp(self._saved_cursor, len(self.current))
        self._transition(SessionState.RESULTS)

    def commit_filter(self) -> None:
        if self.filter is None:
            return
        if not self.filter.query:
            self.cancel_filter()
            return
        self.current = self.filter.commit()
        self.base = ResultSet.fresh(self.base.results)
        self.filter = None
        self.filter_active = True
        self.cursor = 0
        self._transition(SessionState.RESULTS)

    def clear_filter(self) -> None:
        """Bring back the full scan output. No-op without an active filter."""
        if self.state is not SessionState.RESULTS or not self.filter_active:
            return
        self.base = self._merge_selection()
        self.current = self.base
        self.filter_active = False
        self.cursor = self._clamp(self.cursor, len(self.current))

    # ─── Secret detail ─────────────────────────────────────────────────

    def open_secret(self) -> Job | None:
        focused = self.focused
        if focused is None or self.source is None:
            return None
        self._saved_cursor = self.cursor
        self.detail_name = focused.name
        self.versions = None
        self.version_cursor = 0
        self.error = None
        self._transition(SessionState.VIEW_SECRET)
        return self._dispatch(
            JobKind.LIST_VERSIONS,
            partial(self.source.list_versions, focused.name),
            key=focused.name,
        )

    def close_secret(self) -> None:
        if self.state is not SessionState.VIEW_SECRET:
            return
        self._invalidate(JobKind.LIST_VERSIONS, JobKind.REVEAL)
        self.detail_name = None
        self.versions = None
        self.version_cursor = 0
        self.error = None
        self._transition(SessionState.RESULTS)
        self.cursor = self._clamp(self._saved_cursor, len(self.current))

    def _on_versions(self, job: Job, result: Any, error: Exception | None) -> Job | None:
        if error is not None:
            self.error = f"Could not list versions of {job.key}: {error}"
            self.versions = []
        else:
            self.versions = list(result)
        return None

    def reveal(self) -> Job | None:
        """Fetch the value of the version under the cursor, once."""
        if self.state is not SessionState.VIEW_SECRET or not self.versions:
            return None
        if self.source is None or self.detail_name is None:
            return None
        version = self.versions[self.version_cursor]
        if version.revealed or self.is_pending(JobKind.REVEAL, version.version_id):
            return None
        return self._dispatch(
            JobKind.REVEAL,
            partial(self.source.get_value, self.detail_name, version.version_id),
            key=version.version_id,
        )

    def _on_revealed(self, job: Job, result: Any, error: Exception | None) -> Job | None:
        if error is not None:
            self.error = f"Could not read version {job.key} of {self.detail_name}: {error}"
            return None
        if self.versions is None:
            return None
        self.error = None
        self.versions = [
            v.with_value(result) if v.version_id == job.key else v for v in self.versions
        ]
        return None

    def copy_name(self, copier: Callable[[str], None]) -> Job | None:
        """Copy the focused secret's name. Clipboard failures are ignored."""
        if self.state is SessionState.VIEW_SECRET:
            name = self.detail_name
        else:
            focused = self.focused
            name = focused.name if focused else None
        if not name:
            return None
        try:
            copier(name)
        except Exception:
            logger.debug("Clipboard copy of %s failed", name, exc_info=True)
            return None
        return self._flash(f"Copied {name} to clipboard")

    def _on_status_cleared(self, job: Job, result: Any, error: Exception | None) -> Job | None:
        self.status = None
        return None

    # ─── Deleting ──────────────────────────────────────────────────────

    def request_delete(self) -> None:
        if self.state is SessionState.RESULTS and self.current.selected_names:
            self.error = None
            self._transition(SessionState.CONFIRM_DELETE)

    def confirm_delete(self) -> Job | None:
        if self.state is not SessionState.CONFIRM_DELETE or self.deleting:
            return None
        if self.source is None:
            return None
        self.deleting = True
        names = self.current.selected_names
        logger.info("Deleting %d secret(s)", len(names))
        return self._dispatch(JobKind.DELETE, partial(delete_all, self.source, names))

    def cancel_delete(self) -> None:
        if self.state is SessionState.CONFIRM_DELETE and not self.deleting:
            self._transition(SessionState.RESULTS)

    def _on_deleted(self, job: Job, result: Any, error: Exception | None) -> Job | None:
        self.deleting = False
        self._transition(SessionState.RESULTS)
        if error is not None:
            self.error = f"Delete failed: {error}"
            return None
        report: DeleteReport = result
        deleted = report.deleted
        self.base = self.base.without(deleted)
        if self.filter_active:
            self.current = self.current.without(deleted)
        else:
            self.current = self.base
        self.cursor = self._clamp(self.cursor, len(self.current))
        self.error = report.error_message()
        if deleted:
            return self._flash(f"Deleted {len(deleted)} secret(s).")
        return None

    # ─── Routing ───────────────────────────────────────────────────────

    def back(self) -> None:
        """Escape: leave the current sub-state, or clear an active filter."""
        if self.state in (SessionState.FILTER_INCLUDE, SessionState.FILTER_EXCLUDE):
            self.cancel_filter()
        elif self.state is SessionState.VIEW_SECRET:
            self.close_secret()
        elif self.state is SessionState.CONFIRM_DELETE:
            self.cancel_delete()
        elif self.state is SessionState.RESULTS:
            self.clear_filter()

    def complete(self, job: Job, result: Any = None, error: Exception | None = None) -> Job | None:
        """Apply a finished job. Stale generations are dropped."""
        slot = (job.kind, job.key)
        if self._inflight.get(slot) != job.generation:
            logger.debug("Discarding stale %s completion (generation %d)", job.kind, job.generation)
            return None
        del self._inflight[slot]
        handlers = {
            JobKind.PACE: self._on_paced,
            JobKind.SCAN: self._on_scanned,
            JobKind.LIST_VERSIONS: self._on_versions,
            JobKind.REVEAL: self._on_revealed,
            JobKind.DELETE: self._on_deleted,
            JobKind.CLEAR_STATUS: self._on_status_cleared,
        }
        return handlers[job.kind](job, result, error)

    def allows(self, command: str) -> bool:
        """Whether ``command`` does anything in the current state."""
        state = self.state
        has_rows = bool(self.current.results)
        if command == "quit":
            return True
        if command == "cursor":
            return (state is SessionState.RESULTS and has_rows) or (
                state is SessionState.VIEW_SECRET and bool(self.versions)
            )
        if command in ("toggle", "open"):
            return state is SessionState.RESULTS and has_rows
        if command in ("filter", "rescan"):
            return state is SessionState.RESULTS
        if command == "delete":
            return state is SessionState.RESULTS and bool(self.current.selected_names)
        if command == "copy":
            return (state is SessionState.RESULTS and has_rows) or state is SessionState.VIEW_SECRET
        if command == "reveal":
            return state is SessionState.VIEW_SECRET and bool(self.versions)
        if command == "confirm":
            return state is SessionState.CONFIRM_DELETE and not self.deleting
        if command == "back":
            if state is SessionState.RESULTS:
                return self.filter_active
            return state in (
                SessionState.FILTER_INCLUDE,
                SessionState.FILTER_EXCLUDE,
                SessionState.VIEW_SECRET,
            ) or (state is SessionState.CONFIRM_DELETE and not self.deleting)
        return False

    # ─── Snapshot ──────────────────────────────────────────────────────

    def view(self) -> SessionView:
        versions = None
        if self.versions is not None:
            versions = tuple(
                VersionRow(
                    version_id=v.version_id,
                    created=_date(v.created_at, default=""),
                    last_accessed=_date(v.last_accessed_at),
                    stages=tuple(sorted(v.stages)),
                    value=v.value if v.value is not None else MASK,
                    revealed=v.revealed,
                    pending=self.is_pending(JobKind.REVEAL, v.version_id),
                )
                for v in self.versions
            )
        return SessionView(
            state=self.state,
            rows=tuple(_row(r, sel) for r, sel in zip(self.current.results, self.current.selected)),
            cursor=self.cursor,
            selected=tuple(self.current.selected_names),
            filter_active=self.filter_active,
            filter_query=self.filter.query if self.filter else "",
            apply_recency_filter=self.apply_recency_filter,
            secret_name=self.detail_name,
            versions=versions,
            version_cursor=self.version_cursor,
            deleting=self.deleting,
            error=self.error,
            status=self.status,
        )
