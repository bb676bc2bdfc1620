"""
SecretSweepApp — main Textual application for the secretsweep TUI.

The app is the only writer of session state: key bindings call session
commands, and every Job the session returns is run on a Textual worker
(or a timer, for pure delays) that posts exactly one JobFinished message
back to the event loop.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.markup import escape
from textual.message import Message
from textual.widgets import ContentSwitcher, Footer, Header, Input, Static

from secretsweep.config import Config
from secretsweep.core.filtering import FilterMode
from secretsweep.core.session import Job, Session, SessionState
from secretsweep.source.base import SecretSource
from secretsweep.tui.palette import DEFAULT_PALETTE, Palette
from secretsweep.tui.widgets import (
    Banner,
    ConfirmPanel,
    MessageLine,
    ResultsTable,
    StatusBar,
    VersionsTable,
)

logger = logging.getLogger(__name__)

PANES = {
    SessionState.BANNER: "banner",
    SessionState.SCANNING: "scanning",
    SessionState.RESULTS: "results",
    SessionState.FILTER_INCLUDE: "results",
    SessionState.FILTER_EXCLUDE: "results",
    SessionState.VIEW_SECRET: "secret",
    SessionState.CONFIRM_DELETE: "confirm",
    SessionState.ERROR: "error",
}

# Binding action → session command it is gated on
GATED_ACTIONS = {
    "move_cursor": "cursor",
    "toggle_selection": "toggle",
    "open_secret": "open",
    "open_filter": "filter",
    "request_delete": "delete",
    "rescan": "rescan",
    "reveal": "reveal",
    "copy_name": "copy",
    "confirm_delete": "confirm",
    "back": "back",
}


class JobFinished(Message):
    """A dispatched job has produced its single result."""

    def __init__(self, job: Job, result: Any = None, error: Exception | None = None) -> None:
        super().__init__()
        self.job = job
        self.result = result
        self.error = error


class SecretSweepApp(App):
    """Terminal UI for finding and deleting stale secrets."""

    TITLE = "secretsweep"
    SUB_TITLE = "AWS Secrets Manager cleanup"
    AUTO_FOCUS = None

    CSS = """
    #results, #secret {
        height: 1fr;
    }
    #filter-input {
        dock: top;
        display: none;
    }
    #empty, #scanning, #error {
        margin: 1 2;
    }
    #secret-title {
        padding: 0 1;
        text-style: bold;
    }
    """

    BINDINGS = [
        Binding("up,k", "move_cursor(-1)", "Up", show=False),
        Binding("down,j", "move_cursor(1)", "Down", show=False),
        Binding("space", "toggle_selection", "Select"),
        Binding("enter", "open_secret", "View"),
        Binding("slash", "open_filter('include')", "Filter"),
        Binding("question_mark", "open_filter('exclude')", "Exclude"),
        Binding("shift+delete,D", "request_delete", "Delete"),
        Binding("r", "rescan(True)", "Rescan stale"),
        Binding("a", "rescan(False)", "Rescan all"),
        Binding("v", "reveal", "Reveal"),
        Binding("c", "copy_name", "Copy name"),
        Binding("y", "confirm_delete(True)", "Yes"),
        Binding("n", "confirm_delete(False)", "No"),
        Binding("escape", "back", "Back", priority=True),
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        source: SecretSource | None,
        config: Config | None = None,
        *,
        init_error: str | None = None,
        palette: Palette = DEFAULT_PALETTE,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config or Config()
        self.palette = palette
        self.session = Session.from_config(self.config, source, init_error=init_error)

    def compose(self) -> ComposeResult:
        yield Header()
        with ContentSwitcher(initial="banner", id="panes"):
            yield Banner(self.palette, self.config.recency_days, id="banner")
            yield Static("Scanning secrets...", id="scanning")
            with Vertical(id="results"):
                yield Input(placeholder="Type to filter by name...", id="filter-input")
                yield Static("No secrets found.", id="empty")
                yield ResultsTable(self.palette, id="results-table")
            with Vertical(id="secret"):
                yield Static("", id="secret-title")
                yield VersionsTable(self.palette, id="versions-table")
            yield ConfirmPanel(self.palette, id="confirm")
            yield Static("", id="error")
        yield MessageLine(self.palette, id="message-line")
        yield StatusBar(self.palette, id="status-bar")
        yield Footer()

    @property
    def filter_input(self) -> Input:
        return self.query_one("#filter-input", Input)

    def on_mount(self) -> None:
        self._start_job(self.session.start())
        self._refresh_view()

    # ─── Jobs ───────────────────────────────────────────────────────────

    def _start_job(self, job: Job | None) -> None:
        if job is None:
            return
        if job.work is None:
            # Textual timers reject a zero interval
            if job.delay <= 0:
                self.post_message(JobFinished(job))
            else:
                self.set_timer(job.delay, partial(self.post_message, JobFinished(job)))
            return
        self.run_worker(
            partial(self._execute_job, job),
            name=f"{job.kind}-{job.generation}",
            group=str(job.kind),
            thread=True,
            exit_on_error=False,
        )

    def _execute_job(self, job: Job) -> None:
        """Worker thread body: run the job and report back exactly once."""
        try:
            result = job.work()
        except Exception as e:
            logger.warning("%s job failed: %s", job.kind, e)
            self.post_message(JobFinished(job, error=e))
        else:
            self.post_message(JobFinished(job, result=result))

    def on_job_finished(self, message: JobFinished) -> None:
        follow_up = self.session.complete(message.job, message.result, message.error)
        self._start_job(follow_up)
        self._refresh_view()

    # ─── Rendering ──────────────────────────────────────────────────────

    def _refresh_view(self) -> None:
        view = self.session.view()
        self.query_one("#panes", ContentSwitcher).current = PANES[view.state]

        if view.state is SessionState.BANNER:
            self.query_one(Banner).set_mode(view.apply_recency_filter)

        if view.state in (
            SessionState.RESULTS,
            SessionState.FILTER_INCLUDE,
            SessionState.FILTER_EXCLUDE,
        ):
            filtering = view.state is not SessionState.RESULTS
            self.filter_input.display = filtering
            self.query_one("#empty").display = not view.rows
            table = self.query_one(ResultsTable)
            table.display = bool(view.rows)
            table.show(view)
            if not filtering and self.filter_input.has_focus:
                self.set_focus(None)

        if view.state is SessionState.VIEW_SECRET:
            title = self.query_one("#secret-title", Static)
            if view.versions is None:
                title.update(f"{escape(view.secret_name or '')} (loading versions...)")
            else:
                title.update(f"{escape(view.secret_name or '')} ({len(view.versions)} versions)")
            self.query_one(VersionsTable).show(view)

        if view.state is SessionState.CONFIRM_DELETE:
            self.query_one(ConfirmPanel).show(view)

        if view.state is SessionState.ERROR:
            self.query_one("#error", Static).update(
                f"Cannot reach the secret store: {escape(view.error or '')}\n\nPress q to quit."
            )

        self.query_one(MessageLine).show(view)
        self.query_one(StatusBar).show(view)
        self.refresh_bindings()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        command = GATED_ACTIONS.get(action)
        if command is None:
            return True
        return self.session.allows(command)

    # ─── Actions ────────────────────────────────────────────────────────

    def action_move_cursor(self, delta: int) -> None:
        self.session.move_cursor(delta)
        self._refresh_view()

    def action_toggle_selection(self) -> None:
        self.session.toggle_selection()
        self._refresh_view()

    def action_open_secret(self) -> None:
        self._start_job(self.session.open_secret())
        self._refresh_view()

    def action_open_filter(self, mode: str) -> None:
        self.session.open_filter(FilterMode(mode))
        self.filter_input.value = ""
        self._refresh_view()
        self.filter_input.focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.session.update_filter(event.value)
        self._refresh_view()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.session.commit_filter()
        self._refresh_view()

    def action_request_delete(self) -> None:
        self.session.request_delete()
        self._refresh_view()

    def action_confirm_delete(self, confirmed: bool) -> None:
        if confirmed:
            self._start_job(self.session.confirm_delete())
        else:
            self.session.cancel_delete()
        self._refresh_view()

    def action_rescan(self, stale_only: bool) -> None:
        self._start_job(self.session.rescan(stale_only))
        self._refresh_view()

    def action_reveal(self) -> None:
        self._start_job(self.session.reveal())
        self._refresh_view()

    def action_copy_name(self) -> None:
        self._start_job(self.session.copy_name(self.copy_to_clipboard))
        self._refresh_view()

    def action_back(self) -> None:
        self.session.back()
        self._refresh_view()
