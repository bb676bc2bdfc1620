"""
Custom Textual widgets for the secretsweep TUI.

Banner — startup/rescan banner with the scan mode.
ResultsTable — secrets with selection marks and access dates.
VersionsTable — versions of one secret, values masked until revealed.
ConfirmPanel — deletion confirmation listing the selected secrets.
MessageLine — inline error or transient status text.
StatusBar — bottom bar with state, counts and filter/selection summary.
"""

from __future__ import annotations

from textual.content import Content
from textual.markup import escape
from textual.widgets import DataTable, Static

from secretsweep.core.session import SessionState, SessionView
from secretsweep.tui.palette import DEFAULT_PALETTE, Palette

BANNER = [
    r" ___ ___ ___ ___ ___ _____ _____      _____ ___ ___ ___ ",
    r"/ __| __/ __| _ \ __|_   _/ __\ \    / / __| __| _ \ ",
    r"\__ \ _| (__|   / _|  | | \__ \\ \/\/ /| _|| _||  _/ ",
    r"|___/___\___|_|_\___| |_| |___/ \_/\_/ |___|___|_|   ",
]

STATE_LABELS = {
    SessionState.BANNER: "starting",
    SessionState.SCANNING: "scanning",
    SessionState.RESULTS: "results",
    SessionState.FILTER_INCLUDE: "filter",
    SessionState.FILTER_EXCLUDE: "exclude",
    SessionState.VIEW_SECRET: "secret",
    SessionState.CONFIRM_DELETE: "delete",
    SessionState.ERROR: "error",
}


class Banner(Static):
    """ASCII title plus what the next scan will look for."""

    DEFAULT_CSS = """
    Banner {
        margin: 1 2;
        height: auto;
    }
    """

    def __init__(
        self,
        palette: Palette = DEFAULT_PALETTE,
        recency_days: int = 14,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self.palette = palette
        self.recency_days = recency_days
        self._stale_only = True
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        art = "\n".join(escape(line) for line in BANNER)
        if self._stale_only:
            mode = f"secrets not accessed in the last {self.recency_days} days"
        else:
            mode = "all secrets"
        return (
            f"[bold {self.palette.accent}]{art}[/]\n\n"
            f"Looking for {mode} in AWS Secrets Manager..."
        )

    def set_mode(self, stale_only: bool) -> None:
        self._stale_only = stale_only
        self.update(Content.from_markup(self._format()))


class ResultsTable(DataTable, can_focus=False):
    """One row per secret; the session owns the cursor and selection."""

    def __init__(self, palette: Palette = DEFAULT_PALETTE, **kwargs) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self.palette = palette

    def on_mount(self) -> None:
        self.add_columns("", "Name", "Description", "Last Accessed", "Created")

    def _mark(self, selected: bool) -> str:
        if selected:
            return f"[bold {self.palette.selected}]{escape(self.palette.checked)}[/]"
        return escape(self.palette.unchecked)

    def show(self, view: SessionView) -> None:
        self.clear()
        for row in view.rows:
            description = row.description
            if len(description) > 47:
                description = description[:47] + "..."
            accessed = escape(row.last_accessed)
            if row.stale:
                accessed = f"[{self.palette.stale}]{accessed}[/]"
            self.add_row(
                self._mark(row.selected),
                escape(row.name),
                escape(description),
                accessed,
                row.created,
                key=row.name,
            )
        if view.rows:
            self.move_cursor(row=view.cursor)


class VersionsTable(DataTable, can_focus=False):
    """Versions of the secret being inspected."""

    def __init__(self, palette: Palette = DEFAULT_PALETTE, **kwargs) -> None:
        super().__init__(cursor_type="row", **kwargs)
        self.palette = palette

    def on_mount(self) -> None:
        self.add_columns("Version", "Stages", "Created", "Last Accessed", "Value")

    def show(self, view: SessionView) -> None:
        self.clear()
        for version in view.versions or ():
            if version.pending:
                value = f"[{self.palette.muted}]fetching...[/]"
            elif version.revealed:
                value = escape(version.value)
            else:
                value = f"[{self.palette.muted}]{version.value}[/]"
            self.add_row(
                escape(version.version_id),
                escape(", ".join(version.stages)),
                version.created,
                version.last_accessed,
                value,
                key=version.version_id,
            )
        if view.versions:
            self.move_cursor(row=view.version_cursor)


class ConfirmPanel(Static):
    """Lists the secrets about to be deleted and asks for y/n."""

    DEFAULT_CSS = """
    ConfirmPanel {
        margin: 1 2;
        padding: 1 2;
        height: auto;
    }
    """

    def __init__(self, palette: Palette = DEFAULT_PALETTE, **kwargs) -> None:
        self.palette = palette
        self._names: tuple[str, ...] = ()
        self._deleting = False
        super().__init__(Content.from_markup(self._format()), **kwargs)

    def _format(self) -> str:
        error = self.palette.error
        lines = [f"[bold {error}]⚠ CONFIRM DELETION[/]", ""]
        lines.append(f"You are about to permanently delete {len(self._names)} secret(s):")
        lines.append("")
        lines.extend(f"  • {escape(name)}" for name in self._names)
        lines.append("")
        if self._deleting:
            lines.append("Deleting selected secrets...")
        else:
            lines.append(f"[bold {error}]This action cannot be undone![/]")
            lines.append("")
            lines.append("Press [bold]y[/bold] to confirm, [bold]n[/bold] to cancel")
        return "\n".join(lines)

    def show(self, view: SessionView) -> None:
        self._names = view.selected
        self._deleting = view.deleting
        self.update(Content.from_markup(self._format()))


class MessageLine(Static):
    """Error text in red, otherwise transient status text in green."""

    DEFAULT_CSS = """
    MessageLine {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(self, palette: Palette = DEFAULT_PALETTE, **kwargs) -> None:
        self.palette = palette
        self._error: str | None = None
        self._status: str | None = None
        super().__init__("", **kwargs)

    def _format(self) -> str:
        if self._error:
            return f"[{self.palette.error}]{escape(self._error)}[/]"
        if self._status:
            return f"[{self.palette.success}]✓ {escape(self._status)}[/]"
        return ""

    def show(self, view: SessionView) -> None:
        self._error = view.error
        self._status = view.status
        self.display = bool(self._error or self._status)
        self.update(Content.from_markup(self._format()))


class StatusBar(Static):
    """Bottom status bar showing state, result counts and selection."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(self, palette: Palette = DEFAULT_PALETTE, **kwargs) -> None:
        self.palette = palette
        self._view: SessionView | None = None
        super().__init__(Content.from_markup(self._format()), **kwargs)

    def _format(self) -> str:
        view = self._view
        if view is None:
            return "[dim]starting[/dim]"

        parts = [f"[bold {self.palette.accent}]{STATE_LABELS[view.state]}[/]"]
        parts.append("stale only" if view.apply_recency_filter else "all secrets")

        if view.state not in (SessionState.BANNER, SessionState.SCANNING, SessionState.ERROR):
            parts.append(f"{len(view.rows)} secrets")
        if view.filter_query:
            parts.append(f"filter: {escape(view.filter_query)}")
        elif view.filter_active:
            parts.append("filtered (esc to clear)")
        if view.selected:
            parts.append(f"Selected {len(view.selected)} secrets for deletion")

        return " | ".join(parts)

    def show(self, view: SessionView) -> None:
        self._view = view
        self.update(Content.from_markup(self._format()))
