"""
Best-effort batch delete.

Secrets are deleted one at a time in order. A failure is recorded against
its secret and the batch carries on, so the caller can tell "nothing
deleted" apart from "some deleted".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from secretsweep.source.base import SecretSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteOutcome:
    name: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DeleteReport:
    """Per-secret outcomes of one batch delete, in request order."""

    outcomes: tuple[DeleteOutcome, ...] = ()

    @property
    def deleted(self) -> list[str]:
        return [o.name for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[DeleteOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def nothing_deleted(self) -> bool:
        return not self.deleted

    @property
    def partial(self) -> bool:
        return bool(self.deleted) and bool(self.failed)

    def error_message(self) -> str | None:
        """Aggregated failure text naming every secret that could not be deleted."""
        failed = self.failed
        if not failed:
            return None
        lines = [f"Failed to delete {len(failed)} secret(s):"]
        lines.extend(f"  {o.name}: {o.error}" for o in failed)
        return "\n".join(lines)


def delete_all(source: SecretSource, names: Iterable[str]) -> DeleteReport:
    """Delete each secret in ``names``, continuing past individual failures."""
    outcomes: list[DeleteOutcome] = []
    for name in names:
        try:
            source.delete_secret(name)
        except Exception as e:
            logger.warning("Delete failed for %s: %s", name, e)
            outcomes.append(DeleteOutcome(name, str(e)))
        else:
            outcomes.append(DeleteOutcome(name))
    report = DeleteReport(tuple(outcomes))
    logger.info("Deleted %d of %d secret(s)", len(report.deleted), len(outcomes))
    return report
