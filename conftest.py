"""
Root-level shared test fixtures.

Provides an in-memory secret source and record builders used by the core,
source and TUI test suites.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from secretsweep.config import reset_config
from secretsweep.source.base import SourceError
from secretsweep.source.models import SecretRecord, VersionRecord

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


class FakeSource:
    """In-memory SecretSource with scriptable failures."""

    def __init__(
        self,
        records=(),
        *,
        versions=None,
        values=None,
        fail_deletes=(),
        list_error=None,
        versions_error=None,
    ):
        self.records = list(records)
        self.versions = versions or {}
        self.values = values or {}
        self.fail_deletes = set(fail_deletes)
        self.list_error = list_error
        self.versions_error = versions_error
        self.deleted: list[str] = []
        self.value_calls: list[tuple[str, str]] = []

    def list_secrets(self):
        yield from self.records
        if self.list_error is not None:
            raise self.list_error

    def list_versions(self, name):
        if self.versions_error is not None:
            raise self.versions_error
        return list(self.versions.get(name, []))

    def get_value(self, name, version_id):
        self.value_calls.append((name, version_id))
        try:
            return self.values[(name, version_id)]
        except KeyError:
            raise SourceError("get_value", "ResourceNotFoundException", name=name) from None

    def delete_secret(self, name):
        if name in self.fail_deletes:
            raise SourceError("delete_secret", "AccessDeniedException", name=name)
        self.deleted.append(name)
        self.records = [r for r in self.records if r.name != name]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_record():
    """Build a SecretRecord from day offsets relative to NOW."""

    def _make(name, *, accessed_days_ago=None, created_days_ago=100, description=""):
        accessed = None
        if accessed_days_ago is not None:
            accessed = NOW - timedelta(days=accessed_days_ago)
        return SecretRecord(
            name=name,
            created_at=NOW - timedelta(days=created_days_ago),
            last_accessed_at=accessed,
            description=description,
        )

    return _make


@pytest.fixture
def make_version():
    def _make(version_id, *stages, value=None):
        return VersionRecord(
            version_id=version_id,
            created_at=NOW - timedelta(days=30),
            last_accessed_at=NOW - timedelta(days=20),
            stages=frozenset(stages),
            value=value,
        )

    return _make


@pytest.fixture
def fake_source():
    """Factory for FakeSource instances."""
    return FakeSource


@pytest.fixture
def clean_env(monkeypatch):
    """Remove secretsweep env vars that leak between tests."""
    for key in [
        "SECRETSWEEP_REGION",
        "SECRETSWEEP_PROFILE",
        "SECRETSWEEP_RECENCY_DAYS",
        "SECRETSWEEP_PAGE_SIZE",
        "SECRETSWEEP_RESERVED_SUFFIX",
        "SECRETSWEEP_FORCE_DELETE",
        "SECRETSWEEP_RECOVERY_WINDOW_DAYS",
        "SECRETSWEEP_SORT_OLDEST_FIRST",
        "SECRETSWEEP_BANNER_DELAY",
        "SECRETSWEEP_STATUS_CLEAR_DELAY",
        "SECRETSWEEP_LOG_FILE",
        "SECRETSWEEP_LOG_LEVEL",
    ]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
