"""Test fixtures for the secretsweep TUI."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from secretsweep.config import Config
from secretsweep.source.models import SecretRecord
from secretsweep.tui.app import SecretSweepApp


@pytest.fixture
def live_record():
    """Build a SecretRecord relative to the wall clock the app scans with."""

    def _make(name, *, accessed_days_ago=None, description=""):
        now = datetime.now(UTC)
        accessed = None
        if accessed_days_ago is not None:
            accessed = now - timedelta(days=accessed_days_ago)
        return SecretRecord(
            name=name,
            created_at=now - timedelta(days=100),
            last_accessed_at=accessed,
            description=description,
        )

    return _make


@pytest.fixture
def app_config():
    return Config(banner_delay=0, status_clear_delay=60)


@pytest.fixture
def make_app(fake_source, live_record, app_config):
    """An app over three stale secrets and one recently used one."""

    def _make(records=None, **source_kwargs):
        if records is None:
            records = [
                live_record("prod/db/password", accessed_days_ago=40, description="primary db"),
                live_record("staging/api-key", accessed_days_ago=90),
                live_record("scratch"),
                live_record("prod/cache/token", accessed_days_ago=1),
            ]
        return SecretSweepApp(fake_source(records, **source_kwargs), app_config)

    return _make

