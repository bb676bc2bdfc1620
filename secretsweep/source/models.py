"""Secret source data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SecretRecord(BaseModel):
    """Secret metadata as listed by the store (never includes the value)."""

    model_config = ConfigDict(frozen=True)

    name: str
    created_at: datetime
    last_accessed_at: datetime | None = None
    description: str = ""


class VersionRecord(BaseModel):
    """One version of a secret. ``value`` stays None until revealed."""

    model_config = ConfigDict(frozen=True)

    version_id: str
    created_at: datetime | None = None
    last_accessed_at: datetime | None = None
    stages: frozenset[str] = frozenset()
    value: str | None = None

    @property
    def revealed(self) -> bool:
        return self.value is not None

    def with_value(self, value: str) -> VersionRecord:
        return self.model_copy(update={"value": value})
