"""
Secret source interface and error types.

The core only talks to a secret store through this protocol. Every call is a
network operation; failures surface as SourceError and are treated as opaque.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from secretsweep.source.models import SecretRecord, VersionRecord


class SourceError(Exception):
    """A secret store call failed (transport, auth, not found, ...)."""

    def __init__(self, operation: str, message: str, *, name: str | None = None) -> None:
        self.operation = operation
        self.name = name
        self.message = message
        target = f" {name}" if name else ""
        super().__init__(f"{operation}{target}: {message}")


class SourceUnavailable(SourceError):
    """The secret store client could not be initialized."""


class SecretSource(Protocol):
    def list_secrets(self) -> Iterator[SecretRecord]:
        """Yield every secret, following pagination to exhaustion."""
        ...

    def list_versions(self, name: str) -> list[VersionRecord]: ...

    def get_value(self, name: str, version_id: str) -> str: ...

    def delete_secret(self, name: str) -> None: ...
