"""
Secret sources — where secret metadata, values and deletes come from.

Public API:
    SecretSource             → protocol the core depends on
    SecretsManagerSource     → boto3-backed AWS implementation
    SecretRecord / VersionRecord → listing and version models
    SourceError / SourceUnavailable → opaque failure types
"""

from __future__ import annotations

from secretsweep.source.aws import SecretsManagerSource
from secretsweep.source.base import SecretSource, SourceError, SourceUnavailable
from secretsweep.source.models import SecretRecord, VersionRecord

__all__ = [
    "SecretRecord",
    "SecretSource",
    "SecretsManagerSource",
    "SourceError",
    "SourceUnavailable",
    "VersionRecord",
]
