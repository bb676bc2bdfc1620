"""
AWS Secrets Manager source — boto3 adapter behind the SecretSource protocol.

Listing follows pagination to exhaustion. Names ending in the reserved suffix
and entries without a creation date are dropped here so the analyzer only
ever sees complete records.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from secretsweep.source.base import SourceError, SourceUnavailable
from secretsweep.source.models import SecretRecord, VersionRecord

if TYPE_CHECKING:
    from secretsweep.config import Config

logger = logging.getLogger(__name__)

AWS_ERRORS = (BotoCoreError, ClientError)


def _describe(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code", "ClientError")
        return f"{code}: {error.get('Message', str(exc))}"
    return str(exc)


class SecretsManagerSource:
    """Secret source backed by a boto3 ``secretsmanager`` client."""

    def __init__(
        self,
        client: Any,
        *,
        page_size: int = 100,
        reserved_suffix: str = "",
        force_delete: bool = True,
        recovery_window_days: int = 7,
    ) -> None:
        self.client = client
        self.page_size = page_size
        self.reserved_suffix = reserved_suffix
        self.force_delete = force_delete
        self.recovery_window_days = recovery_window_days

    @classmethod
    def from_config(cls, config: Config) -> SecretsManagerSource:
        """Build a client from the ambient boto3 chain plus config overrides."""
        try:
            session = boto3.Session(
                profile_name=config.profile or None,
                region_name=config.region or None,
            )
            client = session.client("secretsmanager")
        except AWS_ERRORS as e:
            raise SourceUnavailable("connect", _describe(e)) from e
        logger.info("Connected to Secrets Manager in %s", client.meta.region_name)
        return cls(
            client,
            page_size=config.page_size,
            reserved_suffix=config.reserved_suffix,
            force_delete=config.force_delete,
            recovery_window_days=config.recovery_window_days,
        )

    def _skip(self, entry: dict[str, Any]) -> bool:
        name = entry.get("Name", "")
        if self.reserved_suffix and name.endswith(self.reserved_suffix):
            return True
        if entry.get("CreatedDate") is None:
            logger.debug("Skipping %s: no creation date", name)
            return True
        return False

    def list_secrets(self) -> Iterator[SecretRecord]:
        paginator = self.client.get_paginator("list_secrets")
        pages = paginator.paginate(PaginationConfig={"PageSize": self.page_size})
        try:
            for page in pages:
                for entry in page.get("SecretList", []):
                    if self._skip(entry):
                        continue
                    yield SecretRecord(
                        name=entry["Name"],
                        created_at=entry["CreatedDate"],
                        last_accessed_at=entry.get("LastAccessedDate"),
                        description=entry.get("Description", ""),
                    )
        except AWS_ERRORS as e:
            raise SourceError("list_secrets", _describe(e)) from e

    def list_versions(self, name: str) -> list[VersionRecord]:
        params: dict[str, Any] = {"SecretId": name, "MaxResults": self.page_size}
        versions: list[VersionRecord] = []
        try:
            while True:
                resp = self.client.list_secret_version_ids(**params)
                for entry in resp.get("Versions", []):
                    versions.append(
                        VersionRecord(
                            version_id=entry["VersionId"],
                            created_at=entry.get("CreatedDate"),
                            last_accessed_at=entry.get("LastAccessedDate"),
                            stages=frozenset(entry.get("VersionStages", [])),
                        )
                    )
                token = resp.get("NextToken")
                if not token:
                    break
                params["NextToken"] = token
        except AWS_ERRORS as e:
            raise SourceError("list_versions", _describe(e), name=name) from e
        return versions

    def get_value(self, name: str, version_id: str) -> str:
        try:
            resp = self.client.get_secret_value(SecretId=name, VersionId=version_id)
        except AWS_ERRORS as e:
            raise SourceError("get_value", _describe(e), name=name) from e
        if "SecretString" in resp:
            return str(resp["SecretString"])
        return f"<binary: {len(resp.get('SecretBinary', b''))} bytes>"

    def delete_secret(self, name: str) -> None:
        params: dict[str, Any] = {"SecretId": name}
        if self.force_delete:
            params["ForceDeleteWithoutRecovery"] = True
        else:
            params["RecoveryWindowInDays"] = self.recovery_window_days
        try:
            self.client.delete_secret(**params)
        except AWS_ERRORS as e:
            raise SourceError("delete_secret", _describe(e), name=name) from e
        logger.info("Deleted secret %s", name)
