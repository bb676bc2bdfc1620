"""
Centralized configuration for secretsweep.

All configuration is loaded from environment variables with sensible defaults.
AWS credentials and region resolve through the ambient boto3 chain unless
overridden here.

Usage:
    from secretsweep.config import get_config
    cfg = get_config()
    print(cfg.recency_days)   # 14
    print(cfg.log_file)       # ~/.cache/secretsweep/secretsweep.log
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

_TRUTHY = ("1", "true", "yes", "on")


def _default_log_file() -> Path:
    return Path.home() / ".cache" / "secretsweep" / "secretsweep.log"


@dataclass(frozen=True)
class Config:
    """Top-level secretsweep configuration."""

    # AWS (empty = ambient resolution)
    region: str = ""
    profile: str = ""

    # Scanning
    recency_days: int = 14
    page_size: int = 100
    reserved_suffix: str = "-config"
    sort_oldest_first: bool = False

    # Deleting
    force_delete: bool = True
    recovery_window_days: int = 7

    # UI pacing (seconds)
    banner_delay: float = 1.0
    status_clear_delay: float = 2.0

    # Logging
    log_file: Path = field(default_factory=_default_log_file)
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.banner_delay < 0 or self.status_clear_delay < 0:
            raise ValueError("UI delays must not be negative")

    @property
    def recency_threshold(self) -> timedelta:
        return timedelta(days=self.recency_days)

    @classmethod
    def from_env(cls) -> Config:
        """Load configuration from environment variables.

        Raises ValueError when a numeric variable is malformed or a delay
        is negative.
        """
        return cls(
            region=os.environ.get("SECRETSWEEP_REGION", ""),
            profile=os.environ.get("SECRETSWEEP_PROFILE", ""),
            recency_days=int(os.environ.get("SECRETSWEEP_RECENCY_DAYS", "14")),
            page_size=int(os.environ.get("SECRETSWEEP_PAGE_SIZE", "100")),
            reserved_suffix=os.environ.get("SECRETSWEEP_RESERVED_SUFFIX", "-config"),
            sort_oldest_first=os.environ.get("SECRETSWEEP_SORT_OLDEST_FIRST", "false").lower()
            in _TRUTHY,
            force_delete=os.environ.get("SECRETSWEEP_FORCE_DELETE", "true").lower() in _TRUTHY,
            recovery_window_days=int(os.environ.get("SECRETSWEEP_RECOVERY_WINDOW_DAYS", "7")),
            banner_delay=float(os.environ.get("SECRETSWEEP_BANNER_DELAY", "1.0")),
            status_clear_delay=float(os.environ.get("SECRETSWEEP_STATUS_CLEAR_DELAY", "2.0")),
            log_file=Path(os.environ.get("SECRETSWEEP_LOG_FILE", _default_log_file())),
            log_level=os.environ.get("SECRETSWEEP_LOG_LEVEL", "INFO").upper(),
        )


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
