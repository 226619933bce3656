"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_int
from .errors import (
    ConfigurationError,
    InvalidDateError,
    UnknownFieldError,
)
from .logging import configure_logging
from .reconcile import DEFAULT_HISTORY_DAYS, ReconcileConfig, get_reconcile_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_HISTORY_DAYS",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidDateError",
    "ReconcileConfig",
    "StorageConfig",
    "UnknownFieldError",
    "configure_logging",
    "get_database_config",
    "get_reconcile_config",
    "get_storage_config",
    "optional_env_int",
]
