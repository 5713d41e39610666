"""Core configuration, errors and types for corpsite."""

from .config import Config, DatabaseConfig, LoggingConfig
from .exceptions import (
    ConfigError,
    CorpsiteError,
    DatabaseError,
    ExecutionError,
    InitializationError,
    LedgerWriteError,
    MigrationError,
    NotFoundError,
    OrphanedVersionError,
)
from .types import MigrationRecord, MigrationStatus, StepState, StepStatus

__all__ = [
    "Config",
    "DatabaseConfig",
    "LoggingConfig",
    "CorpsiteError",
    "ConfigError",
    "DatabaseError",
    "MigrationError",
    "InitializationError",
    "ExecutionError",
    "LedgerWriteError",
    "NotFoundError",
    "OrphanedVersionError",
    "MigrationRecord",
    "MigrationStatus",
    "StepState",
    "StepStatus",
]
