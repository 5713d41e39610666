"""Data access layer for corpsite.

This package provides:
- Database: SQLAlchemy engine lifecycle and transaction scopes
- models: Declarative ORM tables (users, migrations ledger)
- migrations: The versioned schema migration engine
"""

from .database import Database
from .models import Base, LedgerBase, MigrationModel, UserModel

__all__ = [
    "Database",
    "Base",
    "LedgerBase",
    "MigrationModel",
    "UserModel",
]
