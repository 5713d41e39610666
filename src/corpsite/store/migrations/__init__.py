"""Database migrations for corpsite.

Versioned, reversible steps are applied in registration order and tracked
in the ``migrations`` ledger table.

Example:
    from corpsite.store import Database
    from corpsite.store.migrations import build_migrator

    with Database("sqlite:///corpsite.db") as db:
        applied = build_migrator(db).up()
"""

from .ledger import Ledger
from .registry import VERSION_MODULES, build_migrator, build_steps
from .runner import Migrator
from .step import MigrationStep, StepAction

__all__ = [
    "Ledger",
    "MigrationStep",
    "Migrator",
    "StepAction",
    "VERSION_MODULES",
    "build_migrator",
    "build_steps",
]
