"""Canonical list of migration steps.

The order of VERSION_MODULES is the apply order. Versions are never sorted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from .runner import Migrator
from .step import MigrationStep
from .versions import (
    v001_create_users_table,
    v002_add_user_indexes,
    v003_seed_admin_user,
)

if TYPE_CHECKING:
    from ..database import Database

VERSION_MODULES = (
    v001_create_users_table,
    v002_add_user_indexes,
    v003_seed_admin_user,
)


def build_steps() -> tuple[MigrationStep, ...]:
    """Build the bundled steps in apply order."""
    return tuple(MigrationStep.from_module(module) for module in VERSION_MODULES)


def build_migrator(
    database: Database,
    steps: Iterable[MigrationStep] | None = None,
) -> Migrator:
    """Create a Migrator with every step registered.

    Args:
        database: Connected store to migrate.
        steps: Steps to register instead of the bundled ones.
    """
    migrator = Migrator(database)
    for step in build_steps() if steps is None else steps:
        migrator.register(step)
    return migrator
