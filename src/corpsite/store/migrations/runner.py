"""Migration runner for corpsite.

The Migrator applies registered steps in registration order and records
each one in the migrations ledger. Every applied or rolled-back step is
one transaction covering both the step's action and its ledger row, so a
failed step leaves neither behind.

The runner takes no lock. Callers running more than one process against
the same store must serialize them externally.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Callable, Iterable

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from ...core.exceptions import (
    DatabaseError,
    ExecutionError,
    InitializationError,
    LedgerWriteError,
    OrphanedVersionError,
)
from ...core.types import MigrationRecord, MigrationStatus, StepState, StepStatus
from .ledger import Ledger
from .step import MigrationStep

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

    from ..database import Database


class Migrator:
    """Applies and rolls back versioned migration steps.

    Example:
        migrator = Migrator(database, build_steps())
        applied = migrator.up()
        print(f"Applied {len(applied)} migrations")
    """

    def __init__(
        self,
        database: Database,
        steps: Iterable[MigrationStep] = (),
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize with a database and an ordered list of steps.

        Args:
            database: Connected store to migrate.
            steps: Steps in the order they must be applied.
            clock: Source of executed_at timestamps. Defaults to datetime.now.
        """
        self.database = database
        self.ledger = Ledger()
        self._steps: list[MigrationStep] = list(steps)
        self._clock = clock or datetime.now

    @property
    def steps(self) -> tuple[MigrationStep, ...]:
        return tuple(self._steps)

    def register(self, step: MigrationStep) -> None:
        """Append a step. Registration order is apply order."""
        self._steps.append(step)

    def find_step(self, version: str) -> MigrationStep | None:
        for step in self._steps:
            if step.version == version:
                return step
        return None

    def initialize(self) -> None:
        """Create the ledger table if it does not exist.

        Raises:
            InitializationError: If the table cannot be created.
        """
        try:
            with self.database.transaction() as conn:
                self.ledger.create(conn)
        except (SQLAlchemyError, DatabaseError) as e:
            raise InitializationError(
                f"Failed to initialize migrations table: {e}"
            ) from e

    def up(self) -> list[str]:
        """Apply all pending steps in registration order.

        Each step commits on its own. If a step fails, steps committed
        earlier in the same call stay applied and no later step runs.

        Returns:
            Versions applied by this call.

        Raises:
            InitializationError: If the ledger cannot be created or read.
            ExecutionError: If a step's forward action fails.
            LedgerWriteError: If recording a step fails.
        """
        logger.info("Starting database migrations...")
        self.initialize()

        records = self._read_records()
        executed = {record.version for record in records}
        self._warn_orphans(records)

        applied: list[str] = []
        for step in self._steps:
            if step.version in executed:
                continue

            logger.info(f"Running migration: {step.version} - {step.description}")
            try:
                with self.database.transaction() as conn:
                    self._apply(conn, step)
            except SQLAlchemyError as e:
                logger.error(f"Transaction failed for migration {step.version}: {e}")
                raise LedgerWriteError(step.version, "transaction") from e
            except (ExecutionError, LedgerWriteError) as e:
                logger.error(f"Failed to run migration {step.version}: {e.__cause__ or e}")
                raise

            logger.info(f"Successfully ran migration: {step.version}")
            executed.add(step.version)
            applied.append(step.version)

        if not applied:
            logger.info("Database is up to date, no migrations needed.")
        else:
            logger.info(f"Successfully applied {len(applied)} migrations.")
        return applied

    def down(self) -> str | None:
        """Roll back the most recently applied step.

        Returns:
            The rolled-back version, or None if the ledger is empty.

        Raises:
            InitializationError: If the ledger cannot be created or read.
            OrphanedVersionError: If the latest record has no registered step.
            ExecutionError: If the step's backward action fails.
            LedgerWriteError: If removing the record fails.
        """
        logger.info("Rolling back the last migration...")
        self.initialize()

        try:
            with self.database.connection() as conn:
                latest = self.ledger.latest(conn)
        except SQLAlchemyError as e:
            raise InitializationError(f"Failed to fetch last migration: {e}") from e

        if latest is None:
            logger.info("No migrations to roll back.")
            return None

        step = self.find_step(latest.version)
        if step is None:
            raise OrphanedVersionError(latest.version)

        logger.info(f"Rolling back migration: {step.version} - {step.description}")
        try:
            with self.database.transaction() as conn:
                self._revert(conn, step, latest)
        except SQLAlchemyError as e:
            logger.error(f"Transaction failed for rollback of {step.version}: {e}")
            raise LedgerWriteError(step.version, "transaction") from e
        except (ExecutionError, LedgerWriteError) as e:
            logger.error(f"Failed to roll back migration {step.version}: {e.__cause__ or e}")
            raise

        logger.info(f"Successfully rolled back migration: {step.version}")
        return step.version

    def status(self) -> MigrationStatus:
        """Compare the ledger with the registered steps.

        Read-only. A store without a ledger table reports every step as
        pending.

        Raises:
            InitializationError: If the ledger exists but cannot be read.
        """
        records = self._read_records()
        by_version = {record.version: record for record in records}

        status = MigrationStatus()
        for step in self._steps:
            record = by_version.get(step.version)
            if record is None:
                status.steps.append(
                    StepStatus(step.version, step.description, StepState.PENDING)
                )
            else:
                status.steps.append(
                    StepStatus(
                        step.version,
                        step.description,
                        StepState.EXECUTED,
                        record.executed_at,
                    )
                )

        registered = {step.version for step in self._steps}
        status.orphaned = [r for r in records if r.version not in registered]
        return status

    def reset(self) -> list[str]:
        """Drop the ledger and re-apply every registered step.

        Tables and data created by earlier runs are left in place, so every
        forward action must be safe to run against a store that already
        reflects it.

        Returns:
            Versions applied by the re-run.
        """
        logger.warning(
            "Dropping the migrations ledger; every registered step will run again"
        )
        try:
            with self.database.transaction() as conn:
                self.ledger.drop(conn)
        except (SQLAlchemyError, DatabaseError) as e:
            raise InitializationError(f"Failed to drop migrations table: {e}") from e

        applied = self.up()
        logger.info("Reset complete.")
        return applied

    def _apply(self, conn: Connection, step: MigrationStep) -> None:
        try:
            step.up(conn)
        except Exception as e:
            raise ExecutionError(step.version, "up") from e

        try:
            self.ledger.insert(
                conn,
                step.version,
                step.description,
                self._next_timestamp(conn),
            )
        except SQLAlchemyError as e:
            raise LedgerWriteError(step.version, "record") from e

    def _revert(
        self, conn: Connection, step: MigrationStep, record: MigrationRecord
    ) -> None:
        try:
            step.down(conn)
        except Exception as e:
            raise ExecutionError(step.version, "down") from e

        try:
            removed = self.ledger.delete(conn, record)
        except SQLAlchemyError as e:
            raise LedgerWriteError(step.version, "remove") from e
        if removed != 1:
            raise LedgerWriteError(step.version, "remove")

    def _next_timestamp(self, conn: Connection) -> datetime:
        # executed_at never goes backwards; equal values fall back to id order
        now = self._clock()
        latest = self.ledger.latest_executed_at(conn)
        if latest is not None and now < latest:
            return latest
        return now

    def _read_records(self) -> list[MigrationRecord]:
        try:
            with self.database.connection() as conn:
                if not self.ledger.exists(conn):
                    return []
                return self.ledger.records(conn)
        except (SQLAlchemyError, DatabaseError) as e:
            raise InitializationError(
                f"Failed to fetch executed migrations: {e}"
            ) from e

    def _warn_orphans(self, records: list[MigrationRecord]) -> None:
        registered = {step.version for step in self._steps}
        orphans = [r.version for r in records if r.version not in registered]
        if orphans:
            logger.warning(
                f"Ledger contains versions with no registered step: {', '.join(orphans)}"
            )
