"""Queries against the migrations ledger table."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, inspect, select

from ...core.types import MigrationRecord
from ..models import MigrationModel

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Row

_table = MigrationModel.__table__


def _to_record(row: Row) -> MigrationRecord:
    return MigrationRecord(
        id=row.id,
        version=row.version,
        description=row.description,
        executed_at=row.executed_at,
    )


class Ledger:
    """Reads and writes MigrationRecord rows.

    Every method takes the connection to run on, so writes share the
    transaction of the step they record.
    """

    table_name = _table.name

    def create(self, conn: Connection) -> None:
        """Create the ledger table if it does not exist."""
        _table.create(conn, checkfirst=True)

    def exists(self, conn: Connection) -> bool:
        return inspect(conn).has_table(self.table_name)

    def drop(self, conn: Connection) -> None:
        """Drop the ledger table if it exists."""
        _table.drop(conn, checkfirst=True)

    def records(self, conn: Connection) -> list[MigrationRecord]:
        """All records, oldest first."""
        stmt = select(_table).order_by(_table.c.executed_at, _table.c.id)
        return [_to_record(row) for row in conn.execute(stmt)]

    def latest(self, conn: Connection) -> MigrationRecord | None:
        """The most recently applied record, or None if the ledger is empty.

        Records sharing an executed_at are ordered by their autoincrement id.
        """
        stmt = (
            select(_table)
            .order_by(_table.c.executed_at.desc(), _table.c.id.desc())
            .limit(1)
        )
        row = conn.execute(stmt).first()
        return _to_record(row) if row is not None else None

    def latest_executed_at(self, conn: Connection) -> datetime | None:
        return conn.execute(select(func.max(_table.c.executed_at))).scalar()

    def insert(
        self,
        conn: Connection,
        version: str,
        description: str,
        executed_at: datetime,
    ) -> None:
        conn.execute(
            insert(_table).values(
                version=version,
                description=description,
                executed_at=executed_at,
            )
        )

    def delete(self, conn: Connection, record: MigrationRecord) -> int:
        """Delete a record by id.

        Returns:
            Number of rows removed.
        """
        result = conn.execute(delete(_table).where(_table.c.id == record.id))
        return result.rowcount
