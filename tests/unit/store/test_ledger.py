"""Tests for ledger queries."""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from corpsite.store.database import Database
from corpsite.store.migrations import Ledger


@pytest.fixture
def ledger(db: Database) -> Ledger:
    ledger = Ledger()
    with db.transaction() as conn:
        ledger.create(conn)
    return ledger


class TestLedger:
    """Tests for Ledger reads and writes."""

    def test_empty_ledger(self, db: Database, ledger: Ledger):
        with db.connection() as conn:
            assert ledger.records(conn) == []
            assert ledger.latest(conn) is None
            assert ledger.latest_executed_at(conn) is None

    def test_insert_and_read_back(self, db: Database, ledger: Ledger):
        when = datetime(2024, 5, 1, 10, 30, 0)
        with db.transaction() as conn:
            ledger.insert(conn, "001", "First", when)

        with db.connection() as conn:
            records = ledger.records(conn)

        assert len(records) == 1
        assert records[0].version == "001"
        assert records[0].description == "First"
        assert records[0].executed_at == when
        assert records[0].id is not None

    def test_records_oldest_first(self, db: Database, ledger: Ledger):
        with db.transaction() as conn:
            ledger.insert(conn, "b", "B", datetime(2024, 1, 2))
            ledger.insert(conn, "a", "A", datetime(2024, 1, 1))

        with db.connection() as conn:
            assert [r.version for r in ledger.records(conn)] == ["a", "b"]

    def test_latest_by_executed_at_then_id(self, db: Database, ledger: Ledger):
        same = datetime(2024, 1, 1)
        with db.transaction() as conn:
            ledger.insert(conn, "late", "Late", datetime(2024, 2, 1))
            ledger.insert(conn, "x", "X", same)
            ledger.insert(conn, "y", "Y", same)

        with db.connection() as conn:
            assert ledger.latest(conn).version == "late"
            assert ledger.latest_executed_at(conn) == datetime(2024, 2, 1)

        with db.transaction() as conn:
            ledger.delete(conn, ledger.latest(conn))

        with db.connection() as conn:
            assert ledger.latest(conn).version == "y"

    def test_version_is_unique(self, db: Database, ledger: Ledger):
        with db.transaction() as conn:
            ledger.insert(conn, "001", "First", datetime(2024, 1, 1))

        with pytest.raises(IntegrityError):
            with db.transaction() as conn:
                ledger.insert(conn, "001", "Again", datetime(2024, 1, 2))

    def test_delete_returns_rowcount(self, db: Database, ledger: Ledger):
        with db.transaction() as conn:
            ledger.insert(conn, "001", "First", datetime(2024, 1, 1))
            record = ledger.latest(conn)

        with db.transaction() as conn:
            assert ledger.delete(conn, record) == 1
        with db.transaction() as conn:
            assert ledger.delete(conn, record) == 0

    def test_drop_and_recreate(self, db: Database, ledger: Ledger):
        with db.transaction() as conn:
            ledger.insert(conn, "001", "First", datetime(2024, 1, 1))
            ledger.drop(conn)
            ledger.drop(conn)
            ledger.create(conn)

        with db.connection() as conn:
            assert ledger.records(conn) == []
