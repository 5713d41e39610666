"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from corpsite.core.config import Config
from corpsite.store.database import Database
from corpsite.store.migrations import Migrator


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for tests."""
    return tmp_path / "test.db"


@pytest.fixture
def db_url(test_db_path: Path) -> str:
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db(db_url: str) -> Database:
    """Provide a connected database instance."""
    database = Database(db_url)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def config(db_url: str) -> Config:
    """Provide a config pointing at the temporary database."""
    config = Config()
    config.database.url_override = db_url
    return config


class StepClock:
    """Clock advancing one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def migrator(db: Database, clock: StepClock) -> Migrator:
    """Provide an empty Migrator on the temporary database."""
    return Migrator(db, clock=clock)
