"""Relational store connection manager for corpsite."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from loguru import logger
from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import URL, Connection, make_url

from ..core.config import DatabaseConfig
from ..core.exceptions import DatabaseError


def _on_sqlite_connect(dbapi_connection, connection_record) -> None:
    # Let SQLAlchemy emit BEGIN itself so DDL is transactional too
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def _on_sqlite_begin(conn: Connection) -> None:
    conn.exec_driver_sql("BEGIN")


class Database:
    """SQLAlchemy engine lifecycle and transaction scopes.

    Example:
        with Database("sqlite:///corpsite.db") as db:
            with db.transaction() as conn:
                conn.execute(text("SELECT 1"))
    """

    def __init__(
        self,
        url: Union[str, URL],
        config: Optional[DatabaseConfig] = None,
    ):
        """Initialize database with a connection URL.

        Args:
            url: SQLAlchemy URL of the store.
            config: Pool and echo settings. Defaults are used if omitted.
        """
        self.url = make_url(url)
        self.config = config or DatabaseConfig()
        self._engine: Engine | None = None

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "Database":
        """Create a database from configuration."""
        return cls(config.url, config)

    @property
    def is_sqlite(self) -> bool:
        return self.url.get_backend_name() == "sqlite"

    @property
    def engine(self) -> Engine:
        """The connected engine.

        Raises:
            DatabaseError: If connect() has not been called.
        """
        if self._engine is None:
            raise DatabaseError("Database not connected")
        return self._engine

    def connect(self) -> None:
        """Create the engine and verify the store is reachable."""
        if self._engine is not None:
            return

        logger.info(f"Connecting to database ({self.url.get_backend_name()})...")
        try:
            self._engine = self._create_engine()
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            self._dispose()
            raise DatabaseError(f"Failed to connect to database: {e}") from e

        logger.info("Database connection established")

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is None:
            return
        try:
            self._engine.dispose()
        except Exception as e:
            raise DatabaseError(f"Failed to close database: {e}") from e
        finally:
            self._engine = None

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Context manager for a single transaction.

        Commits when the block exits normally and rolls back when it
        raises. Exceptions from the block propagate unchanged.

        Yields:
            A Connection bound to the open transaction.

        Raises:
            DatabaseError: If the database is not connected.
        """
        with self.engine.begin() as conn:
            yield conn

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """Context manager for a read connection."""
        with self.engine.connect() as conn:
            yield conn

    def _create_engine(self) -> Engine:
        kwargs: dict = {"echo": self.config.echo}

        if self.is_sqlite:
            database = self.url.database
            if database and database != ":memory:":
                Path(database).parent.mkdir(parents=True, exist_ok=True)
        else:
            kwargs.update(
                pool_size=self.config.pool_size,
                max_overflow=self.config.max_overflow,
                pool_recycle=self.config.pool_recycle,
                pool_pre_ping=self.config.pool_pre_ping,
            )

        engine = create_engine(self.url, **kwargs)
        if self.is_sqlite:
            event.listen(engine, "connect", _on_sqlite_connect)
            event.listen(engine, "begin", _on_sqlite_begin)
        return engine

    def _dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
