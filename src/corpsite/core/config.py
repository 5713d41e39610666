"""Configuration management for corpsite."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from sqlalchemy.engine import URL, make_url

from .exceptions import ConfigError

SERVER_MODES = ("development", "production")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class DatabaseConfig:
    """Relational store connection settings."""

    url_override: Optional[str] = None
    host: str = "localhost"
    port: int = 5432
    user: str = ""
    password: str = ""
    name: str = ""
    ssl_mode: str = "disable"
    echo: bool = False
    # Connection pool, ignored for SQLite
    pool_size: int = 10
    max_overflow: int = 90
    pool_recycle: int = 3600
    pool_pre_ping: bool = True

    @property
    def url(self) -> URL:
        """SQLAlchemy URL for the configured store.

        Raises:
            ConfigError: If neither DATABASE_URL nor a complete
                host/user/name set is configured.
        """
        if self.url_override:
            try:
                return make_url(self.url_override)
            except Exception as e:
                raise ConfigError(f"Invalid DATABASE_URL: {e}") from e

        if not (self.host and self.user and self.name):
            raise ConfigError(
                "Database configuration is incomplete: set DATABASE_URL "
                "or DB_HOST, DB_USER and DB_NAME"
            )

        return URL.create(
            "postgresql+psycopg2",
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.name,
            query={"sslmode": self.ssl_mode},
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class Config:
    """Main application configuration."""

    server_mode: str = "development"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def is_production(self) -> bool:
        return self.server_mode == "production"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Config":
        """Load configuration from environment variables.

        Values from a ``.env`` file are loaded first without overriding
        variables that are already set.

        Args:
            env_file: Explicit .env path. Defaults to searching from the
                current directory.

        Raises:
            ConfigError: If a value cannot be parsed.
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))
        config = cls()

        if mode := os.environ.get("SERVER_MODE"):
            if mode not in SERVER_MODES:
                raise ConfigError(
                    f"Invalid SERVER_MODE: {mode}. Must be 'development' or 'production'."
                )
            config.server_mode = mode

        db = config.database
        if url := os.environ.get("DATABASE_URL"):
            db.url_override = url
        if host := os.environ.get("DB_HOST"):
            db.host = host
        if port := os.environ.get("DB_PORT"):
            try:
                db.port = int(port)
            except ValueError as e:
                raise ConfigError(f"Invalid DB_PORT: {port}") from e
        if user := os.environ.get("DB_USER"):
            db.user = user
        if password := os.environ.get("DB_PASSWORD"):
            db.password = password
        if name := os.environ.get("DB_NAME"):
            db.name = name
        if ssl_mode := os.environ.get("DB_SSL_MODE"):
            db.ssl_mode = ssl_mode

        # SQL echo is never enabled in production
        if (echo := os.environ.get("DB_ECHO")) and not config.is_production:
            db.echo = echo.strip().lower() in _TRUTHY

        if level := os.environ.get("LOG_LEVEL"):
            config.logging.level = level.upper()

        return config
