"""SQLAlchemy ORM models for the corpsite storage layer.

Models use SQLAlchemy 2.0 style with Mapped[] type annotations. The
migrations ledger lives on its own MetaData so that creating or dropping
it never touches application tables, and vice versa.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_USER = "user"


class Base(DeclarativeBase):
    """Base class for application tables."""

    pass


class LedgerBase(DeclarativeBase):
    """Base class for the migrations ledger table."""

    pass


class MigrationModel(LedgerBase):
    """A migration step that has been applied to the store.

    Rows are written and removed only by the Migrator, each inside the
    same transaction as the step's action.
    """

    __tablename__ = "migrations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    executed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class UserModel(Base):
    """An account of the corporate site API."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ROLE_USER, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, index=True
    )
