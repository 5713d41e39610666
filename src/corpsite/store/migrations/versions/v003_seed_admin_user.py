"""Seed the initial admin account.

Skips the insert when an account with the admin email already exists, so
the step can run again after a ledger reset.
"""

from datetime import datetime

from sqlalchemy import delete, func, insert, select

from corpsite.store.models import ROLE_ADMIN, UserModel
from corpsite.utils.hashing import hash_password

VERSION = "003_seed_admin_user"
DESCRIPTION = "Seed initial admin user"

ADMIN_EMAIL = "admin@company.com"
ADMIN_PASSWORD = "Admin123#"

users = UserModel.__table__


def up(conn):
    count = conn.execute(
        select(func.count()).select_from(users).where(users.c.email == ADMIN_EMAIL)
    ).scalar_one()
    if count > 0:
        return

    now = datetime.now()
    conn.execute(
        insert(users).values(
            email=ADMIN_EMAIL,
            password=hash_password(ADMIN_PASSWORD),
            first_name="John",
            last_name="Doe",
            role=ROLE_ADMIN,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
    )


def down(conn):
    conn.execute(delete(users).where(users.c.email == ADMIN_EMAIL))
