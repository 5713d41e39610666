"""Add lookup indexes to the users table.

Creates:
- idx_users_email
- idx_users_is_active
- idx_users_is_active_role (composite, active users by role)
"""

from sqlalchemy import text

VERSION = "002_add_user_indexes"
DESCRIPTION = "Add indexes to users table"

INDEXES = {
    "idx_users_email": "users(email)",
    "idx_users_is_active": "users(is_active)",
    "idx_users_is_active_role": "users(is_active, role)",
}

# idx_users_role may exist on databases created before it was folded into
# the table definition
DROPPED_INDEXES = [
    "idx_users_email",
    "idx_users_role",
    "idx_users_is_active",
    "idx_users_is_active_role",
]


def up(conn):
    for name, target in INDEXES.items():
        conn.execute(text(f"CREATE INDEX IF NOT EXISTS {name} ON {target}"))


def down(conn):
    for name in DROPPED_INDEXES:
        conn.execute(text(f"DROP INDEX IF EXISTS {name}"))
