"""Create the users table."""

from corpsite.store.models import UserModel

VERSION = "001_create_users_table"
DESCRIPTION = "Create users table"


def up(conn):
    UserModel.__table__.create(conn, checkfirst=True)


def down(conn):
    UserModel.__table__.drop(conn, checkfirst=True)
