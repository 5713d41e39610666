"""Migration version modules.

Each module in this package represents one migration step and must define:
    VERSION: str - Unique version identifier
    DESCRIPTION: str - Human-readable description
    up(conn): Apply the change on the transaction's connection
    down(conn): Undo what up() did

Modules are not discovered automatically. Add new ones to
``corpsite.store.migrations.registry.VERSION_MODULES`` in apply order.

Forward actions must be safe to run again on a store that already reflects
them (``reset`` re-runs every step): create with IF NOT EXISTS or
checkfirst, check before inserting seed rows.
"""
