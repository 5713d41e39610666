"""Custom exceptions for corpsite."""


class CorpsiteError(Exception):
    """Base exception for all corpsite errors."""

    pass


class ConfigError(CorpsiteError):
    """Configuration is missing or invalid."""

    pass


class DatabaseError(CorpsiteError):
    """Database operation failed."""

    pass


class MigrationError(CorpsiteError):
    """Migration operation failed."""

    pass


class InitializationError(MigrationError):
    """Migrations ledger table cannot be created or read."""

    pass


class VersionedMigrationError(MigrationError):
    """Migration failure tied to a specific step version."""

    def __init__(self, version: str, message: str):
        """Initialize exception with the offending version.

        Args:
            version: Version string of the step that failed.
            message: Human-readable failure description.
        """
        self.version = version
        super().__init__(f"{message}: {version}")


class ExecutionError(VersionedMigrationError):
    """A step's forward or backward action failed."""

    def __init__(self, version: str, direction: str = "up"):
        self.direction = direction
        action = "migration" if direction == "up" else "rollback"
        super().__init__(version, f"Failed to execute {action} for version")


class LedgerWriteError(VersionedMigrationError):
    """Inserting or deleting a ledger row failed.

    ``operation`` is one of ``record``, ``remove`` or ``transaction``; the
    last covers failures opening or committing the step's transaction.
    """

    def __init__(self, version: str, operation: str = "record"):
        self.operation = operation
        if operation == "transaction":
            message = "Transaction failed while writing ledger row for version"
        else:
            message = f"Failed to {operation} ledger row for version"
        super().__init__(version, message)


class NotFoundError(MigrationError):
    """Requested migration entity does not exist."""

    pass


class OrphanedVersionError(NotFoundError):
    """Ledger row has no matching registered step."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Migration step not found for version: {version}")
