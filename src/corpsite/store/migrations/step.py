"""Step definitions for the migration runner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from types import ModuleType

    from sqlalchemy.engine import Connection

StepAction = Callable[["Connection"], None]


@dataclass(frozen=True)
class MigrationStep:
    """A versioned, reversible schema or data change.

    Both actions receive the connection of the transaction they run in and
    must not use any other handle to the store.
    """

    version: str
    description: str
    up: StepAction
    down: StepAction

    @classmethod
    def from_module(cls, module: ModuleType) -> MigrationStep:
        """Build a step from a version module.

        The module must define VERSION, up(conn) and down(conn).
        DESCRIPTION falls back to the module name.

        Raises:
            ValueError: If a required attribute is missing.
        """
        missing = [
            name for name in ("VERSION", "up", "down") if not hasattr(module, name)
        ]
        if missing:
            raise ValueError(
                f"Invalid migration module {module.__name__}: "
                f"missing {', '.join(missing)}"
            )
        return cls(
            version=module.VERSION,
            description=getattr(module, "DESCRIPTION", module.__name__),
            up=module.up,
            down=module.down,
        )

    def __repr__(self) -> str:
        return f"MigrationStep({self.version!r}, {self.description!r})"
