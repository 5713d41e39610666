"""Type definitions for corpsite."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class StepState(Enum):
    """Whether a registered step has been applied."""

    PENDING = "Pending"
    EXECUTED = "Executed"


@dataclass(frozen=True)
class MigrationRecord:
    """A row of the migrations ledger."""

    id: int
    version: str
    description: str
    executed_at: datetime


@dataclass(frozen=True)
class StepStatus:
    """Status of one registered step against the ledger."""

    version: str
    description: str
    state: StepState
    executed_at: Optional[datetime] = None

    @property
    def is_executed(self) -> bool:
        return self.state is StepState.EXECUTED


@dataclass
class MigrationStatus:
    """Ledger compared with the registered steps.

    Attributes:
        steps: One entry per registered step, in registration order.
        orphaned: Ledger rows whose version matches no registered step.
    """

    steps: list[StepStatus] = field(default_factory=list)
    orphaned: list[MigrationRecord] = field(default_factory=list)

    @property
    def pending(self) -> list[StepStatus]:
        return [s for s in self.steps if s.state is StepState.PENDING]

    @property
    def executed(self) -> list[StepStatus]:
        return [s for s in self.steps if s.state is StepState.EXECUTED]

    @property
    def is_up_to_date(self) -> bool:
        return not self.pending
