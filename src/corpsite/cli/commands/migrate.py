"""Migration commands for the corpsite CLI."""

import sys
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from loguru import logger

from ...core.config import Config
from ...core.types import MigrationStatus
from ...store.database import Database
from ...store.migrations import Migrator, build_migrator

DESCRIPTION_WIDTH = 24
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@contextmanager
def _open_migrator(config: Config) -> Iterator[Migrator]:
    with Database.from_config(config.database) as database:
        yield build_migrator(database)


def handle_up(args, config: Config) -> None:
    """Handle up command: apply all pending migrations."""
    with _open_migrator(config) as migrator:
        migrator.up()


def handle_down(args, config: Config) -> None:
    """Handle down command: roll back the most recent migration."""
    with _open_migrator(config) as migrator:
        migrator.down()


def handle_status(args, config: Config) -> None:
    """Handle status command: print every registered step and its state."""
    with _open_migrator(config) as migrator:
        status = migrator.status()
    print(format_status(status))


def handle_reset(args, config: Config) -> None:
    """Handle reset command.

    Asks for confirmation unless --yes was given. Any answer other than
    ``y`` exits with status 0 and leaves the store untouched.
    """
    if not getattr(args, "yes", False) and not _confirm_reset():
        logger.info("Reset cancelled.")
        sys.exit(0)

    with _open_migrator(config) as migrator:
        migrator.reset()


def _confirm_reset() -> bool:
    logger.warning(
        "This will drop the migrations ledger and re-run every migration."
    )
    try:
        response = input("Are you sure? (y/N) ")
    except EOFError:
        return False
    return response.strip().lower() == "y"


def truncate(s: str, max_len: int) -> str:
    """Shorten s to max_len characters, marking the cut with '...'."""
    if len(s) <= max_len:
        return s
    return s[: max_len - 3] + "..."


def _format_time(value: Optional[datetime]) -> str:
    return value.strftime(TIMESTAMP_FORMAT) if value else ""


def format_status(status: MigrationStatus) -> str:
    """Render migration status as a box table."""
    version_width = max([len("Version")] + [len(s.version) for s in status.steps])
    state_width = len("Executed")

    def row(version: str, description: str, state: str) -> str:
        return (
            f"║  {version:<{version_width}}  │  "
            f"{description:<{DESCRIPTION_WIDTH}}  │  {state:<{state_width}}  ║"
        )

    rule = "═" * (version_width + DESCRIPTION_WIDTH + state_width + 14)
    lines = [
        "Migration Status:",
        f"╔{rule}╗",
        row("Version", "Description", "Status"),
        f"╠{rule}╣",
    ]

    for step in status.steps:
        lines.append(
            row(step.version, truncate(step.description, DESCRIPTION_WIDTH), step.state.value)
        )
        if step.is_executed:
            lines.append(row("", _format_time(step.executed_at), ""))
        lines.append(f"╠{rule}╣")

    lines[-1] = f"╚{rule}╝"

    if not status.steps:
        lines.append("No migrations registered.")

    if status.orphaned:
        lines.append("")
        lines.append("Orphaned ledger rows (no registered step):")
        for record in status.orphaned:
            lines.append(
                f"  {record.version}  {record.description}  "
                f"{_format_time(record.executed_at)}"
            )

    summary = f"{len(status.executed)} executed, {len(status.pending)} pending"
    if status.orphaned:
        summary += f", {len(status.orphaned)} orphaned"
    lines.append("")
    lines.append(summary)
    return "\n".join(lines)
