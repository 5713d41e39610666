"""CLI entry point for corpsite migrations."""

import argparse
import sys
from typing import NoReturn, Optional, Sequence

from loguru import logger

from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="corpsite-migrate",
        description="Apply, roll back and inspect database migrations",
    )
    parser.add_argument("-v", "--version", action="version", version="%(prog)s 1.0.0")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=False)

    subparsers.add_parser("up", help="Run all pending migrations")
    subparsers.add_parser("down", help="Roll back the last migration")
    subparsers.add_parser("status", help="Show migration status")

    reset_parser = subparsers.add_parser(
        "reset", help="Drop the migrations ledger and re-run every migration"
    )
    reset_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt",
    )

    return parser


def configure_logging(level: str) -> None:
    """Send log records to stderr at the given level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


HANDLERS = {
    "up": commands.handle_up,
    "down": commands.handle_down,
    "status": commands.handle_status,
    "reset": commands.handle_reset,
}


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
        configure_logging(args.log_level or config.logging.level)

        handler = HANDLERS.get(args.command)
        if handler is None:
            parser.print_help()
            sys.exit(1)

        handler(args, config)
        logger.info("Operation completed successfully.")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Migration {args.command or ''} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
