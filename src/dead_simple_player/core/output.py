"""
Output for Dead Simple Player.

Log records go to a rotating loguru file sink. Messages meant for the person
at the terminal, and the CLI's tables, go through one shared Rich console.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console, RenderableType

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"

LEVEL_STYLES = {
    "debug": "cyan",
    "info": None,
    "warning": "yellow",
    "error": "red",
}

_console: Optional[Console] = None


def get_console() -> Console:
    """The console shared by log() and the CLI tables (created on first use)."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def show(renderable: RenderableType) -> None:
    """Print a Rich renderable (a table, usually) for the user."""
    get_console().print(renderable)


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink and an optional stderr sink.

    Args:
        log_file: Path to log file
        level: Minimum level for logging (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Size at which the log file is rotated
        backup_count: Number of rotated files to keep
        console_output: Whether to also write log records to stderr
    """
    # Remove default handler
    logger.remove()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format=LOG_FORMAT,
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to the log AND prints for the user.

    Use this instead of print() for user-facing messages that should also be logged.

    Args:
        message: User-facing message
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    # Paths may contain [brackets]; print them literally
    get_console().print(message, style=LEVEL_STYLES.get(level), markup=False)
