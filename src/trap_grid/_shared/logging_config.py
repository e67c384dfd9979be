# Area: Shared
"""
trap_grid._shared.logging_config — Structured logging setup
===========================================================

Configures dual logging: terminal (colored) + file (JSON).
Provides structured error logging for session errors.
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING, Optional, Union

from .logging_formatters import JSONFormatter, TerminalFormatter

if TYPE_CHECKING:
    from ..errors import TrapGridError

# Package logger
logger = logging.getLogger("trap_grid")


def setup_logging(
    log_file_path: Optional[str] = "trap_grid.log",
    level: Union[int, str] = logging.INFO,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str or None
        Path to the JSON log file. None disables file logging.
    level : int or str
        Logging level, e.g. logging.INFO or "DEBUG". Defaults to INFO.
    stream : file-like or None
        Terminal stream. Defaults to stdout.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    pkg_logger = logging.getLogger("trap_grid")
    pkg_logger.setLevel(level)

    # Remove existing handlers
    pkg_logger.handlers.clear()

    # Terminal handler with colors
    terminal_handler = logging.StreamHandler(stream or sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(terminal_handler)

    # File handler with JSON
    if log_file_path:
        try:
            log_path = Path(log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            pkg_logger.addHandler(file_handler)
        except OSError as e:
            pkg_logger.warning(f"Could not create log file: {e}")

    # Prevent propagation to root logger
    pkg_logger.propagate = False


def log_game_error(error: "TrapGridError") -> None:
    """
    Log a session error in the structured format.

    Parameters
    ----------
    error : TrapGridError
        The error to log.
    """
    # Print to terminal (bypassing logger for exact formatting)
    print(error.format_error_log(), file=sys.stderr)

    logger.error(
        f"Session error: {error.kind}: {error.message}",
        extra={
            "session_id": error.session_id,
            "error_kind": error.kind,
            "field": error.field,
        },
    )
