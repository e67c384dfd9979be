# Area: Shared
"""
Shared utilities used across the package.

This package contains:
- Logging configuration and formatters
"""

from .logging_config import setup_logging, log_game_error
from .logging_formatters import JSONFormatter, TerminalFormatter

__all__ = [
    "setup_logging",
    "log_game_error",
    "JSONFormatter",
    "TerminalFormatter",
]
