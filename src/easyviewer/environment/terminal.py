"""Terminal color utilities for render diagnostics.

ANSI color codes with automatic TTY detection and NO_COLOR support.
Used by `ViewerError.format_compact()` and the pipeline's log lines.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
}

ColorName = Literal[
    "reset", "bold", "dim",
    "red", "green", "yellow", "cyan",
    "bright_red", "bright_green",
]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")

PRODUCT_NAME = "easy-viewer"


def _should_use_colors() -> bool:
    """Check if terminal supports colors and user allows them.

    Respects:
        - FORCE_COLOR environment variable (overrides NO_COLOR)
        - NO_COLOR environment variable (https://no-color.org/)
        - sys.stderr.isatty() for TTY detection (logging writes to stderr)
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Apply ANSI color codes to text.

    Example:
        >>> colorize("Error", "red", "bold")
        '\033[31m\033[1mError\033[0m'  # if colors supported
        'Error'  # if colors not supported
    """
    if not _USE_COLORS or not colors:
        return text

    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI color codes from text."""
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def error_line(text: str) -> str:
    return colorize(text, "bright_red")


def hint(text: str) -> str:
    return colorize(text, "green")


def suggestion(text: str) -> str:
    return colorize(text, "bright_green", "bold")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def banner(level: Literal["error", "warning"]) -> str:
    """Log line prefix, e.g. ``▲ easy-viewer: Error:``."""
    label = colorize("Error:", "red") if level == "error" else colorize("Warning:", "yellow")
    return f"{colorize(f'▲ {PRODUCT_NAME}:', 'cyan')} {label}"


def format_error_header(code: str | None, message: str) -> str:
    """Format error header with optional code.

    Example:
        >>> format_error_header("E-RUN-002", "'x' is not defined")
        "E-RUN-002: 'x' is not defined"  # colors stripped
    """
    if code:
        return f"{error_code(code)}: {message}"
    return message
