"""Themed console output and logging setup built on rich."""

import logging
from enum import IntEnum
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

INDENT = "  "

THEME = Theme(
    {
        "field": "bold cyan",
        "count": "bold magenta",
        "info": "cyan",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "unchanged": "dim",
        "updated": "bold blue",
        "darktext.dim": "grey50",
        "file": "underline",
    }
)

_LEVEL_LABELS = {
    "info": "INFO",
    "success": "SUCCESS",
    "warning": "WARNING",
    "error": "ERROR",
    "unchanged": "UNCHANGED",
    "updated": "UPDATED",
}

_console: Optional[Console] = None


class Verbosity(IntEnum):
    BRIEF = 0
    VERBOSE = 1
    DEBUG = 2


def get_console() -> Console:
    """Return the shared themed console."""
    global _console
    if _console is None:
        _console = Console(theme=THEME, highlight=False)
    return _console


def configure_logging(verbosity: Verbosity = Verbosity.BRIEF) -> None:
    """Route library loggers through a RichHandler on the shared console."""
    level = {
        Verbosity.BRIEF: logging.WARNING,
        Verbosity.VERBOSE: logging.INFO,
        Verbosity.DEBUG: logging.DEBUG,
    }[verbosity]
    handler = RichHandler(
        console=get_console(), show_path=False, markup=False, rich_tracebacks=True
    )
    logger = logging.getLogger("typetokens")
    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False


def fmt_count(value) -> str:
    return f"[count]{value}[/count]"


def fmt_file(path, filename_only: bool = True) -> str:
    shown = Path(path).name if filename_only else str(path)
    return f"[file]{escape(shown)}[/file]"


def emit(message: str = "", console: Optional[Console] = None) -> None:
    (console or get_console()).print(message)


class StatusIndicator:
    """One status line with optional indented detail items.

    Example:
        StatusIndicator("success").add_message("Wrote tokens").add_item(
            "css/_typography.css", indent_level=1
        ).emit(console)
    """

    def __init__(self, level: str, dry_run: bool = False):
        if level not in _LEVEL_LABELS:
            raise ValueError(f"Unknown status level: {level}")
        self.level = level
        self.dry_run = dry_run
        self._parts: List[str] = []
        self._items: List[str] = []
        self._explanation: Optional[str] = None

    def add_message(self, message: str) -> "StatusIndicator":
        self._parts.append(message)
        return self

    def add_file(self, path, filename_only: bool = True) -> "StatusIndicator":
        self._parts.append(fmt_file(path, filename_only=filename_only))
        return self

    def add_item(self, text: str, indent_level: int = 0) -> "StatusIndicator":
        self._items.append(f"{INDENT * (indent_level + 1)}{text}")
        return self

    def with_explanation(self, text: str) -> "StatusIndicator":
        self._explanation = escape(text)
        return self

    def build(self) -> str:
        label = _LEVEL_LABELS[self.level]
        if self.dry_run:
            label = f"DRY-RUN {label}"
        head = f"[{self.level}]{label}[/{self.level}] " + " ".join(self._parts)
        lines = [head.rstrip()]
        if self._explanation:
            lines.append(f"{INDENT}[darktext.dim]{self._explanation}[/darktext.dim]")
        lines.extend(self._items)
        return "\n".join(lines)

    def emit(self, console: Optional[Console] = None) -> None:
        emit(self.build(), console=console)
