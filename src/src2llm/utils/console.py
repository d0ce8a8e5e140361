"""Themed console output for the command line.

Status lines, separators and the processing report go through Rich
unless plain output is requested (or the stream is not a terminal and
nothing asks for color).
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.text import Text
from rich.theme import Theme


class StatusType(Enum):
    """Standard status types with associated symbols."""
    SUCCESS = ("[✓]", "success", "green")
    ERROR = ("[x]", "error", "red")
    WARNING = ("[!]", "warning", "yellow")
    INFO = ("[i]", "info", "cyan")
    RUNNING = ("[~]", "running", "blue")


@dataclass
class ThemeColors:
    """Color definitions for a theme."""
    info: str
    warning: str
    error: str
    success: str
    highlight: str
    path: str
    number: str
    dim: str
    heading: str


THEMES = {
    'manhattan': ThemeColors(
        info='cyan',
        warning='yellow',
        error='red',
        success='green',
        highlight='bright_cyan',
        path='white',
        number='bright_blue',
        dim='bright_black',
        heading='bright_yellow'
    ),
    'green': ThemeColors(
        info='green',
        warning='yellow',
        error='red',
        success='bright_green',
        highlight='bold green',
        path='bright_green',
        number='green',
        dim='green',
        heading='bright_cyan'
    ),
    'sunset': ThemeColors(
        info='orange3',
        warning='yellow',
        error='red3',
        success='green',
        highlight='bold orange1',
        path='wheat1',
        number='orange1',
        dim='grey50',
        heading='dark_orange3'
    ),
}


class ConsoleManager:
    """Console with theme support and a plain-text mode."""

    def __init__(self, theme: str = "manhattan", file: Optional[Any] = None,
                 force_plain: bool = False):
        """Initialize console.

        Args:
            theme: Theme name from THEMES
            file: Output file (defaults to sys.stdout)
            force_plain: Write plain text without styling
        """
        self.theme_name = theme
        self.theme_colors = THEMES.get(theme, THEMES['manhattan'])
        self.file = file or sys.stdout
        self.use_rich = not force_plain and self._should_use_rich_terminal()

        if self.use_rich:
            self.console = Console(
                theme=self._create_rich_theme(),
                file=self.file,
                force_terminal=True,
                highlight=False
            )
        else:
            self.console = None

    def _should_use_rich_terminal(self) -> bool:
        """Terminal detection honouring NO_COLOR and FORCE_COLOR."""
        if os.environ.get('NO_COLOR'):
            return False
        if os.environ.get('FORCE_COLOR'):
            return True
        return hasattr(self.file, 'isatty') and self.file.isatty()

    def _create_rich_theme(self) -> Theme:
        """Create Rich theme from our theme colors."""
        colors = self.theme_colors
        return Theme({
            'info': colors.info,
            'warning': colors.warning,
            'error': colors.error,
            'success': colors.success,
            'highlight': colors.highlight,
            'path': colors.path,
            'number': colors.number,
            'dim': colors.dim,
            'heading': colors.heading,
        })

    def print(self, *args, **kwargs):
        """Print with optional Rich formatting."""
        if self.use_rich:
            self.console.print(*args, **kwargs)
        else:
            plain_kwargs = {k: v for k, v in kwargs.items()
                            if k not in ['style', 'justify', 'overflow', 'crop',
                                         'soft_wrap', 'markup', 'highlight']}
            plain_kwargs['file'] = self.file
            print(*(Text.from_markup(a).plain if isinstance(a, str) else a for a in args),
                  **plain_kwargs)

    def print_status(self, status: StatusType, message: str):
        """Print a status line with icon."""
        icon, _, color = status.value

        if self.use_rich:
            status_text = Text()
            status_text.append(f"{icon} ", style=color)
            status_text.append(message)
            self.console.print(status_text)
        else:
            print(f"{icon} {message}", file=self.file)

    def print_error(self, message: str):
        self.print_status(StatusType.ERROR, message)

    def print_success(self, message: str):
        self.print_status(StatusType.SUCCESS, message)

    def print_info(self, message: str):
        self.print_status(StatusType.INFO, message)

    def print_warning(self, message: str):
        self.print_status(StatusType.WARNING, message)

    def print_field(self, heading: str, value: str):
        """Print a ``heading value`` line of the report."""
        if self.use_rich:
            text = Text()
            text.append(heading, style=self.theme_colors.heading)
            text.append(f" {value}")
            self.console.print(text)
        else:
            print(f"{heading} {value}", file=self.file)

    def print_separator(self, char: str = "─", width: int = 60):
        """Print a separator line."""
        if self.use_rich:
            self.console.print(char * width, style="dim")
        else:
            print(char * width, file=self.file)

    def print_exception(self):
        """Print the current exception traceback."""
        if self.use_rich:
            self.console.print_exception()
        else:
            import traceback
            traceback.print_exc(file=self.file)
