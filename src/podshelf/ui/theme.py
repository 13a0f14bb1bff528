"""Color themes for podshelf output.

Usage:
    from podshelf.ui import get_theme

    theme = get_theme()
    console.print(theme.success_text("Loaded 42 shows"))
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Literal


class ThemeMode(str, Enum):
    """Available theme modes."""

    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


@dataclass(frozen=True)
class Theme:
    """Color theme for terminal output.

    All colors are rich-compatible color names.
    """

    mode: str

    # Status
    success: str
    error: str
    warning: str
    muted: str

    # Catalog data
    title: str  # Show and episode titles
    genre: str
    date: str
    count: str  # Season and episode counts
    favorite: str  # Heart marker
    playing: str  # Now-playing marker

    # Chrome
    brand: str  # Top bar
    table_header: str
    border: str

    def success_text(self, text: str) -> str:
        """Format text with success color and checkmark."""
        return f"[{self.success}]✓[/{self.success}] {text}"

    def error_text(self, text: str) -> str:
        """Format text with error color and X mark."""
        return f"[{self.error}]✗[/{self.error}] {text}"

    def warning_text(self, text: str) -> str:
        """Format text with warning color and warning symbol."""
        return f"[{self.warning}]⚠[/{self.warning}] {text}"

    def muted_text(self, text: str) -> str:
        """Format text as muted/dim."""
        return f"[{self.muted}]{text}[/{self.muted}]"


DARK_THEME = Theme(
    mode="dark",
    success="green",
    error="red",
    warning="yellow",
    muted="dim",
    title="bold cyan",
    genre="magenta",
    date="green",
    count="white",
    favorite="red",
    playing="bright_green",
    brand="bold white on dark_blue",
    table_header="bold cyan",
    border="steel_blue1",
)

LIGHT_THEME = Theme(
    mode="light",
    success="green",
    error="red",
    warning="dark_orange",  # Better contrast on light bg
    muted="grey50",
    title="bold dark_cyan",
    genre="dark_magenta",
    date="dark_green",
    count="black",
    favorite="red3",
    playing="dark_green",
    brand="bold white on blue",
    table_header="bold dark_cyan",
    border="blue",
)


def detect_terminal_theme() -> Literal["light", "dark"]:
    """Guess whether the terminal has a light or dark background.

    Defaults to dark.
    """
    colorfgbg = os.environ.get("COLORFGBG", "")
    if colorfgbg:
        # "foreground;background", where 15 is a white background
        parts = colorfgbg.split(";")
        if len(parts) >= 2:
            try:
                return "light" if int(parts[-1]) >= 7 else "dark"
            except ValueError:
                pass

    if os.environ.get("TERM_PROGRAM", "").lower() == "apple_terminal":
        return "light"

    if os.environ.get("PODSHELF_THEME", "").lower() == "light":
        return "light"

    return "dark"


_current_theme: Theme | None = None


def set_theme(mode: ThemeMode | str) -> Theme:
    """Set and cache the current theme.

    Args:
        mode: Theme mode ('light', 'dark', or 'auto')

    Returns:
        The active Theme instance
    """
    global _current_theme

    if isinstance(mode, str):
        mode = ThemeMode(mode.lower())

    if mode == ThemeMode.AUTO:
        _current_theme = LIGHT_THEME if detect_terminal_theme() == "light" else DARK_THEME
    elif mode == ThemeMode.LIGHT:
        _current_theme = LIGHT_THEME
    else:
        _current_theme = DARK_THEME

    return _current_theme


def get_theme() -> Theme:
    """Get the current theme, auto-detecting it on first use."""
    if _current_theme is None:
        return set_theme(ThemeMode.AUTO)
    return _current_theme


def reset_theme() -> None:
    """Forget the cached theme."""
    global _current_theme
    _current_theme = None
