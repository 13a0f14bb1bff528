"""Navigation shell: the top bar and the informational overlay."""

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from podshelf import __version__
from podshelf.ui.theme import get_theme

ABOUT_TEXT = """\
podshelf lists podcast shows from the public podcast API.

Sort and filter the list, open a show to see its seasons and episodes,
play episodes in your audio player and keep favorites for this session.
Favorites are not saved when you leave.

Type 'help' for the list of commands, 'hide' to close this panel."""


class NavigationShell:
    """Top bar with a togglable about overlay."""

    def __init__(self) -> None:
        self.overlay_visible = False

    def show_overlay(self) -> None:
        self.overlay_visible = True

    def hide_overlay(self) -> None:
        self.overlay_visible = False

    def render(self) -> RenderableType:
        theme = get_theme()
        bar = Text(f" ≋ podshelf v{__version__} ", style=theme.brand)
        hint = Text("  about: info  ·  help: commands", style=theme.muted)
        top = Text.assemble(bar, hint)

        if not self.overlay_visible:
            return top

        about = Panel(
            Text(ABOUT_TEXT),
            title="[bold]About[/bold]",
            border_style=theme.border,
            expand=False,
        )
        return Group(top, about)
