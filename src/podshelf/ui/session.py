"""Interactive browse session.

Reads one command per line, applies it to the catalog controller and
re-renders the screen from the resulting state.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from podshelf.catalog.controller import CatalogController
from podshelf.catalog.models import GENRES, SortOrder, SortType
from podshelf.shell import NavigationShell
from podshelf.ui.render import render_catalog, render_overlay
from podshelf.ui.theme import get_theme
from podshelf.utils.errors import PodshelfError, ValidationError

logger = logging.getLogger(__name__)

LEAVE_WHILE_PLAYING = "Audio is currently playing. Are you sure you want to leave?"


class BrowseCommand:
    """Commands understood by the browse prompt."""

    HELP = "help"
    LIST = "list"
    SORT = "sort"
    ORDER = "order"
    FILTER = "filter"
    GENRE = "genre"
    OPEN = "open"
    CLOSE = "close"
    SEASON = "season"
    FAV = "fav"
    UNFAV = "unfav"
    FAVS = "favs"
    PLAY = "play"
    STOP = "stop"
    ABOUT = "about"
    HIDE = "hide"
    QUIT = "quit"

    QUIT_ALIASES = {QUIT, "exit", "q"}


HELP_ROWS = [
    ("sort title|date", "Sort shows by title or last update"),
    ("order asc|desc", "Ascending or descending order"),
    ("filter [TEXT]", "Show titles containing TEXT (empty clears)"),
    ("genre [CODE]", "Only shows in genre CODE (empty clears)"),
    ("open N|ID", "Open show at position N, or by id"),
    ("close", "Close the show overlay"),
    ("season TITLE", "Expand or collapse a season of the open show"),
    ("fav SEASON N", "Toggle episode N of SEASON as favorite"),
    ("unfav N", "Remove favorite N"),
    ("favs az|za", "Sort favorites by title"),
    ("play SEASON N", "Play episode N of SEASON"),
    ("stop", "Stop all playback"),
    ("list", "Redraw the catalog"),
    ("about / hide", "Show or hide the about panel"),
    ("quit", "Leave podshelf"),
]


def parse_command(line: str) -> tuple[str, list[str]]:
    """Split a prompt line into a lowercase command and its arguments.

    Quotes group words, so ``season "Season 1"`` has one argument.

    Raises:
        ValidationError: On unbalanced quotes
    """
    try:
        parts = shlex.split(line)
    except ValueError as e:
        raise ValidationError(f"Could not parse command: {e}") from e
    if not parts:
        return "", []
    return parts[0].lower(), parts[1:]


def parse_int(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError(f"{what} must be a number, got '{value}'") from e


class BrowseSession:
    """Drives one interactive session over a mounted controller."""

    def __init__(
        self,
        controller: CatalogController,
        console: Console | None = None,
        shell: NavigationShell | None = None,
        read_line: Callable[[], str] | None = None,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        self.controller = controller
        self.console = console or Console()
        self.shell = shell or NavigationShell()
        self.read_line = read_line or (lambda: self.console.input("[bold]podshelf>[/bold] "))
        self.confirm = confirm or (lambda message: Confirm.ask(message, default=False))

    def render(self) -> None:
        """Redraw the whole screen from the current state."""
        self.console.print(self.shell.render())
        self.console.print(render_catalog(self.controller.state))
        overlay = render_overlay(self.controller.state)
        if overlay is not None:
            self.console.print(overlay)

    def render_help(self) -> None:
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Command", style="cyan")
        table.add_column("Description")
        for command, description in HELP_ROWS:
            table.add_row(command, description)
        self.console.print(table)

    def can_leave(self) -> bool:
        """Ask before leaving while audio plays."""
        self.controller.refresh_playback()
        if not self.controller.state.is_audio_playing:
            return True
        try:
            return self.confirm(LEAVE_WHILE_PLAYING)
        except (EOFError, KeyboardInterrupt):
            # Nobody left to answer
            return True

    async def run(self) -> None:
        """Prompt for commands until the user leaves."""
        await self.controller.mount()
        self.render()

        while True:
            try:
                line = self.read_line()
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                if self.can_leave():
                    break
                continue

            try:
                keep_going = await self.handle(line)
            except PodshelfError as e:
                theme = get_theme()
                self.console.print(theme.error_text(str(e)))
                suggestion = getattr(e, "suggestion", None)
                if suggestion:
                    self.console.print(theme.muted_text(f"  {suggestion}"))
                continue

            if not keep_going:
                break

    async def handle(self, line: str) -> bool:
        """Apply one command line.

        Returns:
            False when the session should end
        """
        command, args = parse_command(line)
        controller = self.controller
        controller.refresh_playback()

        if not command:
            return True

        if command in BrowseCommand.QUIT_ALIASES:
            return not self.can_leave()

        if command == BrowseCommand.HELP:
            self.render_help()
            return True

        if command == BrowseCommand.SORT:
            controller.set_sort(sort_type=self._choice(args, SortType, "sort"))
        elif command == BrowseCommand.ORDER:
            controller.set_sort(sort_order=self._choice(args, SortOrder, "order"))
        elif command == BrowseCommand.FILTER:
            controller.set_filter(" ".join(args))
        elif command == BrowseCommand.GENRE:
            controller.select_genre(self._genre(args))
        elif command == BrowseCommand.OPEN:
            await self._open(args)
        elif command == BrowseCommand.CLOSE:
            controller.close_overlay()
        elif command == BrowseCommand.SEASON:
            self._require_args(args, 1, "season TITLE")
            controller.toggle_season_visibility(" ".join(args))
        elif command == BrowseCommand.FAV:
            season_title, number = self._season_and_number(args, "fav SEASON N")
            episode = controller.find_episode(season_title, number)
            controller.toggle_favorite(season_title, episode)
        elif command == BrowseCommand.UNFAV:
            self._require_args(args, 1, "unfav N")
            controller.remove_favorite(parse_int(args[0], "Favorite number"))
        elif command == BrowseCommand.FAVS:
            direction = args[0].lower() if args else ""
            if direction == "az":
                controller.sort_favorites_by_title_az()
            elif direction == "za":
                controller.sort_favorites_by_title_za()
            else:
                raise ValidationError("Usage: favs az|za")
        elif command == BrowseCommand.PLAY:
            season_title, number = self._season_and_number(args, "play SEASON N")
            episode = controller.find_episode(season_title, number)
            controller.play(season_title, episode)
        elif command == BrowseCommand.STOP:
            controller.stop_all()
        elif command == BrowseCommand.ABOUT:
            self.shell.show_overlay()
        elif command == BrowseCommand.HIDE:
            self.shell.hide_overlay()
        elif command == BrowseCommand.LIST:
            pass
        else:
            raise ValidationError(f"Unknown command: {command}", suggestion="Type 'help' for commands")

        self.render()
        return True

    async def _open(self, args: list[str]) -> None:
        self._require_args(args, 1, "open N|ID")
        target = args[0]
        shows = self.controller.visible_shows()

        # Small numbers are positions in the visible list, anything else an id
        if target.isdigit() and 1 <= int(target) <= len(shows):
            show_id = shows[int(target) - 1].id
        else:
            show_id = target

        with self.console.status("Loading show..."):
            opened = await self.controller.open_overlay(show_id)
        if not opened:
            logger.debug(f"Overlay for show {show_id} did not open")

    @staticmethod
    def _require_args(args: list[str], count: int, usage: str) -> None:
        if len(args) < count:
            raise ValidationError(f"Usage: {usage}")

    def _season_and_number(self, args: list[str], usage: str) -> tuple[str, int]:
        self._require_args(args, 2, usage)
        return " ".join(args[:-1]), parse_int(args[-1], "Episode number")

    @staticmethod
    def _choice(args: list[str], enum: type[SortType] | type[SortOrder], name: str):
        values = [member.value for member in enum]
        if not args or args[0].lower() not in values:
            raise ValidationError(f"Usage: {name} {'|'.join(values)}")
        return enum(args[0].lower())

    @staticmethod
    def _genre(args: list[str]) -> int | None:
        if not args:
            return None
        code = parse_int(args[0], "Genre")
        if code not in GENRES:
            raise ValidationError(
                f"Unknown genre: {code}",
                suggestion=", ".join(f"{k}={v}" for k, v in GENRES.items()),
            )
        return code
