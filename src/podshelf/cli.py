"""CLI entry point for podshelf."""

import asyncio
import json
import locale
import logging
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from podshelf.catalog.client import PodcastAPIClient
from podshelf.catalog.controller import CatalogController
from podshelf.catalog.models import GENRES, Show, ShowDetail, SortOrder, SortType
from podshelf.catalog.playback import AudioPlayer
from podshelf.catalog.state import filter_shows, sort_shows
from podshelf.config.logging import setup_logging
from podshelf.config.manager import ConfigManager, list_keys
from podshelf.config.schema import GlobalConfig
from podshelf.ui.render import render_detail, render_show_grid
from podshelf.ui.session import BrowseSession
from podshelf.ui.theme import set_theme
from podshelf.utils.errors import PodshelfError, ValidationError
from podshelf.utils.retry import RetryConfig

app = typer.Typer(
    name="podshelf",
    help="Browse a podcast catalog from the terminal",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)


def build_client(config: GlobalConfig) -> PodcastAPIClient:
    """Create an API client from the configuration."""
    return PodcastAPIClient(
        list_url=config.api.list_url,
        detail_url=config.api.detail_url,
        timeout=config.api.timeout_seconds,
        retry_config=RetryConfig(max_attempts=config.api.max_attempts),
    )


def _fail(error: PodshelfError) -> NoReturn:
    console.print(f"[red]✗[/red] {error}")
    suggestion = getattr(error, "suggestion", None)
    if suggestion:
        console.print(f"[dim]  {suggestion}[/dim]")
    sys.exit(1)


def _load_config() -> GlobalConfig:
    try:
        return ConfigManager().load_config()
    except PodshelfError as e:
        _fail(e)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """podshelf - browse podcast shows, seasons and episodes."""
    try:
        config = ConfigManager().load_config()
    except PodshelfError as e:
        console.print(f"[yellow]⚠[/yellow] {e}")
        console.print("[dim]  Using default settings[/dim]")
        config = GlobalConfig()
    setup_logging(verbose=verbose, log_file=log_file, level=config.log_level)
    set_theme(config.theme)

    # Title collation and month names follow the user's locale
    try:
        locale.setlocale(locale.LC_COLLATE, "")
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.debug(f"Could not apply user locale: {e}")


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from podshelf import __version__

    console.print(f"[bold cyan]podshelf[/bold cyan] v{__version__}")


@app.command("genres")
def list_genres() -> None:
    """List genre codes usable with --genre."""
    table = Table(title="[bold]Genres[/bold]")
    table.add_column("Code", justify="right", style="cyan")
    table.add_column("Name")
    for code, name in GENRES.items():
        table.add_row(str(code), name)
    console.print(table)


@app.command("shows")
def list_shows(
    sort: SortType = typer.Option(SortType.TITLE, "--sort", "-s", help="Sort by title or date"),
    order: SortOrder = typer.Option(SortOrder.ASC, "--order", "-o", help="asc or desc"),
    filter_text: str = typer.Option("", "--filter", "-f", help="Only titles containing this text"),
    genre: int | None = typer.Option(None, "--genre", "-g", help="Only shows in this genre code"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List podcast shows.

    Examples:
        podshelf shows --sort date --order desc

        podshelf shows --filter crime --genre 2
    """
    if genre is not None and genre not in GENRES:
        _fail(ValidationError(f"Unknown genre: {genre}", suggestion="See: podshelf genres"))

    async def fetch() -> list[Show]:
        async with build_client(_load_config()) as client:
            return await client.fetch_shows()

    try:
        shows = asyncio.run(fetch())
    except PodshelfError as e:
        _fail(e)

    shows = filter_shows(sort_shows(shows, sort, order), filter_text, genre)

    if json_output:
        print(json.dumps([show.model_dump(mode="json") for show in shows], indent=2))
        return

    console.print(render_show_grid(shows))
    console.print(f"\n[dim]Total: {len(shows)} show(s)[/dim]")


@app.command("show")
def show_detail(
    show_id: str = typer.Argument(..., help="Show id (see the ID column of 'shows')"),
    all_seasons: bool = typer.Option(
        False, "--all-seasons", "-a", help="Expand every season"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show seasons and episodes of one show.

    Examples:
        podshelf show 10716

        podshelf show 10716 --all-seasons
    """

    async def fetch() -> ShowDetail:
        async with build_client(_load_config()) as client:
            return await client.fetch_show_detail(show_id)

    try:
        detail = asyncio.run(fetch())
    except PodshelfError as e:
        _fail(e)

    if json_output:
        print(json.dumps(detail.model_dump(mode="json"), indent=2))
        return

    console.print(render_detail(detail, expand_all=all_seasons))


@app.command("browse")
def browse() -> None:
    """Browse shows interactively.

    Type 'help' at the prompt for the list of commands.
    """
    config = _load_config()

    async def run_session() -> None:
        controller = CatalogController(
            build_client(config),
            player=AudioPlayer(command=config.player.command),
        )
        try:
            await BrowseSession(controller, console=console).run()
        finally:
            await controller.aclose()

    try:
        asyncio.run(run_session())
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="Action: show or set <key> <value>"),
    key: str | None = typer.Argument(None, help="Config key, e.g. api.max_attempts"),
    value: str | None = typer.Argument(None, help="Config value (for 'set' action)"),
) -> None:
    """Manage podshelf configuration.

    Examples:
        podshelf config show

        podshelf config set api.max_attempts 3

        podshelf config set theme light
    """
    try:
        manager = ConfigManager()

        if action == "show":
            config = manager.load_config()
            data = config.model_dump(mode="json")

            console.print("\n[bold]podshelf Configuration[/bold]\n")
            table = Table(show_header=False, box=None)
            table.add_column("Key", style="cyan")
            table.add_column("Value", style="white")
            table.add_row("Config file", str(manager.config_file))
            table.add_row("", "")
            for dotted in list_keys(config):
                node = data
                for part in dotted.split("."):
                    node = node[part]
                table.add_row(dotted, " ".join(node) if isinstance(node, list) else str(node))
            console.print(table)

        elif action == "set":
            if not key or value is None:
                console.print("[red]✗[/red] Usage: podshelf config set <key> <value>")
                sys.exit(1)

            manager.set_value(key, value)
            console.print(f"[green]✓[/green] Set [cyan]{key}[/cyan] = [yellow]{value}[/yellow]")

        else:
            console.print(f"[red]✗[/red] Unknown action: {action}")
            console.print("Valid actions: show, set")
            sys.exit(1)

    except PodshelfError as e:
        _fail(e)


if __name__ == "__main__":
    app()
