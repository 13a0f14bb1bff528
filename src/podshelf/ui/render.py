"""Rich renderables for the catalog screen.

Every function takes plain data (a ViewState or a list of shows) and returns
something ``Console.print`` accepts, so the screen can be rebuilt from state
at any time.
"""

from __future__ import annotations

from datetime import datetime

from rich.console import Group, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from podshelf.catalog.models import GENRES, EpisodeKey, Season, Show, ShowDetail
from podshelf.catalog.state import (
    ViewState,
    is_favorite,
    is_playing,
    is_season_visible,
    season_key,
    visible_shows,
)
from podshelf.ui.theme import get_theme
from podshelf.utils.display import truncate_text

FAVORITE_ON = "♥"
FAVORITE_OFF = "♡"


def format_long_date(value: datetime | str) -> str:
    """Format a timestamp as a long date, e.g. ``January 5, 2023``.

    The month name follows the active locale.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value:%B} {value.day}, {value.year}"


def render_loading() -> RenderableType:
    return Text("Loading data...", style=get_theme().muted)


def render_controls(state: ViewState) -> RenderableType:
    """The sort/filter control bar."""
    theme = get_theme()
    genre = GENRES.get(state.selected_genre, str(state.selected_genre)) if state.selected_genre is not None else "All"

    grid = Table.grid(padding=(0, 3))
    for _ in range(4):
        grid.add_column()
    grid.add_row(
        f"Sort by: [bold]{state.sort_type.value.title()}[/bold]",
        f"Order: [bold]{'Ascending' if state.sort_order.value == 'asc' else 'Descending'}[/bold]",
        f"Filter by Title: [bold]{escape(state.filter_text) or theme.muted_text('(none)')}[/bold]",
        f"Filter by Genre: [bold]{escape(genre)}[/bold]",
    )
    return grid


def render_favorites(state: ViewState) -> RenderableType:
    """The favorites panel, numbered for removal."""
    theme = get_theme()

    if not state.favorites:
        body: RenderableType = Text("No favorites yet", style=theme.muted)
    else:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("#", justify="right", style=theme.muted)
        table.add_column("Episode")
        table.add_column("From", style=theme.muted)
        for index, fav in enumerate(state.favorites, start=1):
            table.add_row(
                str(index),
                f"[{theme.favorite}]{FAVORITE_ON}[/{theme.favorite}] Episode: {escape(fav.title)}",
                f"{escape(fav.show_title)} / {escape(fav.key.season_title)}",
            )
        body = table

    return Panel(body, title="[bold]Favorites[/bold]", border_style=theme.border, expand=False)


def render_show_grid(shows: list[Show]) -> RenderableType:
    """The list of shows, numbered so they can be opened by position."""
    theme = get_theme()

    if not shows:
        return Text("No shows match the current filters.", style=theme.warning)

    table = Table(header_style=theme.table_header, border_style=theme.border)
    table.add_column("#", justify="right", style=theme.muted)
    table.add_column("Title", style=theme.title)
    table.add_column("Seasons", justify="right", style=theme.count)
    table.add_column("Genres", style=theme.genre)
    table.add_column("Updated", style=theme.date, no_wrap=True)
    table.add_column("ID", style=theme.muted)

    for index, show in enumerate(shows, start=1):
        table.add_row(
            str(index),
            escape(show.title),
            str(show.seasons),
            escape(", ".join(show.genre_names)) or "—",
            format_long_date(show.updated),
            show.id,
        )
    return table


def render_catalog(state: ViewState) -> RenderableType:
    """Control bar, favorites panel and the show grid."""
    if state.loading:
        return Group(render_controls(state), render_loading())

    shows = visible_shows(state)
    footer = Text(f"Showing {len(shows)} of {len(state.shows)} show(s)", style=get_theme().muted)
    return Group(render_controls(state), render_favorites(state), render_show_grid(shows), footer)


def _render_season(
    state: ViewState,
    detail: ShowDetail,
    season: Season,
    expanded: bool,
) -> RenderableType:
    theme = get_theme()
    marker = "▾" if expanded else "▸"
    header = Text.from_markup(
        f"{marker} [bold]{escape(season.title)}[/bold] "
        f"[{theme.count}]({season.count} episodes)[/{theme.count}]"
    )
    if not expanded:
        return header

    rows: list[RenderableType] = [header]
    if season.image:
        rows.append(Text(f"    {season.image}", style=theme.muted))

    for number, episode in enumerate(season.episodes, start=1):
        key = EpisodeKey(show_id=detail.id, season_title=season.title, episode_title=episode.title)
        heart = FAVORITE_ON if is_favorite(state, key) else FAVORITE_OFF
        line = (
            f"    [{theme.favorite}]{heart}[/{theme.favorite}] "
            f"{number}. [{theme.title}]{escape(episode.title)}[/{theme.title}]"
        )
        if is_playing(state, key):
            line += f"  [{theme.playing}]▶ playing[/{theme.playing}]"
        rows.append(Text.from_markup(line))
        if episode.description:
            rows.append(Text(f"       {truncate_text(episode.description, 200)}"))
        rows.append(Text(f"       {episode.file}", style=theme.muted))

    return Group(*rows)


def render_overlay(state: ViewState) -> RenderableType | None:
    """Detail overlay for the open show, or None when closed."""
    detail = state.selected_detail
    if detail is None:
        return None

    theme = get_theme()
    parts: list[RenderableType] = []
    if detail.image:
        parts.append(Text(detail.image, style=theme.muted))
    if detail.description:
        parts.append(Text(detail.description))
    parts.append(Text(""))

    for season in detail.seasons:
        expanded = is_season_visible(state, detail.id, season.title)
        parts.append(_render_season(state, detail, season, expanded))

    return Panel(
        Group(*parts),
        title=f"[{theme.title}]{escape(detail.title)}[/{theme.title}]",
        subtitle=theme.muted_text("close: close  ·  season <title>: expand/collapse"),
        border_style=theme.border,
    )


def render_detail(detail: ShowDetail, expand_all: bool = False) -> RenderableType:
    """Render a detail outside of a browse session."""
    state = ViewState(loading=False, selected_detail=detail)
    if expand_all:
        state = state.model_copy(
            update={
                "season_visibility": {
                    season_key(detail.id, season.title): True for season in detail.seasons
                }
            }
        )
    return render_overlay(state)  # type: ignore[return-value]
