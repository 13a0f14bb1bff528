"""View state for the catalog and the single function that updates it.

The catalog screen is driven by an explicit, serializable ``ViewState``.
Every user event or network callback is expressed as an action and applied
through ``reduce``, which returns a new state and never mutates its input.
Sorting and filtering are plain functions of the state so they can be used
without any rendering.

Usage:
    state = ViewState()
    state = reduce(state, ShowsLoaded(shows))
    state = reduce(state, SetFilterText("crime"))
    for show in visible_shows(state):
        ...
"""

from __future__ import annotations

import locale
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pydantic import BaseModel, Field

from podshelf.catalog.models import (
    EpisodeKey,
    Favorite,
    Show,
    ShowDetail,
    SortOrder,
    SortType,
)


class ViewState(BaseModel):
    """Everything the catalog screen shows, in one record."""

    shows: list[Show] = Field(default_factory=list)
    loading: bool = True
    sort_type: SortType = SortType.TITLE
    sort_order: SortOrder = SortOrder.ASC
    filter_text: str = ""
    selected_genre: int | None = None
    season_visibility: dict[str, bool] = Field(default_factory=dict)
    favorites: list[Favorite] = Field(default_factory=list)
    playing: list[EpisodeKey] = Field(default_factory=list)
    selected_detail: ShowDetail | None = None
    pending_detail_id: str | None = None

    @property
    def is_audio_playing(self) -> bool:
        """Whether any episode is currently playing."""
        return bool(self.playing)

    @property
    def overlay_open(self) -> bool:
        return self.selected_detail is not None


# Actions


@dataclass(frozen=True)
class ShowsLoaded:
    shows: Sequence[Show]


@dataclass(frozen=True)
class ShowsFailed:
    error: str


@dataclass(frozen=True)
class SetSortType:
    sort_type: SortType


@dataclass(frozen=True)
class SetSortOrder:
    sort_order: SortOrder


@dataclass(frozen=True)
class SetFilterText:
    text: str


@dataclass(frozen=True)
class SelectGenre:
    genre: int | None


@dataclass(frozen=True)
class DetailRequested:
    show_id: str


@dataclass(frozen=True)
class DetailLoaded:
    show_id: str  # Id as requested; the API may normalise it
    detail: ShowDetail


@dataclass(frozen=True)
class DetailFailed:
    show_id: str
    error: str


@dataclass(frozen=True)
class OverlayClosed:
    pass


@dataclass(frozen=True)
class ToggleSeason:
    show_id: str
    season_title: str


@dataclass(frozen=True)
class ToggleFavorite:
    favorite: Favorite


@dataclass(frozen=True)
class SortFavorites:
    order: SortOrder


@dataclass(frozen=True)
class AudioStarted:
    key: EpisodeKey


@dataclass(frozen=True)
class AudioStopped:
    key: EpisodeKey


Action = (
    ShowsLoaded
    | ShowsFailed
    | SetSortType
    | SetSortOrder
    | SetFilterText
    | SelectGenre
    | DetailRequested
    | DetailLoaded
    | DetailFailed
    | OverlayClosed
    | ToggleSeason
    | ToggleFavorite
    | SortFavorites
    | AudioStarted
    | AudioStopped
)


# Projections


def title_sort_key(title: str) -> tuple[str, str]:
    """Locale-aware collation key for a title.

    Case is ignored first, so the C locale does not put every lowercase
    title after "Z". Titles equal but for case fall back to full collation.
    """
    return locale.strxfrm(title.casefold()), locale.strxfrm(title)


def sort_shows(
    shows: Iterable[Show],
    sort_type: SortType = SortType.TITLE,
    sort_order: SortOrder = SortOrder.ASC,
) -> list[Show]:
    """Return a stably sorted copy of ``shows``.

    Titles are compared with the active locale's collation; dates by the
    ``updated`` timestamp. Equal keys keep their input order in both
    directions.
    """
    reverse = sort_order == SortOrder.DESC
    if sort_type == SortType.DATE:
        return sorted(shows, key=lambda show: show.updated, reverse=reverse)
    return sorted(shows, key=lambda show: title_sort_key(show.title), reverse=reverse)


def filter_shows(
    shows: Iterable[Show],
    filter_text: str = "",
    selected_genre: int | None = None,
) -> list[Show]:
    """Keep shows whose title contains ``filter_text`` and that carry ``selected_genre``."""
    needle = filter_text.casefold()
    result = []
    for show in shows:
        if needle not in show.title.casefold():
            continue
        if selected_genre is not None and selected_genre not in show.genres:
            continue
        result.append(show)
    return result


def visible_shows(state: ViewState) -> list[Show]:
    """The sorted and filtered projection of the loaded shows."""
    ordered = sort_shows(state.shows, state.sort_type, state.sort_order)
    return filter_shows(ordered, state.filter_text, state.selected_genre)


def season_key(show_id: str, season_title: str) -> str:
    """Visibility map key; scoped per show so equal titles don't collide."""
    return f"{show_id}::{season_title}"


def is_season_visible(state: ViewState, show_id: str, season_title: str) -> bool:
    return state.season_visibility.get(season_key(show_id, season_title), False)


def is_favorite(state: ViewState, key: EpisodeKey) -> bool:
    return any(fav.key == key for fav in state.favorites)


def is_playing(state: ViewState, key: EpisodeKey) -> bool:
    return key in state.playing


# Reducer


def reduce(state: ViewState, action: Action) -> ViewState:
    """Apply ``action`` to ``state`` and return the resulting state.

    Args:
        state: Current state (left untouched)
        action: Event to apply

    Returns:
        New ViewState

    Raises:
        TypeError: If the action type is unknown
    """
    if isinstance(action, ShowsLoaded):
        return state.model_copy(update={"shows": list(action.shows), "loading": False})

    if isinstance(action, ShowsFailed):
        return state.model_copy(update={"loading": False})

    if isinstance(action, SetSortType):
        return state.model_copy(update={"sort_type": SortType(action.sort_type)})

    if isinstance(action, SetSortOrder):
        return state.model_copy(update={"sort_order": SortOrder(action.sort_order)})

    if isinstance(action, SetFilterText):
        return state.model_copy(update={"filter_text": action.text})

    if isinstance(action, SelectGenre):
        return state.model_copy(update={"selected_genre": action.genre})

    if isinstance(action, DetailRequested):
        return state.model_copy(update={"pending_detail_id": action.show_id})

    if isinstance(action, DetailLoaded):
        # A response for anything but the latest request is stale
        if action.show_id != state.pending_detail_id:
            return state
        return state.model_copy(
            update={"selected_detail": action.detail, "pending_detail_id": None}
        )

    if isinstance(action, DetailFailed):
        if action.show_id != state.pending_detail_id:
            return state
        return state.model_copy(update={"pending_detail_id": None})

    if isinstance(action, OverlayClosed):
        return state.model_copy(update={"selected_detail": None})

    if isinstance(action, ToggleSeason):
        key = season_key(action.show_id, action.season_title)
        visibility = dict(state.season_visibility)
        visibility[key] = not visibility.get(key, False)
        return state.model_copy(update={"season_visibility": visibility})

    if isinstance(action, ToggleFavorite):
        favorites = list(state.favorites)
        for index, fav in enumerate(favorites):
            if fav.key == action.favorite.key:
                del favorites[index]
                break
        else:
            favorites.append(action.favorite)
        return state.model_copy(update={"favorites": favorites})

    if isinstance(action, SortFavorites):
        favorites = sorted(
            state.favorites,
            key=lambda fav: title_sort_key(fav.title),
            reverse=SortOrder(action.order) == SortOrder.DESC,
        )
        return state.model_copy(update={"favorites": favorites})

    if isinstance(action, AudioStarted):
        if action.key in state.playing:
            return state
        return state.model_copy(update={"playing": [*state.playing, action.key]})

    if isinstance(action, AudioStopped):
        playing = [key for key in state.playing if key != action.key]
        return state.model_copy(update={"playing": playing})

    raise TypeError(f"Unknown action: {type(action).__name__}")
