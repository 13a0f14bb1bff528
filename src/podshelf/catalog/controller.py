"""Catalog controller: owns the view state and talks to the API.

The controller is the only place where network calls and playback events
turn into state changes. All of them go through ``dispatch`` so the state
history is just a sequence of reducer calls.
"""

import asyncio
import logging

from podshelf.catalog.client import PodcastAPIClient
from podshelf.catalog.models import (
    Episode,
    EpisodeKey,
    Favorite,
    Season,
    Show,
    SortOrder,
    SortType,
)
from podshelf.catalog.playback import AudioPlayer
from podshelf.catalog.state import (
    Action,
    AudioStarted,
    AudioStopped,
    DetailFailed,
    DetailLoaded,
    DetailRequested,
    OverlayClosed,
    SelectGenre,
    SetFilterText,
    SetSortOrder,
    SetSortType,
    ShowsFailed,
    ShowsLoaded,
    SortFavorites,
    ToggleFavorite,
    ToggleSeason,
    ViewState,
    is_favorite,
    is_season_visible,
    reduce,
    visible_shows,
)
from podshelf.utils.errors import PodshelfError, ValidationError

logger = logging.getLogger(__name__)


class CatalogController:
    """Drives the catalog screen."""

    def __init__(
        self,
        client: PodcastAPIClient,
        player: AudioPlayer | None = None,
    ) -> None:
        self.client = client
        self._state = ViewState()
        self._detail_task: asyncio.Task | None = None

        self.player = player or AudioPlayer()
        self.player.on_start = lambda key: self.dispatch(AudioStarted(key))
        self.player.on_stop = lambda key: self.dispatch(AudioStopped(key))

    @property
    def state(self) -> ViewState:
        return self._state

    def dispatch(self, action: Action) -> ViewState:
        """Apply an action and return the new state."""
        self._state = reduce(self._state, action)
        return self._state

    def visible_shows(self) -> list[Show]:
        return visible_shows(self._state)

    # Network

    async def mount(self) -> None:
        """Load the show list. Failures are logged and leave the list empty."""
        try:
            shows = await self.client.fetch_shows()
        except PodshelfError as e:
            logger.error(f"Error fetching shows: {e}")
            self.dispatch(ShowsFailed(str(e)))
            return

        self.dispatch(ShowsLoaded(shows))
        logger.info(f"Loaded {len(shows)} shows")

    async def open_overlay(self, show_id: str) -> bool:
        """Fetch a show's detail and open the overlay for it.

        Any detail request still in flight is cancelled first, so only the
        most recent request can open the overlay.

        Returns:
            True if the overlay now shows ``show_id``
        """
        if self._detail_task is not None and not self._detail_task.done():
            logger.debug("Cancelling superseded detail request")
            self._detail_task.cancel()

        self.dispatch(DetailRequested(show_id))
        task = asyncio.create_task(self.client.fetch_show_detail(show_id))
        self._detail_task = task

        try:
            detail = await task
        except asyncio.CancelledError:
            if task is self._detail_task:
                raise
            logger.debug(f"Detail request for show {show_id} was superseded")
            return False
        except PodshelfError as e:
            logger.error(f"Error fetching podcast details: {e}")
            self.dispatch(DetailFailed(show_id, str(e)))
            return False
        finally:
            if self._detail_task is task:
                self._detail_task = None

        current = self._state.pending_detail_id == show_id
        self.dispatch(DetailLoaded(show_id, detail))
        return current

    def close_overlay(self) -> None:
        self.dispatch(OverlayClosed())

    # View controls

    def set_sort(self, sort_type: SortType | str | None = None, sort_order: SortOrder | str | None = None) -> None:
        if sort_type is not None:
            self.dispatch(SetSortType(SortType(sort_type)))
        if sort_order is not None:
            self.dispatch(SetSortOrder(SortOrder(sort_order)))

    def set_filter(self, text: str) -> None:
        self.dispatch(SetFilterText(text))

    def select_genre(self, genre: int | None) -> None:
        self.dispatch(SelectGenre(genre))

    # Overlay content

    def _require_season(self, season_title: str) -> Season:
        detail = self._state.selected_detail
        if detail is None:
            raise ValidationError("No show is open", suggestion="Open a show first")

        season = detail.get_season(season_title)
        if season is None:
            raise ValidationError(
                f"No season named '{season_title}'",
                suggestion="Seasons: " + ", ".join(s.title for s in detail.seasons),
            )
        return season

    def find_episode(self, season_title: str, number: int) -> Episode:
        """Look up an episode of the open show by its 1-based position."""
        season = self._require_season(season_title)
        if not 1 <= number <= len(season.episodes):
            raise ValidationError(
                f"Season '{season_title}' has {season.count} episode(s), not {number}"
            )
        return season.episodes[number - 1]

    def episode_key(self, season_title: str, episode: Episode) -> EpisodeKey:
        detail = self._state.selected_detail
        if detail is None:
            raise ValidationError("No show is open", suggestion="Open a show first")
        return EpisodeKey(
            show_id=detail.id, season_title=season_title, episode_title=episode.title
        )

    def toggle_season_visibility(self, season_title: str) -> bool:
        """Expand or collapse a season of the open show.

        Returns:
            Whether the season is now visible
        """
        self._require_season(season_title)
        show_id = self._state.selected_detail.id  # type: ignore[union-attr]
        self.dispatch(ToggleSeason(show_id, season_title))
        return is_season_visible(self._state, show_id, season_title)

    # Favorites

    def toggle_favorite(self, season_title: str, episode: Episode) -> bool:
        """Add or remove an episode of the open show from favorites.

        Returns:
            True if the episode is now a favorite
        """
        self._require_season(season_title)
        favorite = Favorite.from_episode(self._state.selected_detail, season_title, episode)  # type: ignore[arg-type]
        self.dispatch(ToggleFavorite(favorite))
        return is_favorite(self._state, favorite.key)

    def remove_favorite(self, index: int) -> Favorite:
        """Remove the favorite at 1-based ``index`` in the favorites panel."""
        favorites = self._state.favorites
        if not 1 <= index <= len(favorites):
            raise ValidationError(f"No favorite #{index}")
        favorite = favorites[index - 1]
        self.dispatch(ToggleFavorite(favorite))
        return favorite

    def sort_favorites_by_title_az(self) -> None:
        self.dispatch(SortFavorites(SortOrder.ASC))

    def sort_favorites_by_title_za(self) -> None:
        self.dispatch(SortFavorites(SortOrder.DESC))

    # Playback

    def play(self, season_title: str, episode: Episode) -> EpisodeKey:
        key = self.episode_key(season_title, episode)
        self.player.play(key, episode.file)
        return key

    def pause(self, key: EpisodeKey) -> bool:
        return self.player.stop(key)

    def stop_all(self) -> None:
        self.player.stop_all()

    def refresh_playback(self) -> None:
        """Pick up players that finished by themselves."""
        self.player.poll()

    async def aclose(self) -> None:
        """Cancel pending work, stop playback and close the HTTP client."""
        if self._detail_task is not None and not self._detail_task.done():
            self._detail_task.cancel()
        self.player.stop_all()
        await self.client.aclose()
