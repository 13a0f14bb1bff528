"""Podcast catalog: models, view state, API client and controller."""

from podshelf.catalog.client import PodcastAPIClient
from podshelf.catalog.controller import CatalogController
from podshelf.catalog.models import (
    GENRES,
    Episode,
    EpisodeKey,
    Favorite,
    Season,
    Show,
    ShowDetail,
    SortOrder,
    SortType,
)
from podshelf.catalog.playback import AudioPlayer
from podshelf.catalog.state import ViewState, filter_shows, reduce, sort_shows, visible_shows

__all__ = [
    "GENRES",
    "AudioPlayer",
    "CatalogController",
    "Episode",
    "EpisodeKey",
    "Favorite",
    "PodcastAPIClient",
    "Season",
    "Show",
    "ShowDetail",
    "SortOrder",
    "SortType",
    "ViewState",
    "filter_shows",
    "reduce",
    "sort_shows",
    "visible_shows",
]
