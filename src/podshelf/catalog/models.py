"""Data models for podcast shows, seasons and episodes."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

GENRES: dict[int, str] = {
    1: "Personal Growth",
    2: "True Crime and Investigative Journalism",
    3: "History",
    4: "Comedy",
    5: "Entertainment",
    6: "Business",
    7: "Fiction",
    8: "News",
    9: "Kids and Family",
}


class SortType(str, Enum):
    """Field used to order the show list."""

    TITLE = "title"
    DATE = "date"


class SortOrder(str, Enum):
    """Direction of the show list ordering."""

    ASC = "asc"
    DESC = "desc"


class Show(BaseModel):
    """A podcast series as returned by the show list endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    title: str
    image: str = ""
    seasons: int = 0  # Season count, not the seasons themselves
    genres: list[int] = Field(default_factory=list)
    updated: datetime

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        """Accept numeric ids from the API."""
        return str(v)

    @field_validator("updated")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC so they compare with aware ones."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def genre_names(self) -> list[str]:
        """Human-readable genre names, skipping unknown codes."""
        return [GENRES[code] for code in self.genres if code in GENRES]


class Episode(BaseModel):
    """A single playable episode inside a season."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str
    description: str = ""
    file: str  # Media URL
    episode: int | None = None


class Season(BaseModel):
    """A group of episodes within a show's detail."""

    model_config = ConfigDict(extra="ignore")

    title: str
    image: str = ""
    episodes: list[Episode] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def count(self) -> int:
        """Number of episodes in the season."""
        return len(self.episodes)


class ShowDetail(BaseModel):
    """Full detail for one show, fetched on demand."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    image: str = ""
    description: str = ""
    seasons: list[Season] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        """Accept numeric ids from the API."""
        return str(v)

    def get_season(self, title: str) -> Season | None:
        """Find a season by its title."""
        for season in self.seasons:
            if season.title == title:
                return season
        return None


class EpisodeKey(BaseModel):
    """Stable identity of an episode across shows."""

    model_config = ConfigDict(frozen=True)

    show_id: str
    season_title: str
    episode_title: str

    def __str__(self) -> str:
        return f"{self.show_id}/{self.season_title}/{self.episode_title}"


class Favorite(BaseModel):
    """An episode the user marked during this session."""

    model_config = ConfigDict(frozen=True)

    key: EpisodeKey
    show_title: str
    episode: Episode

    @property
    def title(self) -> str:
        return self.episode.title

    @classmethod
    def from_episode(cls, detail: ShowDetail, season_title: str, episode: Episode) -> "Favorite":
        """Build a favorite for an episode of the given show detail."""
        return cls(
            key=EpisodeKey(
                show_id=detail.id,
                season_title=season_title,
                episode_title=episode.title,
            ),
            show_title=detail.title,
            episode=episode,
        )
