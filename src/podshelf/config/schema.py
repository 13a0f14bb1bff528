"""Configuration schema models using Pydantic."""

from string import Formatter
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from podshelf.catalog.client import DEFAULT_DETAIL_URL, DEFAULT_LIST_URL
from podshelf.catalog.playback import DEFAULT_PLAYER_COMMAND

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
ThemeName = Literal["light", "dark", "auto"]


class APIConfig(BaseModel):
    """Podcast API endpoints and request policy."""

    list_url: str = DEFAULT_LIST_URL
    detail_url: str = DEFAULT_DETAIL_URL  # Must contain an {id} placeholder
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_attempts: int = Field(default=1, ge=1, le=10)  # 1 = no retries

    @field_validator("detail_url")
    @classmethod
    def validate_detail_url(cls, v: str) -> str:
        """Ensure the detail URL is keyed by show id and nothing else."""
        fields = [name for _, name, _, _ in Formatter().parse(v) if name is not None]
        if fields != ["id"]:
            raise ValueError(
                f"detail_url must contain '{{id}}' as its only placeholder: {v}"
            )
        return v


class PlayerConfig(BaseModel):
    """External audio player used for episode playback."""

    command: list[str] = Field(default_factory=lambda: list(DEFAULT_PLAYER_COMMAND))


class GlobalConfig(BaseModel):
    """Global podshelf configuration."""

    version: str = "1"
    log_level: LogLevel = "WARNING"
    theme: ThemeName = "auto"

    api: APIConfig = Field(default_factory=APIConfig)
    player: PlayerConfig = Field(default_factory=PlayerConfig)
