"""Utility functions and helpers for podshelf."""

from podshelf.utils.errors import (
    APIError,
    APIResponseError,
    ConfigError,
    InvalidConfigError,
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
    PlayerError,
    PodshelfError,
    RateLimitError,
    ServerError,
    ShowNotFoundError,
    ValidationError,
)
from podshelf.utils.paths import get_config_dir

__all__ = [
    # Errors
    "PodshelfError",
    "ConfigError",
    "InvalidConfigError",
    "ValidationError",
    "NetworkError",
    "NetworkConnectionError",
    "NetworkTimeoutError",
    "APIError",
    "APIResponseError",
    "ShowNotFoundError",
    "RateLimitError",
    "ServerError",
    "PlayerError",
    # Paths
    "get_config_dir",
]
