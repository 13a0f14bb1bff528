"""Configuration loading and logging setup for podshelf."""

from podshelf.config.manager import ConfigManager
from podshelf.config.schema import APIConfig, GlobalConfig, PlayerConfig

__all__ = ["ConfigManager", "GlobalConfig", "APIConfig", "PlayerConfig"]
