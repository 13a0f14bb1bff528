"""Filesystem locations used by podshelf."""

import os
from pathlib import Path

import platformdirs

APP_NAME = "podshelf"

# Overrides the config directory (useful for tests and portable installs)
CONFIG_DIR_ENV = "PODSHELF_CONFIG_DIR"


def get_config_dir() -> Path:
    """Directory holding config.yaml."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path(platformdirs.user_config_dir(APP_NAME))
