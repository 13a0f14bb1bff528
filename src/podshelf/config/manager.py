"""Configuration manager for loading and saving podshelf config."""

import shlex
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from podshelf.config.defaults import DEFAULT_GLOBAL_CONFIG, get_default_config_content
from podshelf.config.schema import GlobalConfig
from podshelf.utils.errors import InvalidConfigError, ValidationError
from podshelf.utils.paths import get_config_dir


class ConfigManager:
    """Manages the podshelf configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to the
                platform's user config dir.
        """
        self.config_dir = config_dir if config_dir is not None else get_config_dir()
        self.config_file = self.config_dir / "config.yaml"

    def load_config(self) -> GlobalConfig:
        """Load and validate global configuration.

        Returns:
            Validated GlobalConfig instance

        Raises:
            InvalidConfigError: If config is invalid
        """
        if not self.config_file.exists():
            self._create_default_config()
            return DEFAULT_GLOBAL_CONFIG.model_copy(deep=True)

        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
            return GlobalConfig(**data)
        except Exception as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: GlobalConfig) -> None:
        """Save global configuration.

        Args:
            config: GlobalConfig instance to save
        """
        data = config.model_dump(mode="json")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def set_value(self, key: str, value: str) -> GlobalConfig:
        """Set a (possibly dotted) config key from its string form and save.

        Args:
            key: Field name, e.g. ``log_level`` or ``api.max_attempts``
            value: New value; YAML syntax is accepted for lists and numbers

        Returns:
            The updated configuration

        Raises:
            ValidationError: Unknown key or value rejected by the schema
        """
        config = self.load_config()
        data: dict[str, Any] = config.model_dump(mode="json")

        *parents, leaf = key.split(".")
        target = data
        for part in parents:
            if not isinstance(target.get(part), dict):
                raise ValidationError(f"Unknown config key: {key}")
            target = target[part]
        if leaf not in target or isinstance(target[leaf], dict):
            raise ValidationError(
                f"Unknown config key: {key}",
                suggestion="Available keys: " + ", ".join(list_keys(config)),
            )

        if isinstance(target[leaf], list):
            target[leaf] = shlex.split(value)
        else:
            target[leaf] = yaml.safe_load(value) if value else value

        try:
            updated = GlobalConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid value for {key}: {value}", suggestion=str(e)) from e

        self.save_config(updated)
        return updated

    def _create_default_config(self) -> None:
        """Create default config.yaml file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(get_default_config_content())


def list_keys(config: GlobalConfig) -> list[str]:
    """Dotted names of every settable config key."""
    keys = []

    def walk(prefix: str, data: dict[str, Any]) -> None:
        for name, value in data.items():
            dotted = f"{prefix}{name}"
            if isinstance(value, dict):
                walk(f"{dotted}.", value)
            else:
                keys.append(dotted)

    walk("", config.model_dump(mode="json"))
    return keys
