"""Tests for ConfigManager."""

from pathlib import Path

import pytest
import yaml

from podshelf.config.manager import ConfigManager, list_keys
from podshelf.config.schema import GlobalConfig
from podshelf.utils.errors import InvalidConfigError, ValidationError


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_init_with_custom_dir(self, tmp_path: Path) -> None:
        """Test ConfigManager initialization with custom directory."""
        manager = ConfigManager(config_dir=tmp_path)
        assert manager.config_dir == tmp_path
        assert manager.config_file == tmp_path / "config.yaml"

    def test_default_dir_from_environment(self, tmp_path: Path) -> None:
        """Test that the config dir override is honored."""
        manager = ConfigManager()
        assert manager.config_dir == tmp_path / "config"

    def test_load_config_creates_default_if_missing(self, tmp_path: Path) -> None:
        """Test that load_config creates default config if file doesn't exist."""
        manager = ConfigManager(config_dir=tmp_path)
        config = manager.load_config()

        assert isinstance(config, GlobalConfig)
        assert config.api.max_attempts == 1
        assert manager.config_file.exists()
        assert manager.config_file.read_text().startswith("#")

    def test_default_file_round_trips(self, tmp_path: Path) -> None:
        """Test that the generated default file loads back unchanged."""
        manager = ConfigManager(config_dir=tmp_path)
        first = manager.load_config()
        second = manager.load_config()
        assert first == second

    def test_load_config_from_existing_file(self, tmp_path: Path) -> None:
        """Test loading config from existing file."""
        data = {"log_level": "INFO", "theme": "light", "api": {"max_attempts": 3}}
        (tmp_path / "config.yaml").write_text(yaml.safe_dump(data))

        config = ConfigManager(config_dir=tmp_path).load_config()

        assert config.log_level == "INFO"
        assert config.theme == "light"
        assert config.api.max_attempts == 3

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("")
        assert ConfigManager(config_dir=tmp_path).load_config() == GlobalConfig()

    def test_load_invalid_config_raises(self, tmp_path: Path) -> None:
        """Test that invalid config raises InvalidConfigError."""
        (tmp_path / "config.yaml").write_text("log_level: LOUD\n")

        with pytest.raises(InvalidConfigError, match="Invalid configuration"):
            ConfigManager(config_dir=tmp_path).load_config()

    def test_save_config(self, tmp_path: Path) -> None:
        """Test saving configuration."""
        manager = ConfigManager(config_dir=tmp_path / "nested")
        manager.save_config(GlobalConfig(log_level="DEBUG"))

        with open(manager.config_file) as f:
            data = yaml.safe_load(f)
        assert data["log_level"] == "DEBUG"
        assert data["api"]["detail_url"].endswith("{id}")


class TestSetValue:
    """Tests for ConfigManager.set_value."""

    def test_set_top_level(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)
        config = manager.set_value("theme", "dark")

        assert config.theme == "dark"
        assert manager.load_config().theme == "dark"

    def test_set_nested_number(self, tmp_path: Path) -> None:
        """Test that dotted keys reach nested sections and values are typed."""
        manager = ConfigManager(config_dir=tmp_path)
        config = manager.set_value("api.max_attempts", "4")
        assert config.api.max_attempts == 4

    def test_set_list_value(self, tmp_path: Path) -> None:
        """Test that list values are split like a shell command line."""
        manager = ConfigManager(config_dir=tmp_path)
        config = manager.set_value("player.command", "mpv --no-video --volume=50")
        assert config.player.command == ["mpv", "--no-video", "--volume=50"]

    def test_unknown_key(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)
        with pytest.raises(ValidationError, match="Unknown config key") as exc_info:
            manager.set_value("colour", "blue")
        assert "api.max_attempts" in exc_info.value.suggestion

    def test_unknown_nested_key(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)
        with pytest.raises(ValidationError, match="Unknown config key"):
            manager.set_value("nope.max_attempts", "2")

    def test_detail_url_with_extra_placeholder(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)
        with pytest.raises(ValidationError, match="Invalid value for api.detail_url"):
            manager.set_value("api.detail_url", "https://x.test/id/{id}?lang={lang}")
        assert manager.load_config().api.detail_url.endswith("/id/{id}")

    def test_section_is_not_settable(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)
        with pytest.raises(ValidationError):
            manager.set_value("api", "x")

    def test_invalid_value_not_saved(self, tmp_path: Path) -> None:
        """Test that a rejected value leaves the file untouched."""
        manager = ConfigManager(config_dir=tmp_path)
        with pytest.raises(ValidationError, match="Invalid value for api.max_attempts"):
            manager.set_value("api.max_attempts", "0")
        assert manager.load_config().api.max_attempts == 1


def test_list_keys() -> None:
    keys = list_keys(GlobalConfig())
    assert keys == [
        "version",
        "log_level",
        "theme",
        "api.list_url",
        "api.detail_url",
        "api.timeout_seconds",
        "api.max_attempts",
        "player.command",
    ]
