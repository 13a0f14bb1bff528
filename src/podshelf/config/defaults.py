"""Default configuration content."""

import yaml

from podshelf.config.schema import GlobalConfig

DEFAULT_GLOBAL_CONFIG = GlobalConfig()

CONFIG_HEADER = """\
# podshelf configuration
#
# api.max_attempts: 1 disables retries of failed API requests.
# player.command: audio player and its arguments; the episode URL is appended.
"""


def get_default_config_content() -> str:
    """Render the default config.yaml contents."""
    body = yaml.safe_dump(
        DEFAULT_GLOBAL_CONFIG.model_dump(mode="json"),
        default_flow_style=False,
        sort_keys=False,
    )
    return CONFIG_HEADER + "\n" + body
