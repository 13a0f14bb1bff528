"""Episode playback through an external audio player."""

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from podshelf.catalog.models import EpisodeKey
from podshelf.utils.errors import PlayerError

logger = logging.getLogger(__name__)

ALLOWED_PLAYERS = {"ffplay", "mpv", "mplayer", "vlc", "cvlc", "afplay", "mpg123"}

DEFAULT_PLAYER_COMMAND = ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"]

PlaybackCallback = Callable[[EpisodeKey], None]


class AudioPlayer:
    """Runs one player process per playing episode.

    Start and stop events are reported through ``on_start`` and ``on_stop``
    so the caller can keep its "is anything playing" flag current.
    """

    def __init__(
        self,
        command: list[str] | None = None,
        on_start: PlaybackCallback | None = None,
        on_stop: PlaybackCallback | None = None,
    ) -> None:
        self.command = list(command or DEFAULT_PLAYER_COMMAND)
        self.on_start = on_start
        self.on_stop = on_stop
        self._processes: dict[EpisodeKey, subprocess.Popen] = {}

    @property
    def playing(self) -> list[EpisodeKey]:
        return list(self._processes)

    def validate_command(self) -> None:
        """Ensure the configured player is one we know how to drive.

        Raises:
            PlayerError: If no command is set or the executable isn't allowed
        """
        if not self.command:
            raise PlayerError("No audio player configured")

        player_name = Path(self.command[0]).name
        if player_name not in ALLOWED_PLAYERS:
            raise PlayerError(
                f"Unsupported audio player: {self.command[0]}. "
                f"Allowed players: {', '.join(sorted(ALLOWED_PLAYERS))}"
            )

    def play(self, key: EpisodeKey, url: str) -> None:
        """Start playing ``url`` for the episode identified by ``key``.

        Raises:
            PlayerError: If the player is not allowed or cannot be launched
        """
        if key in self._processes:
            return

        self.validate_command()

        try:
            process = subprocess.Popen(
                [*self.command, url],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except FileNotFoundError as e:
            raise PlayerError(f"Audio player '{self.command[0]}' not found") from e
        except OSError as e:
            raise PlayerError(f"Could not start audio player: {e}") from e

        logger.info(f"Playing {key} (pid {process.pid})")
        self._processes[key] = process
        if self.on_start:
            self.on_start(key)

    def stop(self, key: EpisodeKey) -> bool:
        """Stop the episode if it is playing.

        Returns:
            True if a player was stopped
        """
        process = self._processes.pop(key, None)
        if process is None:
            return False

        process.terminate()
        try:
            process.wait(timeout=2)
        except subprocess.TimeoutExpired:
            logger.warning(f"Player for {key} ignored terminate, killing it")
            process.kill()

        logger.info(f"Stopped {key}")
        if self.on_stop:
            self.on_stop(key)
        return True

    def stop_all(self) -> None:
        for key in list(self._processes):
            self.stop(key)

    def poll(self) -> list[EpisodeKey]:
        """Reap players that exited on their own.

        Returns:
            Keys of episodes that finished since the last poll
        """
        finished = []
        for key, process in list(self._processes.items()):
            if process.poll() is not None:
                del self._processes[key]
                finished.append(key)
                if self.on_stop:
                    self.on_stop(key)
        return finished
