"""Logging setup for the podshelf CLI."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    level: str = "WARNING",
) -> logging.Logger:
    """Configure the ``podshelf`` logger.

    Console output goes to stderr through rich so it never mixes with
    rendered tables or JSON on stdout.

    Args:
        verbose: Force DEBUG level
        log_file: Optional file to also write logs to
        level: Level name used when not verbose

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("podshelf")
    logger.setLevel(logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger
