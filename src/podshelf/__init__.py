"""podshelf - browse a podcast catalog from the terminal."""

__version__ = "0.1.0"
