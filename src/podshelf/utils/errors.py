"""Custom exceptions for podshelf."""


class PodshelfError(Exception):
    """Base exception for all podshelf errors."""

    pass


class ConfigError(PodshelfError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class ValidationError(PodshelfError):
    """Invalid user input, with an optional hint for fixing it."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        super().__init__(message)
        self.suggestion = suggestion


class NetworkError(PodshelfError):
    """Network-related errors."""

    pass


class NetworkConnectionError(NetworkError):
    """Connection failures."""

    pass


class NetworkTimeoutError(NetworkError):
    """Request timeout."""

    pass


class APIError(PodshelfError):
    """The podcast API answered, but not with what we asked for."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class APIResponseError(APIError):
    """Response body was not valid JSON or did not match the expected shape."""

    pass


class ShowNotFoundError(APIError):
    """Requested show id does not exist."""

    pass


class PlayerError(PodshelfError):
    """Audio player could not be started."""

    pass


class RateLimitError(APIError):
    """API rate limit exceeded (HTTP 429)."""

    pass


class ServerError(APIError):
    """Server-side error (HTTP 5xx)."""

    pass
