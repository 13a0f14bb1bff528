"""Retry utilities for podcast API calls.

Exponential backoff with jitter for transient failures. The default policy
makes a single attempt; raise ``api.max_attempts`` in the config to retry.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from podshelf.utils.errors import (
    APIError,
    NetworkConnectionError,
    NetworkTimeoutError,
    RateLimitError,
    ServerError,
    ShowNotFoundError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    NetworkConnectionError,
    NetworkTimeoutError,
    RateLimitError,
    ServerError,
)


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 1,
        max_wait_seconds: float = 30,
        min_wait_seconds: float = 1,
        jitter: bool = True,
    ):
        """Initialize retry configuration.

        Args:
            max_attempts: Maximum number of attempts (including initial)
            max_wait_seconds: Maximum wait time between retries
            min_wait_seconds: Minimum wait time between retries
            jitter: Whether to add jitter to wait times
        """
        self.max_attempts = max_attempts
        self.max_wait_seconds = max_wait_seconds
        self.min_wait_seconds = min_wait_seconds
        self.jitter = jitter


DEFAULT_RETRY_CONFIG = RetryConfig()

# Fast configuration for testing (minimal delays)
TEST_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    max_wait_seconds=0.1,
    min_wait_seconds=0.01,
    jitter=False,
)


def log_retry_attempt(retry_state: RetryCallState) -> None:
    """Log retry attempts for debugging.

    Args:
        retry_state: Tenacity retry state
    """
    if retry_state.outcome and retry_state.outcome.failed:
        exception = retry_state.outcome.exception()
        logger.warning(
            f"Retry attempt {retry_state.attempt_number} failed: "
            f"{type(exception).__name__}: {exception}"
        )


async def call_with_retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    config: RetryConfig | None = None,
    retry_on: tuple[type[Exception], ...] | None = None,
    **kwargs: Any,
) -> T:
    """Await ``func(*args, **kwargs)``, retrying on transient errors.

    Args:
        func: Coroutine function to call
        config: Retry configuration (uses DEFAULT_RETRY_CONFIG if None)
        retry_on: Exception types to retry on (uses RETRYABLE_ERRORS if None)

    Returns:
        Whatever ``func`` returns

    Raises:
        The last exception raised by ``func`` once attempts are exhausted
    """
    config = config or DEFAULT_RETRY_CONFIG
    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential_jitter(
            initial=config.min_wait_seconds,
            max=config.max_wait_seconds,
            jitter=config.max_wait_seconds if config.jitter else 0,
        ),
        retry=retry_if_exception_type(retry_on or RETRYABLE_ERRORS),
        before_sleep=log_retry_attempt,
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                return await func(*args, **kwargs)
    except Exception as e:
        if config.max_attempts > 1:
            logger.error(
                f"{getattr(func, '__name__', func)} failed after {config.max_attempts} attempts: "
                f"{type(e).__name__}: {e}"
            )
        raise

    raise AssertionError("unreachable")  # pragma: no cover


def classify_http_error(status_code: int, error_message: str = "") -> APIError | NetworkTimeoutError:
    """Classify an HTTP error status into a podshelf exception.

    Args:
        status_code: HTTP status code
        error_message: Context for the message (usually the URL)

    Returns:
        Appropriate exception instance
    """
    if status_code == 429:
        return RateLimitError(f"Rate limit exceeded: {error_message}", status_code)

    if 500 <= status_code < 600:
        return ServerError(f"Server error (HTTP {status_code}): {error_message}", status_code)

    if status_code == 408:
        return NetworkTimeoutError(f"Request timeout: {error_message}")

    if status_code == 404:
        return ShowNotFoundError(f"Not found (HTTP 404): {error_message}", status_code)

    return APIError(f"HTTP error {status_code}: {error_message}", status_code)
