"""Retry decorator for GitHub read operations that hit rate limits.

Only listing calls are decorated. Issue creation, updates and comments are
deliberately left without retries: a duplicated placeholder or comment is
worse than a failure that gets picked up again on the next run.
"""

import asyncio
import functools
import time
from typing import Any, Callable, Mapping, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def wait_time_from_headers(headers: Mapping[str, str], default: float) -> float:
    """Work out how long to wait from GitHub's retry-after or x-ratelimit-reset headers."""
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after)
            return default

    rate_limit_reset = headers.get("x-ratelimit-reset")
    if rate_limit_reset:
        try:
            reset_timestamp = int(rate_limit_reset)
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=rate_limit_reset)
            return default
        now = int(time.time())
        if reset_timestamp > now:
            return float(reset_timestamp - now + 1)
    return default


def is_rate_limit_error(exc: RequestFailed) -> bool:
    """Return True if a failed request was rejected because of a rate limit."""
    status_code = exc.response.status_code
    if status_code == 429:
        return True
    return status_code == 403 and "rate limit" in str(exc).lower()


def retry_on_rate_limit(
    max_retries: int = 5,
    initial_delay: float = 10.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Decorator for retrying async GitHub reads when they encounter rate limits.

    Args:
        max_retries: Maximum number of retry attempts (default: 5)
        initial_delay: Initial delay in seconds between retries (default: 10.0)
        max_delay: Maximum delay in seconds between retries (default: 300.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)

    Returns:
        Decorated function with retry logic
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} decorated with @retry_on_rate_limit must be async.")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as e:
                    if attempt == max_retries:
                        logger.error("Max retries reached for GitHub rate limit error", function=func.__name__, attempt=attempt + 1)
                        raise
                    retry_after = getattr(e, "retry_after", None)
                    wait_time = min(retry_after.total_seconds() if retry_after else delay, max_delay)
                except RequestFailed as e:
                    if not is_rate_limit_error(e):
                        raise
                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=e.response.status_code,
                        )
                        raise
                    wait_time = min(wait_time_from_headers(e.response.headers, delay), max_delay)

                logger.warning(
                    "GitHub rate limit hit, waiting before retrying",
                    function=func.__name__,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    wait_time=wait_time,
                )
                await asyncio.sleep(wait_time)
                delay = min(delay * exponential_base, max_delay)

        return wrapper  # type: ignore

    return decorator
