"""Opt-in bounded retry for single-attempt pipeline calls."""

import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type, TypeVar

from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

# Default retry settings
DEFAULT_MAX_RETRIES = 0  # single attempt unless asked otherwise
DEFAULT_BASE_DELAY = 2.0  # seconds
DEFAULT_MAX_DELAY = 30.0  # seconds
DEFAULT_BACKOFF_FACTOR = 2.0


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff.

    max_retries=0 means the call is attempted exactly once.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must be >= 0")

    def delays(self):
        """Yield the wait before each retry."""
        delay = self.base_delay
        for _ in range(self.max_retries):
            yield delay
            delay = min(delay * self.backoff_factor, self.max_delay)


def call_with_retry(
    func: Callable[[], T],
    policy: RetryPolicy,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
) -> T:
    """
    Call func, retrying on the given exceptions according to policy.

    Args:
        func: Zero-argument callable to execute
        policy: Retry limits and backoff
        exceptions: Exception types that trigger a retry
        sleep: Function used to wait between attempts
        on_retry: Optional callback called with (exception, attempt)

    Returns:
        Result of the first successful call

    Raises:
        The last exception once retries are exhausted
    """
    attempt = 0
    delays = policy.delays()
    while True:
        try:
            return func()
        except exceptions as e:
            delay = next(delays, None)
            if delay is None:
                if policy.max_retries:
                    logger.warning(
                        f"All {policy.max_retries} retries exhausted for "
                        f"{getattr(func, '__name__', 'call')}: {e}"
                    )
                raise
            attempt += 1
            logger.warning(f"Retry {attempt}/{policy.max_retries} in {delay:.1f}s: {e}")
            if on_retry:
                on_retry(e, attempt)
            sleep(delay)
