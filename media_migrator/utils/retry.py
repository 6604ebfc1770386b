"""
Retry-with-backoff helper used around every remote call of a migration run
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from media_migrator.constants import (
    BACKOFF_MULTIPLIER,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAY_MS,
)
from media_migrator.utils.logging import log_with_context

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to attempt an operation and how long to wait in between.

    The wait before attempt ``n + 1`` is ``initial_delay_ms * multiplier ** (n - 1)``
    milliseconds, so the defaults wait 1s and then 2s.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    backoff_multiplier: int = BACKOFF_MULTIPLIER

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.initial_delay_ms < 0:
            raise ValueError(
                f"initial_delay_ms must be non-negative, got {self.initial_delay_ms}"
            )

    def delay_seconds(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        return self.initial_delay_ms * self.backoff_multiplier ** (attempt - 1) / 1000


SINGLE_ATTEMPT = RetryPolicy(max_attempts=1, initial_delay_ms=0)


def retry(
    operation: Callable[[], T],
    description: str,
    policy: RetryPolicy | None = None,
    **context,
) -> T:
    """
    Run ``operation`` until it succeeds or the policy's attempts are used up.

    Args:
        operation: Zero-argument callable performing one attempt
        description: Human readable name of the operation, used in log lines
        policy: Retry policy; defaults to 3 attempts starting at 1 second
        **context: Extra attributes attached to the retry log records

    Returns:
        Whatever ``operation`` returns on its first successful attempt

    Raises:
        The exception from the final attempt, unchanged
    """
    policy = policy or RetryPolicy()

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return operation()
        except Exception as e:
            if attempt >= policy.max_attempts:
                if policy.max_attempts > 1:
                    log_with_context(
                        logging.ERROR,
                        f"{description} failed after {attempt} attempts. Last error: {e}",
                        attempt=attempt,
                        **context,
                    )
                raise

            sleep_time = policy.delay_seconds(attempt)
            log_with_context(
                logging.WARNING,
                f"{description} failed (attempt {attempt}/{policy.max_attempts}). "
                f"Retrying in {sleep_time:g}s...",
                attempt=attempt,
                error=str(e),
                **context,
            )
            time.sleep(sleep_time)

    raise RuntimeError("Exited retry loop unexpectedly.")
