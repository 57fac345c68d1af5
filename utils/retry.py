"""Retry with exponential backoff for transient source failures."""

from __future__ import annotations

import time
import logging
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")


def backoff_delays(attempts: int, delay_sec: float, backoff: bool = True) -> list[float]:
    """Waits between consecutive attempts: delay, 2*delay, 4*delay, ... (or flat)."""
    return [delay_sec * (2**i) if backoff else delay_sec for i in range(max(0, attempts - 1))]


def with_retry(
    fn: Callable[[], T],
    max_attempts: int = 3,
    delay_sec: float = 1.0,
    backoff: bool = True,
    retry_exceptions: tuple[type[Exception], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    label: str = "",
) -> T:
    """
    Call fn until it returns. Only retry_exceptions trigger another attempt;
    anything else propagates at once. The last error is re-raised when attempts run out.
    """
    delays = backoff_delays(max(1, max_attempts), delay_sec, backoff)
    for attempt, wait in enumerate(delays, start=1):
        try:
            return fn()
        except retry_exceptions as e:
            logger.warning(
                "Attempt %s/%s%s failed, retrying in %.2fs: %s",
                attempt,
                len(delays) + 1,
                f" for {label}" if label else "",
                wait,
                e,
            )
            sleep(wait)
    return fn()
