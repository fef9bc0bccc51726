# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Bounded polling used by the element query engine.
#
# Key Features:
#   - Fixed or growing poll interval (optional jitter)
#   - Single timeout budget per wait
#   - Errors raised inside one poll tick are logged and polled past
#
# Usage:
#   result = wait_until(check_fn, WaitConfig(timeout=10), "Waiting for page")
#
# ================================================================================

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, TypeVar

from loguru import logger


T = TypeVar("T")


@dataclass
class WaitConfig:
    """
    Configuration for wait operations.

    Attributes:
        initial_interval: Seconds between the first poll ticks
        multiplier: Interval growth factor per tick (1.0 keeps it fixed)
        max_interval: Upper bound for the interval
        timeout: Total budget in seconds
        jitter: Randomize each interval by +/- 25%
    """
    initial_interval: float = 0.5
    multiplier: float = 1.0
    max_interval: float = 5.0
    timeout: float = 10.0
    jitter: bool = False


class WaitTimeoutError(Exception):
    """Raised when a wait operation times out."""

    def __init__(
        self,
        message: str,
        last_result: Any = None,
        last_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.last_result = last_result
        self.last_error = last_error


def calculate_next_interval(current_interval: float, config: WaitConfig) -> float:
    """
    Calculate the next poll interval.

    Args:
        current_interval: Current interval in seconds
        config: Wait configuration

    Returns:
        Next interval in seconds
    """
    next_interval = min(current_interval * config.multiplier, config.max_interval)

    if config.jitter:
        jitter_factor = 0.75 + (random.random() * 0.5)
        next_interval = next_interval * jitter_factor

    return next_interval


def wait_until(
    check_fn: Callable[[], Tuple[bool, T]],
    config: WaitConfig,
    description: str = "Waiting for condition",
) -> T:
    """
    Poll ``check_fn`` until it reports success or the timeout elapses.

    The condition is always evaluated at least once, even with a zero
    timeout. Exceptions raised by ``check_fn`` count as a failed tick.

    Args:
        check_fn: Function that returns (success: bool, result: T)
        config: Wait configuration
        description: Human-readable description for logging

    Returns:
        Result from check_fn when successful

    Raises:
        WaitTimeoutError: If timeout is reached without success
    """
    start_time = time.monotonic()
    current_interval = config.initial_interval
    attempt = 0
    last_result = None
    last_error: Optional[BaseException] = None

    logger.debug(f"Starting wait: {description} (timeout={config.timeout}s)")

    while True:
        attempt += 1

        try:
            success, result = check_fn()
            last_result = result

            if success:
                logger.debug(
                    f"Wait successful after {attempt} attempts "
                    f"({time.monotonic() - start_time:.2f}s): {description}"
                )
                return result

        except Exception as e:
            last_error = e
            logger.warning(f"Attempt {attempt} failed with error: {e}")

        elapsed = time.monotonic() - start_time
        if elapsed >= config.timeout:
            raise WaitTimeoutError(
                f"Timeout after {elapsed:.1f}s waiting for: {description}. "
                f"Last result: {last_result}, Last error: {last_error}",
                last_result=last_result,
                last_error=last_error,
            )

        time.sleep(min(current_interval, max(config.timeout - elapsed, 0)))
        current_interval = calculate_next_interval(current_interval, config)


__all__ = [
    "WaitConfig",
    "WaitTimeoutError",
    "calculate_next_interval",
    "wait_until",
]
