"""Retry with exponential backoff for calls to external services."""

import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple, Type, TypeVar

from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

DEFAULT_MAX_RETRIES = 2


@dataclass(frozen=True)
class Backoff:
    """Delay schedule between attempts.

    Yields base_delay, base_delay * factor, ... capped at max_delay, once per
    retry. max_retries=0 means a single attempt.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = 0.5  # seconds
    max_delay: float = 8.0  # seconds
    factor: float = 2.0

    def delays(self) -> Iterator[float]:
        delay = self.base_delay
        for _ in range(self.max_retries):
            yield delay
            delay = min(delay * self.factor, self.max_delay)


def retry_call(
    func: Callable[[], T],
    backoff: Backoff = Backoff(),
    *,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    should_retry: Optional[Callable[[Exception], bool]] = None,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
    name: str = "",
) -> T:
    """
    Call func until it succeeds or the backoff schedule runs out.

    Args:
        func: Zero-argument callable to run
        backoff: Delay schedule between attempts
        exceptions: Exception types that count as a failed attempt
        should_retry: Predicate deciding whether a caught exception is worth
            another attempt; anything it rejects is re-raised immediately
        on_retry: Optional callback called on each retry with (exception, attempt)
        name: Label used in log messages

    Returns:
        The first successful result

    Raises:
        The last caught exception once retries are exhausted
    """
    label = name or getattr(func, "__name__", "call")
    delays = backoff.delays()
    attempt = 0

    while True:
        try:
            return func()
        except exceptions as e:
            if should_retry is not None and not should_retry(e):
                logger.debug(f"Not retrying {label}: {e}")
                raise

            delay = next(delays, None)
            if delay is None:
                if backoff.max_retries:
                    logger.warning(
                        f"All {backoff.max_retries} retries exhausted for {label}: {e}"
                    )
                raise

            attempt += 1
            logger.debug(
                f"Retry {attempt}/{backoff.max_retries} for {label} in {delay:.1f}s: {e}"
            )
            if on_retry:
                on_retry(e, attempt)
            time.sleep(delay)
