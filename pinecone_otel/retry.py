"""Bounded polling with a delay between attempts.

Used while provisioning a live index for recording: Pinecone creates indexes
and makes upserted vectors queryable asynchronously, so setup has to wait for
both before it can proceed.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from .exceptions import ConfigurationError, PollingTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to check a condition and how long to wait in between.

    The delay is multiplied by ``backoff`` after every failed attempt and
    capped at ``max_delay`` when one is given.
    """

    max_attempts: int
    delay: float
    backoff: float = 1.0
    max_delay: Optional[float] = None
    sleep: Callable[[float], Any] = field(default=time.sleep, repr=False, compare=False)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.delay < 0 or self.backoff < 1:
            raise ConfigurationError("delay must be >= 0 and backoff >= 1")

    def delays(self):
        """Delays slept between consecutive attempts (``max_attempts - 1`` of them)."""
        delay = self.delay
        for _ in range(self.max_attempts - 1):
            yield min(delay, self.max_delay) if self.max_delay is not None else delay
            delay *= self.backoff

    def poll(self, check: Callable[[], Any], description: str) -> Any:
        """Call `check` until it returns something truthy.

        An exception from `check` counts as "not yet".

        Returns:
            The first truthy value `check` produced.

        Raises:
            PollingTimeoutError: If every attempt came back falsy or raised.
        """
        delays = self.delays()
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = check()
            except Exception as e:
                logger.info("Attempt %d: %s not ready yet (%s)", attempt, description, e)
                result = None
            if result:
                logger.info("%s ready after %d attempts", description, attempt)
                return result
            delay = next(delays, None)
            if delay is not None:
                self.sleep(delay)
        raise PollingTimeoutError(description, self.max_attempts)

    async def apoll(self, check: Callable[[], Awaitable[Any]], description: str) -> Any:
        """Async variant of `poll`; `check` is a coroutine function."""
        delays = self.delays()
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = await check()
            except Exception as e:
                logger.info("Attempt %d: %s not ready yet (%s)", attempt, description, e)
                result = None
            if result:
                logger.info("%s ready after %d attempts", description, attempt)
                return result
            delay = next(delays, None)
            if delay is not None:
                await asyncio.sleep(delay)
        raise PollingTimeoutError(description, self.max_attempts)


INDEX_READY_POLICY = RetryPolicy(max_attempts=60, delay=5.0)
VECTORS_READY_POLICY = RetryPolicy(max_attempts=30, delay=2.0)
