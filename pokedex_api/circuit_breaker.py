"""Circuit breaker for outbound calls to the reference data provider.

After ``failure_threshold`` consecutive failures the breaker opens and calls
fail immediately with :class:`CircuitOpenError` until ``recovery_timeout``
seconds have passed. The next call is then let through in HALF_OPEN state;
``half_open_successes`` successes close the breaker again, any failure
re-opens it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Coroutine, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

CLOSED = "CLOSED"
OPEN = "OPEN"
HALF_OPEN = "HALF_OPEN"


class CircuitOpenError(Exception):
    """Raised instead of calling through while the breaker is open."""


class CircuitBreaker:
    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60,
        expected_exception: Tuple[Type[BaseException], ...] = (Exception,),
        name: str = "CircuitBreaker",
        half_open_successes: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception
        self.name = name
        self.half_open_successes = half_open_successes

        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = CLOSED
        self._success_count = 0
        self._clock = clock
        self._lock = asyncio.Lock()

    async def call(
        self, func: Callable[..., Coroutine[Any, Any, T]], *args: Any, **kwargs: Any
    ) -> T:
        """Await ``func(*args, **kwargs)`` under breaker protection."""
        async with self._lock:
            if self.state == OPEN:
                elapsed = self._clock() - (self.last_failure_time or 0.0)
                if elapsed < self.recovery_timeout:
                    raise CircuitOpenError(
                        f"Circuit breaker '{self.name}' is OPEN - service unavailable"
                    )
                self.state = HALF_OPEN
                self._success_count = 0
                logger.info("[CircuitBreaker:%s] transitioned to HALF_OPEN", self.name)

        try:
            result = await func(*args, **kwargs)
        except self.expected_exception:
            await self._on_failure()
            raise
        await self._on_success()
        return result

    async def _on_success(self) -> None:
        async with self._lock:
            if self.state == HALF_OPEN:
                self._success_count += 1
                if self._success_count >= self.half_open_successes:
                    self.reset()
            else:
                self.failure_count = 0

    async def _on_failure(self) -> None:
        async with self._lock:
            self.failure_count += 1
            self.last_failure_time = self._clock()
            logger.warning(
                "[CircuitBreaker:%s] failure %d/%d",
                self.name,
                self.failure_count,
                self.failure_threshold,
            )
            if self.state == HALF_OPEN or self.failure_count >= self.failure_threshold:
                self.state = OPEN
                logger.error("[CircuitBreaker:%s] transitioned to OPEN", self.name)

    def reset(self) -> None:
        """Reset circuit breaker to CLOSED state."""
        self.failure_count = 0
        self._success_count = 0
        self.state = CLOSED
        logger.info("[CircuitBreaker:%s] reset to CLOSED", self.name)

    def get_stats(self) -> dict:
        return {
            "name": self.name,
            "state": self.state,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "recovery_timeout": self.recovery_timeout,
            "last_failure_time": self.last_failure_time,
        }


def create_http_circuit_breaker(name: str = "HTTP") -> CircuitBreaker:
    return CircuitBreaker(
        failure_threshold=3,
        recovery_timeout=30,
        expected_exception=(Exception,),
        name=name,
    )
