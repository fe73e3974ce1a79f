# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Retries with backoff and a circuit breaker for idempotent upstream reads."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cinetracks.shared.config import ResilienceConfig
from cinetracks.shared.logging import logger

T = TypeVar("T")


class CircuitOpenError(RuntimeError):
    pass


@dataclass
class CircuitBreaker:
    failure_threshold: int
    reset_timeout: float
    name: str = "upstream"

    def __post_init__(self) -> None:
        self._failures = 0
        self._opened_at: float | None = None

    @classmethod
    def from_config(cls, config: ResilienceConfig, *, name: str = "upstream") -> "CircuitBreaker":
        return cls(
            failure_threshold=config.circuit_fail_threshold,
            reset_timeout=config.circuit_reset_timeout,
            name=name,
        )

    @property
    def is_open(self) -> bool:
        return self._opened_at is not None

    def allow(self) -> bool:
        if self._opened_at is None:
            return True
        if time.monotonic() - self._opened_at >= self.reset_timeout:
            logger.info(f"breaker: half-open name={self.name}")
            self._opened_at = None
            self._failures = 0
            return True
        logger.warning(f"breaker: open, refusing call name={self.name}")
        return False

    def on_success(self) -> None:
        self._failures = 0
        self._opened_at = None

    def on_failure(self) -> None:
        self._failures += 1
        if self._failures >= self.failure_threshold and self._opened_at is None:
            self._opened_at = time.monotonic()
            logger.error(f"breaker: opening circuit name={self.name} failures={self._failures}")


async def resilient_call(  # noqa: UP047
    func: Callable[..., Awaitable[T]],
    *args: Any,
    config: ResilienceConfig,
    breaker: CircuitBreaker | None = None,
    timeout: float | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> T:
    """Run ``func`` with a per-attempt timeout, bounded retries and a breaker.

    Only exceptions listed in ``retry_on`` are retried; anything else
    propagates after the first attempt. The breaker counts one failure per
    exhausted call, not per attempt.
    """
    if breaker is not None and not breaker.allow():
        raise CircuitOpenError(f"Circuit breaker is open: {breaker.name}")

    timeout = timeout or config.default_timeout
    retry_types = tuple(retry_on) + (asyncio.TimeoutError,)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.max_retries + 1),
        wait=wait_exponential(multiplier=config.backoff_base, max=config.backoff_cap),
        retry=retry_if_exception_type(retry_types),
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                logger.debug(
                    f"resilience: attempt={attempt.retry_state.attempt_number} "
                    f"func={getattr(func, '__name__', 'call')}"
                )
                result = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
    except Exception:
        if breaker is not None:
            breaker.on_failure()
        raise

    if breaker is not None:
        breaker.on_success()
    return result


__all__ = ["CircuitBreaker", "CircuitOpenError", "resilient_call"]
