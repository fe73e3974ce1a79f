# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from cinetracks.domain.session import EventLoopError
from cinetracks.shared.logging import logger

T = TypeVar("T")


class EventLoopManager:
    """Runs one asyncio loop on a daemon thread for blocking callers."""

    def __init__(self, *, name: str = "SessionEventLoop", call_timeout: float | None = 60.0) -> None:
        self._loop: asyncio.AbstractEventLoop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, daemon=True, name=name)
        self._call_timeout = call_timeout
        self._started = False

        logger.debug(f"EventLoopManager: creating thread name={self._thread.name}")
        self._thread.start()
        self._started = True

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def running(self) -> bool:
        return self._started and self._loop.is_running()

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        thread_name = threading.current_thread().name
        logger.debug(f"EventLoopManager: loop runner start thread={thread_name}")
        try:
            self._loop.run_forever()
        except Exception:
            logger.exception(f"EventLoopManager: loop error thread={thread_name}")
        finally:
            logger.debug(f"EventLoopManager: loop runner stop thread={thread_name}")

    def run(self, coro: Coroutine[Any, Any, T]) -> T:  # noqa: UP047
        """Submit ``coro`` to the loop and block until it finishes."""
        if not self._started:
            coro.close()
            raise EventLoopError("Event loop not started", error_code="loop_not_started")
        if threading.current_thread() is self._thread:
            coro.close()
            raise EventLoopError("run() called from the loop thread", error_code="reentrant_call")

        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        try:
            return future.result(timeout=self._call_timeout)
        except TimeoutError as e:
            future.cancel()
            logger.error(f"EventLoopManager: call timed out thread={self._thread.name}")
            raise EventLoopError("Coroutine timed out", error_code="timeout") from e

    def call(self, fn: Callable[[], T]) -> T:  # noqa: UP047
        """Run a plain callable on the loop thread and return its result."""

        async def _invoke() -> T:
            return fn()

        return self.run(_invoke())

    def stop(self) -> None:
        if not self._started:
            logger.debug("EventLoopManager: already stopped")
            return

        logger.debug(f"EventLoopManager: stopping thread={self._thread.name}")
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=2.0)
        self._started = False
        if not self._thread.is_alive():
            self._loop.close()
        logger.debug(f"EventLoopManager: stopped thread={self._thread.name}")
