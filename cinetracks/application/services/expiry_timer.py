# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio
from collections.abc import Callable

from cinetracks.shared.logging import logger


class ExpiryTimer:
    """One-shot cancellable timer bound to the running event loop."""

    def __init__(self, callback: Callable[[], None], *, name: str = "session") -> None:
        self._callback = callback
        self._name = name
        self._handle: asyncio.TimerHandle | None = None
        self._delay: float | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None and not self._handle.cancelled()

    @property
    def delay(self) -> float | None:
        """Seconds between arming and firing, ``None`` when disarmed."""
        return self._delay if self.armed else None

    def arm(self, delay: float) -> None:
        if delay <= 0:
            raise ValueError("expiry timer delay must be positive")
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire)
        self._delay = delay
        logger.debug(f"ExpiryTimer: armed name={self._name} delay={delay:.1f}s")

    def cancel(self) -> bool:
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        self._delay = None
        logger.debug(f"ExpiryTimer: cancelled name={self._name}")
        return True

    def _fire(self) -> None:
        self._handle = None
        self._delay = None
        logger.info(f"ExpiryTimer: fired name={self._name}")
        try:
            self._callback()
        except Exception:
            logger.exception(f"ExpiryTimer: callback failed name={self._name}")
