# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from cinetracks.application.interfaces import AuthGateway
from cinetracks.application.services.session_manager import SessionManager
from cinetracks.domain.session import Clock
from cinetracks.infrastructure.event_loop_manager import EventLoopManager
from cinetracks.infrastructure.navigation import RecordingNavigator
from cinetracks.infrastructure.storage import TokenStoreFactory
from cinetracks.shared.config import SessionConfig
from cinetracks.shared.logging import logger


@dataclass(frozen=True, slots=True)
class ClientSession:
    client_id: str
    manager: SessionManager
    navigator: RecordingNavigator


class SessionRegistry:
    """Owns one ``SessionManager`` per browser client.

    Managers are created and driven on the shared event loop thread, so the
    expiry timers they arm live there too. A signed-out manager is released
    once a response without a pending error has been rendered for it; any
    left behind are pruned after ``idle_timeout_seconds``.
    """

    def __init__(
        self,
        *,
        loop: EventLoopManager,
        gateway: AuthGateway,
        store_factory: TokenStoreFactory,
        config: SessionConfig,
        clock: Clock | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loop = loop
        self._gateway = gateway
        self._store_factory = store_factory
        self._config = config
        self._clock = clock
        self._monotonic = monotonic
        self._sessions: dict[str, ClientSession] = {}
        self._last_seen: dict[str, float] = {}
        self._lock = threading.Lock()
        logger.debug("SessionRegistry: initialized")

    @property
    def loop(self) -> EventLoopManager:
        return self._loop

    @staticmethod
    def new_client_id() -> str:
        return secrets.token_urlsafe(16)

    def get(self, client_id: str) -> ClientSession | None:
        with self._lock:
            return self._sessions.get(client_id)

    def get_or_create(self, client_id: str) -> ClientSession:
        with self._lock:
            self._last_seen[client_id] = self._monotonic()
            existing = self._sessions.get(client_id)
            if existing is not None:
                return existing

        self.prune_idle()

        with self._lock:
            existing = self._sessions.get(client_id)
            if existing is not None:
                return existing
            session = self._loop.call(lambda: self._build(client_id))
            self._sessions[client_id] = session
            self._last_seen[client_id] = self._monotonic()

        logger.debug("SessionRegistry: client session created")
        self._loop.run(session.manager.restore())
        return session

    def release(self, client_id: str) -> bool:
        """Forget a client whose manager holds no token and is not mid-operation."""
        with self._lock:
            session = self._sessions.get(client_id)
            if session is None or not self._loop.call(lambda: session.manager.is_idle):
                return False
            self._drop(client_id)
        logger.debug("SessionRegistry: signed-out client released")
        return True

    def prune_idle(self) -> int:
        """Release signed-out clients not seen for ``idle_timeout_seconds``."""
        cutoff = self._monotonic() - self._config.idle_timeout_seconds
        with self._lock:
            stale = [cid for cid, seen in self._last_seen.items() if seen <= cutoff]
            pruned = 0
            for client_id in stale:
                session = self._sessions.get(client_id)
                if session is None:
                    self._last_seen.pop(client_id, None)
                    continue
                if self._loop.call(lambda s=session: s.manager.is_idle):
                    self._drop(client_id)
                    pruned += 1
        if pruned:
            logger.info(f"SessionRegistry: pruned idle clients count={pruned}")
        return pruned

    def active_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def authenticated_count(self) -> int:
        with self._lock:
            sessions = list(self._sessions.values())
        return self._loop.call(
            lambda: sum(1 for s in sessions if s.manager.state.is_authenticated)
        )

    def _drop(self, client_id: str) -> None:
        self._sessions.pop(client_id, None)
        self._last_seen.pop(client_id, None)

    def _build(self, client_id: str) -> ClientSession:
        navigator = RecordingNavigator()
        manager = SessionManager(
            self._gateway,
            self._store_factory(client_id),
            navigator=navigator,
            expiry_margin_ms=int(self._config.expiry_margin_seconds * 1000),
            landing_path=self._config.landing_path,
            login_path=self._config.login_path,
            clock=self._clock,
            name=client_id[:8],
        )
        return ClientSession(client_id=client_id, manager=manager, navigator=navigator)


__all__ = ["ClientSession", "SessionRegistry"]
