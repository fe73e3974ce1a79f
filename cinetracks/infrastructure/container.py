# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

import httpx
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from cinetracks.domain.session import Clock
from cinetracks.infrastructure.auth import HttpAuthGateway
from cinetracks.infrastructure.catalog import HttpCatalogClient
from cinetracks.infrastructure.db import (
    build_engine,
    build_session_factory,
    check_database,
    init_db,
)
from cinetracks.infrastructure.event_loop_manager import EventLoopManager
from cinetracks.infrastructure.session_registry import SessionRegistry
from cinetracks.infrastructure.storage import TokenStoreFactory, build_token_store_factory
from cinetracks.interfaces.http.controllers.catalog_controller import CatalogController
from cinetracks.interfaces.http.controllers.dashboard_controller import DashboardController
from cinetracks.interfaces.http.controllers.misc_controller import MiscController
from cinetracks.interfaces.http.controllers.profile_controller import ProfileController
from cinetracks.interfaces.http.controllers.session_controller import SessionController
from cinetracks.interfaces.http.controllers.watchlist_controller import WatchlistController
from cinetracks.interfaces.http.session_context import SessionContext
from cinetracks.shared.config import AppConfig, load_config
from cinetracks.shared.logging import logger


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        auth_transport: httpx.AsyncBaseTransport | None = None,
        catalog_transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config or load_config()
        self._auth_transport = auth_transport
        self._catalog_transport = catalog_transport
        self._clock = clock

    @property
    def uses_database(self) -> bool:
        return self.config.session.store == "database"

    @cached_property
    def event_loop(self) -> EventLoopManager:
        return EventLoopManager()

    @cached_property
    def engine(self) -> Engine:
        engine = build_engine(self.config.database)
        init_db(engine)
        return engine

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    @cached_property
    def auth_gateway(self) -> HttpAuthGateway:
        return HttpAuthGateway(
            self.config.auth.base_url,
            timeout=self.config.auth.timeout,
            transport=self._auth_transport,
        )

    @cached_property
    def catalog_client(self) -> HttpCatalogClient:
        return HttpCatalogClient(
            self.config.catalog.base_url,
            resilience=self.config.resilience,
            timeout=self.config.catalog.timeout,
            transport=self._catalog_transport,
        )

    @cached_property
    def token_store_factory(self) -> TokenStoreFactory:
        return build_token_store_factory(
            self.config.session, session_factory=lambda: self.session_factory
        )

    @cached_property
    def session_registry(self) -> SessionRegistry:
        return SessionRegistry(
            loop=self.event_loop,
            gateway=self.auth_gateway,
            store_factory=self.token_store_factory,
            config=self.config.session,
            clock=self._clock,
        )

    @cached_property
    def session_context(self) -> SessionContext:
        return SessionContext(self.session_registry, self.config)

    @cached_property
    def session_controller(self) -> SessionController:
        return SessionController(context=self.session_context)

    @cached_property
    def profile_controller(self) -> ProfileController:
        return ProfileController(context=self.session_context)

    @cached_property
    def dashboard_controller(self) -> DashboardController:
        return DashboardController(context=self.session_context)

    @cached_property
    def catalog_controller(self) -> CatalogController:
        return CatalogController(context=self.session_context, catalog=self.catalog_client)

    @cached_property
    def watchlist_controller(self) -> WatchlistController:
        return WatchlistController(context=self.session_context, catalog=self.catalog_client)

    @cached_property
    def misc_controller(self) -> MiscController:
        database_check = (lambda: check_database(self.engine)) if self.uses_database else None
        return MiscController(registry=self.session_registry, database_check=database_check)

    def shutdown(self) -> None:
        if "event_loop" not in self.__dict__:
            return
        loop = self.event_loop
        if loop.running:
            for client in (self.__dict__.get("auth_gateway"), self.__dict__.get("catalog_client")):
                if client is not None:
                    try:
                        loop.run(client.aclose())
                    except Exception:
                        logger.exception("container: failed to close http client")
        loop.stop()
        logger.info("container: shut down")
