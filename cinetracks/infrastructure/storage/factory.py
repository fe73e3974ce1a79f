# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session, sessionmaker

from cinetracks.domain.session import TokenStore
from cinetracks.infrastructure.storage.file_store import FileTokenStore
from cinetracks.infrastructure.storage.memory_store import InMemoryTokenStore
from cinetracks.infrastructure.storage.sqlalchemy_store import SqlAlchemyTokenStore
from cinetracks.shared.config import SessionConfig

TokenStoreFactory = Callable[[str], TokenStore]


def build_token_store_factory(
    config: SessionConfig,
    *,
    session_factory: Callable[[], sessionmaker[Session]] | None = None,
) -> TokenStoreFactory:
    """Return a callable producing the configured store for a client id."""
    if config.store == "memory":
        return lambda client_id: InMemoryTokenStore()

    if config.store == "database":
        if session_factory is None:
            raise ValueError("database token store requires a session factory")
        return lambda client_id: SqlAlchemyTokenStore(client_id, session_factory())

    return lambda client_id: FileTokenStore(config.store_dir, client_id)
