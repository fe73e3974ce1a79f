# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from cinetracks.domain.session import StorageError
from cinetracks.infrastructure.db import session_scope
from cinetracks.infrastructure.db.models import ClientStorageEntry
from cinetracks.shared.logging import logger


class SqlAlchemyTokenStore:
    def __init__(self, client_id: str, session_factory: sessionmaker[Session]) -> None:
        self._client_id = client_id
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with session_scope(self._session_factory) as db:
                return db.scalar(
                    select(ClientStorageEntry.value).where(
                        ClientStorageEntry.client_id == self._client_id,
                        ClientStorageEntry.key == key,
                    )
                )
        except SQLAlchemyError as e:
            raise StorageError("Failed to read client storage", error_code="db_read_failed") from e

    def set(self, key: str, value: str) -> None:
        try:
            with session_scope(self._session_factory) as db:
                entry = db.scalar(
                    select(ClientStorageEntry).where(
                        ClientStorageEntry.client_id == self._client_id,
                        ClientStorageEntry.key == key,
                    )
                )
                if entry is None:
                    db.add(ClientStorageEntry(client_id=self._client_id, key=key, value=value))
                else:
                    entry.value = value
        except SQLAlchemyError as e:
            raise StorageError("Failed to write client storage", error_code="db_write_failed") from e
        logger.debug(f"SqlAlchemyTokenStore: set key={key}")

    def remove(self, key: str) -> None:
        try:
            with session_scope(self._session_factory) as db:
                db.execute(
                    delete(ClientStorageEntry).where(
                        ClientStorageEntry.client_id == self._client_id,
                        ClientStorageEntry.key == key,
                    )
                )
        except SQLAlchemyError as e:
            raise StorageError("Failed to remove client storage", error_code="db_delete_failed") from e
