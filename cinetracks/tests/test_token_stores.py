from __future__ import annotations

from pathlib import Path

import pytest

from cinetracks.domain.session import EXPIRY_KEY, TOKEN_KEY, StorageError
from cinetracks.infrastructure.db import build_engine, build_session_factory, init_db
from cinetracks.infrastructure.storage import (
    FileTokenStore,
    InMemoryTokenStore,
    SqlAlchemyTokenStore,
    build_token_store_factory,
)
from cinetracks.shared.config import DatabaseConfig, SessionConfig


def test_memory_store_set_get_remove() -> None:
    store = InMemoryTokenStore()
    store.set(TOKEN_KEY, "tok-1")

    assert store.get(TOKEN_KEY) == "tok-1"
    store.remove(TOKEN_KEY)
    store.remove(TOKEN_KEY)
    assert store.get(TOKEN_KEY) is None


def test_file_store_persists_between_instances(tmp_path: Path) -> None:
    first = FileTokenStore(tmp_path, "client_abc-123")
    first.set(TOKEN_KEY, "tok-1")
    first.set(EXPIRY_KEY, "1700000000000")

    second = FileTokenStore(tmp_path, "client_abc-123")

    assert second.get(TOKEN_KEY) == "tok-1"
    assert second.get(EXPIRY_KEY) == "1700000000000"
    assert FileTokenStore(tmp_path, "someone_else").get(TOKEN_KEY) is None


def test_file_store_removes_file_when_empty(tmp_path: Path) -> None:
    store = FileTokenStore(tmp_path, "client1")
    store.set(TOKEN_KEY, "tok-1")
    assert store.path.exists()

    store.remove(TOKEN_KEY)

    assert not store.path.exists()


def test_file_store_treats_corrupt_file_as_empty(tmp_path: Path) -> None:
    store = FileTokenStore(tmp_path, "client1")
    store.path.write_text("{not json", encoding="utf-8")

    assert store.get(TOKEN_KEY) is None
    store.set(TOKEN_KEY, "tok-1")
    assert store.get(TOKEN_KEY) == "tok-1"


@pytest.mark.parametrize("client_id", ["../escape", "", "a/b", "x" * 65])
def test_file_store_rejects_unsafe_client_ids(tmp_path: Path, client_id: str) -> None:
    with pytest.raises(StorageError):
        FileTokenStore(tmp_path, client_id)


@pytest.fixture()
def session_factory():
    engine = build_engine(DatabaseConfig(url="sqlite:///:memory:"))
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


def test_sqlalchemy_store_upserts_and_isolates_clients(session_factory) -> None:
    alice = SqlAlchemyTokenStore("alice-client", session_factory)
    bob = SqlAlchemyTokenStore("bob-client", session_factory)

    alice.set(TOKEN_KEY, "tok-1")
    alice.set(TOKEN_KEY, "tok-2")
    bob.set(TOKEN_KEY, "tok-b")

    assert alice.get(TOKEN_KEY) == "tok-2"
    assert bob.get(TOKEN_KEY) == "tok-b"

    alice.remove(TOKEN_KEY)

    assert alice.get(TOKEN_KEY) is None
    assert bob.get(TOKEN_KEY) == "tok-b"


def test_store_factory_follows_config(tmp_path: Path, session_factory) -> None:
    memory = build_token_store_factory(SessionConfig(store="memory"))
    files = build_token_store_factory(SessionConfig(store="file", store_dir=tmp_path))
    database = build_token_store_factory(
        SessionConfig(store="database"), session_factory=lambda: session_factory
    )

    assert isinstance(memory("client1"), InMemoryTokenStore)
    assert isinstance(files("client1"), FileTokenStore)
    assert isinstance(database("client1"), SqlAlchemyTokenStore)


def test_database_store_factory_requires_sessions() -> None:
    with pytest.raises(ValueError):
        build_token_store_factory(SessionConfig(store="database"))
