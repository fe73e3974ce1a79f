from __future__ import annotations

from collections.abc import Iterator

import pytest
from fakes import FakeGateway

from cinetracks.infrastructure.event_loop_manager import EventLoopManager
from cinetracks.infrastructure.session_registry import SessionRegistry
from cinetracks.infrastructure.storage import build_token_store_factory
from cinetracks.shared.config import SessionConfig

IDLE_TIMEOUT = 60.0


class FakeMonotonic:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def loop() -> Iterator[EventLoopManager]:
    manager = EventLoopManager(name="RegistryTestLoop", call_timeout=5.0)
    yield manager
    manager.stop()


@pytest.fixture()
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def registry(loop: EventLoopManager, gateway: FakeGateway, monotonic: FakeMonotonic) -> SessionRegistry:
    config = SessionConfig(store="memory", idle_timeout_seconds=IDLE_TIMEOUT)
    return SessionRegistry(
        loop=loop,
        gateway=gateway,
        store_factory=build_token_store_factory(config),
        config=config,
        monotonic=monotonic,
    )


def sign_in(registry: SessionRegistry, client_id: str) -> None:
    session = registry.get_or_create(client_id)
    result = registry.loop.run(session.manager.login("alice", "secret"))
    assert result.success


def test_new_client_starts_signed_out(registry: SessionRegistry, gateway: FakeGateway) -> None:
    session = registry.get_or_create("client-a")

    assert registry.get_or_create("client-a") is session
    assert registry.active_count() == 1
    assert registry.authenticated_count() == 0
    # Empty store, nothing to verify upstream
    assert gateway.calls == []


def test_release_keeps_authenticated_client(registry: SessionRegistry) -> None:
    sign_in(registry, "client-a")

    assert registry.release("client-a") is False
    assert registry.authenticated_count() == 1

    session = registry.get("client-a")
    assert session is not None
    registry.loop.call(session.manager.logout)

    assert registry.release("client-a") is True
    assert registry.get("client-a") is None
    assert registry.release("client-a") is False


def test_prune_drops_only_idle_signed_out_clients(
    registry: SessionRegistry, monotonic: FakeMonotonic
) -> None:
    registry.get_or_create("anonymous")
    sign_in(registry, "signed-in")

    monotonic.now += IDLE_TIMEOUT - 1
    assert registry.prune_idle() == 0

    monotonic.now += 2
    assert registry.prune_idle() == 1
    assert registry.get("anonymous") is None
    assert registry.get("signed-in") is not None
    assert registry.authenticated_count() == 1


def test_recent_activity_postpones_pruning(
    registry: SessionRegistry, monotonic: FakeMonotonic
) -> None:
    registry.get_or_create("client-a")

    monotonic.now += IDLE_TIMEOUT - 5
    registry.get_or_create("client-a")
    monotonic.now += 10

    assert registry.prune_idle() == 0
    assert registry.active_count() == 1


def test_creating_a_client_prunes_stale_ones(
    registry: SessionRegistry, monotonic: FakeMonotonic
) -> None:
    for n in range(20):
        registry.get_or_create(f"stale-{n}")

    monotonic.now += IDLE_TIMEOUT + 1
    registry.get_or_create("fresh")

    assert registry.active_count() == 1
    assert registry.get("fresh") is not None
