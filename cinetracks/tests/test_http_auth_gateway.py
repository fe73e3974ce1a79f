from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from cinetracks.domain.session import FailureKind, TokenGrant, User
from cinetracks.infrastructure.auth import MALFORMED_RESPONSE, TRANSPORT_FAILURE, HttpAuthGateway

BASE_URL = "http://auth.test"


def make_gateway(handler: Callable[[httpx.Request], httpx.Response]) -> HttpAuthGateway:
    return HttpAuthGateway(BASE_URL, timeout=2.0, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_login_parses_token_grant() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200, json={"message": "Login successful", "token": "tok-1", "expiresIn": 86400000}
        )

    gateway = make_gateway(handler)
    result = await gateway.login("alice", "secret")
    await gateway.aclose()

    assert result.success is True
    assert result.value == TokenGrant(token="tok-1", expires_in_ms=86400000)
    assert seen == {"path": "/api/auth/login", "body": {"username": "alice", "password": "secret"}}


@pytest.mark.asyncio
async def test_login_rejection_uses_server_message() -> None:
    gateway = make_gateway(lambda request: httpx.Response(401, json={"message": "Invalid credentials"}))

    result = await gateway.login("alice", "wrong")

    assert result.success is False
    assert result.kind == FailureKind.REJECTED
    assert result.error == "Invalid credentials"
    assert result.http_status == 401


@pytest.mark.asyncio
async def test_rejection_without_message_uses_default() -> None:
    gateway = make_gateway(lambda request: httpx.Response(500, text="<html>oops</html>"))

    result = await gateway.register("bob", "secret", "USER")

    assert result.kind == FailureKind.REJECTED
    assert result.error == "Registration failed"
    assert result.http_status == 500


@pytest.mark.asyncio
async def test_transport_failure_is_generic() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = make_gateway(handler)
    result = await gateway.login("alice", "secret")

    assert result.kind == FailureKind.TRANSPORT
    assert result.error == TRANSPORT_FAILURE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"expiresIn": 1000}),
        httpx.Response(200, json={"token": "tok-1", "expiresIn": -5}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=["token"]),
    ],
)
async def test_malformed_login_response(response: httpx.Response) -> None:
    gateway = make_gateway(lambda request: response)

    result = await gateway.login("alice", "secret")

    assert result.kind == FailureKind.MALFORMED
    assert result.error == MALFORMED_RESPONSE


@pytest.mark.asyncio
async def test_fetch_user_sends_bearer_and_parses_envelope() -> None:
    seen: dict[str, str | None] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(
            200,
            json={"message": "Details obtained successfully", "user": {"username": "alice", "role": "USER"}},
        )

    gateway = make_gateway(handler)
    result = await gateway.fetch_user("tok-1")

    assert result.value == User(username="alice", role="USER")
    assert seen["auth"] == "Bearer tok-1"


@pytest.mark.asyncio
async def test_fetch_user_without_user_is_malformed() -> None:
    gateway = make_gateway(lambda request: httpx.Response(200, json={"message": "ok"}))

    result = await gateway.fetch_user("tok-1")

    assert result.kind == FailureKind.MALFORMED


@pytest.mark.asyncio
async def test_update_user_omits_absent_fields() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200, json={"username": "alice", "token": "tok-2", "expiresIn": 86400000}
        )

    gateway = make_gateway(handler)
    first = await gateway.update_user("tok-1", username="alice", email="a@x.com")
    second = await gateway.update_user("tok-2", username="alice", password="new-secret")

    assert bodies == [
        {"username": "alice", "email": "a@x.com"},
        {"username": "alice", "password": "new-secret"},
    ]
    assert first.value is not None
    assert first.value.username == "alice"
    assert second.success is True


@pytest.mark.asyncio
async def test_update_user_requires_username_in_response() -> None:
    gateway = make_gateway(
        lambda request: httpx.Response(200, json={"token": "tok-2", "expiresIn": 1000})
    )

    result = await gateway.update_user("tok-1", username="alice")

    assert result.kind == FailureKind.MALFORMED


@pytest.mark.asyncio
async def test_update_conflict_message() -> None:
    gateway = make_gateway(
        lambda request: httpx.Response(
            409, json={"message": "Username already exists", "error": "CONFLICT"}
        )
    )

    result = await gateway.update_user("tok-1", username="taken")

    assert result.error == "Username already exists"
    assert result.http_status == 409


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"message": "User deleted successfully", "username": "alice"}),
        httpx.Response(204),
    ],
)
async def test_delete_user_accepts_any_success_body(response: httpx.Response) -> None:
    gateway = make_gateway(lambda request: response)

    result = await gateway.delete_user("tok-1")

    assert result.success is True
    assert result.value is None
