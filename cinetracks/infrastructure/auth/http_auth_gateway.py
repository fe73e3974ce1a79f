# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from cinetracks.domain.session import (
    AuthResult,
    FailureKind,
    InvariantViolation,
    MalformedResponseError,
    RejectedError,
    TokenGrant,
    TransportError,
    User,
)
from cinetracks.infrastructure.auth.payloads import (
    ErrorPayload,
    ProfileEnvelope,
    TokenGrantPayload,
    UpdateGrantPayload,
)
from cinetracks.shared.logging import logger

T = TypeVar("T")

TRANSPORT_FAILURE = "Unable to reach the authentication service"
MALFORMED_RESPONSE = "Unexpected response from the authentication service"


class HttpAuthGateway:
    """httpx client for the auth service. Every call resolves to an ``AuthResult``."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def login(self, username: str, password: str) -> AuthResult[TokenGrant]:
        return await self._call(
            "login",
            "POST",
            "/api/auth/login",
            json={"username": username, "password": password},
            failure_message="Login failed",
            parse=lambda body: TokenGrantPayload.model_validate(body).to_grant(),
        )

    async def register(self, username: str, password: str, role: str) -> AuthResult[TokenGrant]:
        return await self._call(
            "register",
            "POST",
            "/api/auth/register",
            json={"username": username, "password": password, "role": role},
            failure_message="Registration failed",
            parse=lambda body: TokenGrantPayload.model_validate(body).to_grant(),
        )

    async def fetch_user(self, token: str) -> AuthResult[User]:
        return await self._call(
            "fetch_user",
            "GET",
            "/api/auth/user",
            token=token,
            failure_message="Failed to fetch user details",
            parse=lambda body: ProfileEnvelope.model_validate(body).user.to_user(),
        )

    async def update_user(
        self,
        token: str,
        *,
        username: str,
        email: str | None = None,
        password: str | None = None,
    ) -> AuthResult[TokenGrant]:
        payload: dict[str, Any] = {"username": username}
        if email is not None:
            payload["email"] = email
        if password is not None:
            payload["password"] = password
        return await self._call(
            "update_user",
            "PUT",
            "/api/auth/user",
            json=payload,
            token=token,
            failure_message="Failed to update user",
            parse=lambda body: UpdateGrantPayload.model_validate(body).to_grant(),
        )

    async def delete_user(self, token: str) -> AuthResult[None]:
        return await self._call(
            "delete_user",
            "DELETE",
            "/api/auth/user",
            token=token,
            failure_message="Failed to delete user",
            parse=lambda body: None,
            allow_empty=True,
        )

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        failure_message: str,
        parse: Callable[[Any], T],
        json: dict[str, Any] | None = None,
        token: str | None = None,
        allow_empty: bool = False,
    ) -> AuthResult[T]:
        try:
            body = await self._request(
                method,
                path,
                json=json,
                token=token,
                failure_message=failure_message,
                allow_empty=allow_empty,
            )
            value = parse(body)
        except RejectedError as e:
            logger.info(f"auth.gateway: {operation} rejected status={e.status_code}")
            return AuthResult.fail(e.message, FailureKind.REJECTED, e.status_code)
        except TransportError as e:
            logger.warning(f"auth.gateway: {operation} transport failure code={e.error_code}")
            return AuthResult.fail(TRANSPORT_FAILURE, FailureKind.TRANSPORT)
        except MalformedResponseError:
            logger.warning(f"auth.gateway: {operation} malformed response")
            return AuthResult.fail(MALFORMED_RESPONSE, FailureKind.MALFORMED)
        except (PydanticValidationError, InvariantViolation) as e:
            logger.warning(f"auth.gateway: {operation} invalid payload error={type(e).__name__}")
            return AuthResult.fail(MALFORMED_RESPONSE, FailureKind.MALFORMED)
        return AuthResult.ok(value)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        failure_message: str,
        json: dict[str, Any] | None = None,
        token: str | None = None,
        allow_empty: bool = False,
    ) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            response = await self._client().request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError("Auth service timed out", error_code="timeout") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Auth service unreachable: {type(e).__name__}", error_code="network") from e

        if not response.is_success:
            raise RejectedError(
                self._error_message(response) or failure_message,
                status_code=response.status_code,
                context={"path": path},
            )

        if not response.content:
            if allow_empty:
                return {}
            raise MalformedResponseError("Empty response body", error_code="empty_body")
        try:
            return response.json()
        except ValueError as e:
            if allow_empty:
                return {}
            raise MalformedResponseError("Response body is not JSON", error_code="not_json") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        try:
            message = ErrorPayload.model_validate(body).message
        except PydanticValidationError:
            return None
        return message or None


__all__ = ["HttpAuthGateway", "MALFORMED_RESPONSE", "TRANSPORT_FAILURE"]
