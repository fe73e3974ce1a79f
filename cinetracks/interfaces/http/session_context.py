# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from collections.abc import Callable, Coroutine
from http import HTTPStatus
from typing import Any, TypeVar

from flask import Flask, Response, g, jsonify, request

from cinetracks.domain.session import AuthResult, FailureKind, SessionSnapshot, SessionState, User
from cinetracks.infrastructure.session_registry import ClientSession, SessionRegistry
from cinetracks.shared.config import AppConfig
from cinetracks.shared.errors import NotAuthenticatedError

T = TypeVar("T")

_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{16,64}$")

_FAILURE_STATUS: dict[FailureKind, HTTPStatus] = {
    FailureKind.TRANSPORT: HTTPStatus.BAD_GATEWAY,
    FailureKind.MALFORMED: HTTPStatus.BAD_GATEWAY,
    FailureKind.UNAUTHENTICATED: HTTPStatus.UNAUTHORIZED,
    FailureKind.EXPIRED: HTTPStatus.UNAUTHORIZED,
    FailureKind.STORAGE: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def status_for(result: AuthResult) -> int:
    if result.success:
        return HTTPStatus.OK
    if result.kind == FailureKind.REJECTED:
        status = result.http_status or HTTPStatus.BAD_REQUEST
        # Upstream 5xx stays a gateway problem from the browser's point of view
        return HTTPStatus.BAD_GATEWAY if status >= 500 else status
    if result.kind is None:
        return HTTPStatus.BAD_REQUEST
    return _FAILURE_STATUS.get(result.kind, HTTPStatus.BAD_REQUEST)


class SessionContext:
    """Per-request access to the caller's ``SessionManager``.

    The browser is identified by an opaque client-id cookie; a fresh id is
    issued on the first request that needs a session.
    """

    def __init__(self, registry: SessionRegistry, config: AppConfig) -> None:
        self._registry = registry
        self._config = config

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    @property
    def cookie_name(self) -> str:
        return self._config.session.cookie_name

    def install(self, app: Flask) -> None:
        app.after_request(self._persist_cookie)

    def client_id(self) -> str | None:
        value = request.cookies.get(self.cookie_name)
        if value and _CLIENT_ID_RE.match(value):
            return value
        return None

    def current(self) -> ClientSession:
        cached = g.get("client_session")
        if cached is not None:
            return cached

        client_id = self.client_id()
        if client_id is None:
            client_id = self._registry.new_client_id()
            g.issue_client_cookie = client_id

        # A known cookie after a restart is restored from the store here
        session = self._registry.get_or_create(client_id)
        g.client_id = client_id
        g.client_session = session
        return session

    def snapshot(self, session: ClientSession) -> SessionSnapshot:
        return self._registry.loop.call(session.manager.snapshot)

    def require_user(self) -> tuple[ClientSession, User]:
        # Without a cookie there is nothing to restore, so no manager is built
        if self.client_id() is None:
            raise NotAuthenticatedError(self._config.session.login_path)

        session = self.current()
        snapshot = self.snapshot(session)
        if not snapshot.state.is_authenticated or snapshot.user is None:
            self._registry.release(session.client_id)
            raise NotAuthenticatedError(self._config.session.login_path)
        return session, snapshot.user

    def token(self, session: ClientSession) -> str | None:
        return self._registry.loop.call(lambda: session.manager.token)

    def run(self, coro: Coroutine[Any, Any, T]) -> T:  # noqa: UP047
        return self._registry.loop.run(coro)

    def call(self, fn: Callable[[], T]) -> T:  # noqa: UP047
        return self._registry.loop.call(fn)

    def respond(
        self,
        session: ClientSession,
        payload: dict[str, Any] | None = None,
        status: int = HTTPStatus.OK,
    ) -> tuple[Response, int]:
        body: dict[str, Any] = dict(payload or {})
        snapshot = self.snapshot(session)
        body["session"] = snapshot.to_dict()
        redirect = session.navigator.take()
        if redirect is not None:
            body["redirect"] = redirect
        if snapshot.state == SessionState.UNAUTHENTICATED and snapshot.error is None:
            self._registry.release(session.client_id)
        return jsonify(body), status

    def respond_result(
        self,
        session: ClientSession,
        result: AuthResult,
        payload: dict[str, Any] | None = None,
        *,
        success_status: int = HTTPStatus.OK,
    ) -> tuple[Response, int]:
        body = result.to_dict()
        body.update(payload or {})
        status = success_status if result.success else status_for(result)
        return self.respond(session, body, status)

    def _persist_cookie(self, response: Response) -> Response:
        client_id = g.get("issue_client_cookie")
        if client_id:
            security = self._config.security
            response.set_cookie(
                self.cookie_name,
                client_id,
                httponly=True,
                samesite=security.cookie_samesite,
                secure=security.cookie_secure,
                max_age=self._config.session.cookie_max_age,
            )
        return response


__all__ = ["SessionContext", "status_for"]
