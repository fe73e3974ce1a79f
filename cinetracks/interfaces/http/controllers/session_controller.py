# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, request

from cinetracks.interfaces.http.dto.auth import LoginRequestDTO, RegisterRequestDTO
from cinetracks.interfaces.http.session_context import SessionContext
from cinetracks.shared.errors.validation import parse_payload
from cinetracks.shared.logging import logger
from cinetracks.shared.middleware.rate_limit import rate_limit


class SessionController:
    def __init__(self, *, context: SessionContext) -> None:
        self._context = context

    def state(self) -> tuple[Response, int]:
        session = self._context.current()
        return self._context.respond(session)

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        dto = parse_payload(LoginRequestDTO, request.get_json(silent=True))
        session = self._context.current()

        result = self._context.run(session.manager.login(dto.username, dto.password))
        if result.success:
            logger.info("session.login: ok")
        else:
            logger.info(f"session.login: failed kind={result.kind}")
        return self._context.respond_result(session, result)

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        dto = parse_payload(RegisterRequestDTO, request.get_json(silent=True))
        session = self._context.current()

        result = self._context.run(session.manager.register(dto.username, dto.password, dto.role))
        if result.success:
            logger.info("session.register: ok")
            return self._context.respond_result(session, result, success_status=HTTPStatus.CREATED)
        logger.info(f"session.register: failed kind={result.kind}")
        return self._context.respond_result(session, result)

    def logout(self) -> tuple[Response, int]:
        session = self._context.current()
        self._context.call(session.manager.logout)
        logger.info("session.logout: ok")
        return self._context.respond(session, {"ok": True})

    def clear_error(self) -> tuple[Response, int]:
        session = self._context.current()
        self._context.call(session.manager.clear_error)
        return self._context.respond(session, {"ok": True})

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("session", __name__, url_prefix="/api/session")
        bp.add_url_rule("", view_func=self.state, methods=["GET"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/error", view_func=self.clear_error, methods=["DELETE"])
        return bp
