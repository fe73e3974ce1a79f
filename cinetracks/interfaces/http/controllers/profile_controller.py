# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, request

from cinetracks.interfaces.http.dto.profile import PasswordChangeDTO, ProfileUpdateDTO
from cinetracks.interfaces.http.session_context import SessionContext
from cinetracks.shared.errors.validation import parse_payload
from cinetracks.shared.logging import logger
from cinetracks.shared.middleware.rate_limit import rate_limit


class ProfileController:
    def __init__(self, *, context: SessionContext) -> None:
        self._context = context

    def show(self) -> tuple[Response, int]:
        session, user = self._context.require_user()
        return self._context.respond(session, {"user": user.to_dict()})

    def update(self) -> tuple[Response, int]:
        dto = parse_payload(ProfileUpdateDTO, request.get_json(silent=True))
        session, _ = self._context.require_user()

        result = self._context.run(session.manager.update_user(dto.username, dto.email))
        if not result.success:
            logger.info(f"profile.update: failed kind={result.kind}")
            return self._context.respond_result(session, result)

        logger.info("profile.update: ok")
        payload = {
            "user": result.value.to_dict() if result.value else None,
            "message": "Profile updated successfully",
        }
        return self._context.respond_result(session, result, payload)

    @rate_limit(limit=5, window_seconds=60.0)
    def change_password(self) -> tuple[Response, int]:
        dto = parse_payload(PasswordChangeDTO, request.get_json(silent=True))
        session, _ = self._context.require_user()

        result = self._context.run(
            session.manager.change_password(dto.current_password, dto.new_password)
        )
        if not result.success:
            logger.info(f"profile.password: failed kind={result.kind}")
            return self._context.respond_result(session, result)

        logger.info("profile.password: ok")
        return self._context.respond_result(
            session, result, {"message": "Password changed successfully"}
        )

    def delete(self) -> tuple[Response, int]:
        session, _ = self._context.require_user()

        result = self._context.run(session.manager.delete_user())
        logger.info(f"profile.delete: success={result.success} kind={result.kind}")
        return self._context.respond_result(session, result)

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("profile", __name__, url_prefix="/api/profile")
        bp.add_url_rule("", view_func=self.show, methods=["GET"])
        bp.add_url_rule("", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule("/password", view_func=self.change_password, methods=["PUT"])
        return bp
