# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from flask import Blueprint, jsonify

from cinetracks.infrastructure.session_registry import SessionRegistry


class MiscController:
    def __init__(
        self,
        *,
        registry: SessionRegistry,
        database_check: Callable[[], bool] | None = None,
    ) -> None:
        self._registry = registry
        self._database_check = database_check

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {
            "ok": True,
            "eventLoop": "ok" if self._registry.loop.running else "stopped",
            "sessions": self._registry.active_count(),
        }
        if self._registry.loop.running:
            status["authenticated"] = self._registry.authenticated_count()
        else:
            status["ok"] = False
        if self._database_check is not None:
            try:
                self._database_check()
                status["database"] = "ok"
            except Exception as exc:  # pragma: no cover
                status["ok"] = False
                status["database"] = f"error: {type(exc).__name__}"
        return jsonify(status)
