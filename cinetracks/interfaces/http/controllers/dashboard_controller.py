# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response

from cinetracks.interfaces.http.session_context import SessionContext

SIDEBAR_ITEMS: tuple[dict[str, str | None], ...] = (
    {"id": "home", "label": "Home", "href": "/home"},
    {"id": "watchlist", "label": "Watchlist", "href": None},
    {"id": "movies", "label": "Movies", "href": None},
    {"id": "tv", "label": "TV Shows", "href": None},
    {"id": "ratings", "label": "My Ratings", "href": None},
    {"id": "calendar", "label": "Calendar", "href": None},
)


class DashboardController:
    def __init__(self, *, context: SessionContext) -> None:
        self._context = context

    def index(self) -> tuple[Response, int]:
        session, user = self._context.require_user()
        return self._context.respond(
            session,
            {
                "user": user.to_dict(),
                "sidebar": [dict(item) for item in SIDEBAR_ITEMS],
                "profileHref": "/dashboard/profile",
            },
        )

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")
        bp.add_url_rule("", view_func=self.index, methods=["GET"])
        return bp
