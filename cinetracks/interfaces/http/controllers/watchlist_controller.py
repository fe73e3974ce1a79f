# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, request

from cinetracks.infrastructure.catalog import HttpCatalogClient
from cinetracks.interfaces.http.dto.watchlist import (
    AddToWatchlistDTO,
    AddTvShowDTO,
    UpdateTvShowStatusDTO,
    UpdateWatchStatusDTO,
)
from cinetracks.interfaces.http.session_context import SessionContext
from cinetracks.shared.errors.validation import parse_payload
from cinetracks.shared.logging import logger


class WatchlistController:
    def __init__(self, *, context: SessionContext, catalog: HttpCatalogClient) -> None:
        self._context = context
        self._catalog = catalog

    # ---------------------------------------------------------------- movies

    def list_movies(self) -> tuple[Response, int]:
        session, user = self._context.require_user()
        token = self._context.token(session)
        entries = self._context.run(self._catalog.movie_watchlist(user.username, token=token))
        return self._context.respond(
            session, {"results": [e.model_dump(mode="json", by_alias=True) for e in entries]}
        )

    def add_movie(self) -> tuple[Response, int]:
        dto = parse_payload(AddToWatchlistDTO, request.get_json(silent=True))
        session, user = self._context.require_user()
        token = self._context.token(session)
        entry = self._context.run(
            self._catalog.add_movie(user.username, dto.movie_id, dto.status, token=token)
        )
        logger.info(f"watchlist.add: ok movie_id={dto.movie_id} status={dto.status}")
        return self._context.respond(
            session, {"entry": entry.model_dump(mode="json", by_alias=True)}, HTTPStatus.CREATED
        )

    def update_movie(self, movie_id: str) -> tuple[Response, int]:
        dto = parse_payload(UpdateWatchStatusDTO, request.get_json(silent=True))
        session, user = self._context.require_user()
        token = self._context.token(session)
        entry = self._context.run(
            self._catalog.update_movie_status(user.username, movie_id, dto.status, token=token)
        )
        logger.info(f"watchlist.update: ok movie_id={movie_id} status={dto.status}")
        return self._context.respond(session, {"entry": entry.model_dump(mode="json", by_alias=True)})

    def remove_movie(self, movie_id: str) -> tuple[Response, int]:
        session, user = self._context.require_user()
        token = self._context.token(session)
        self._context.run(self._catalog.remove_movie(user.username, movie_id, token=token))
        return self._context.respond(session, {"ok": True})

    # -------------------------------------------------------------- tv shows

    def list_tvshows(self) -> tuple[Response, int]:
        session, user = self._context.require_user()
        token = self._context.token(session)
        entries = self._context.run(self._catalog.tvshow_watchlist(user.username, token=token))
        return self._context.respond(
            session, {"results": [e.model_dump(mode="json", by_alias=True) for e in entries]}
        )

    def add_tvshow(self) -> tuple[Response, int]:
        dto = parse_payload(AddTvShowDTO, request.get_json(silent=True))
        session, user = self._context.require_user()
        token = self._context.token(session)
        entry = self._context.run(
            self._catalog.add_tvshow(user.username, dto.tv_show_id, dto.status, token=token)
        )
        logger.info(f"watchlist.add: ok tv_show_id={dto.tv_show_id} status={dto.status}")
        return self._context.respond(
            session, {"entry": entry.model_dump(mode="json", by_alias=True)}, HTTPStatus.CREATED
        )

    def update_tvshow(self, tv_show_id: str) -> tuple[Response, int]:
        dto = parse_payload(UpdateTvShowStatusDTO, request.get_json(silent=True))
        session, user = self._context.require_user()
        token = self._context.token(session)
        entry = self._context.run(
            self._catalog.update_tvshow_status(
                user.username,
                tv_show_id,
                dto.status,
                dto.current_season,
                dto.current_episode,
                token=token,
            )
        )
        logger.info(
            f"watchlist.update: ok tv_show_id={tv_show_id} status={dto.status} "
            f"season={dto.current_season} episode={dto.current_episode}"
        )
        return self._context.respond(session, {"entry": entry.model_dump(mode="json", by_alias=True)})

    def remove_tvshow(self, tv_show_id: str) -> tuple[Response, int]:
        session, user = self._context.require_user()
        token = self._context.token(session)
        self._context.run(self._catalog.remove_tvshow(user.username, tv_show_id, token=token))
        return self._context.respond(session, {"ok": True})

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("watchlist", __name__, url_prefix="/api/watchlist")
        bp.add_url_rule("/movies", view_func=self.list_movies, methods=["GET"])
        bp.add_url_rule("/movies", view_func=self.add_movie, methods=["POST"])
        bp.add_url_rule("/movies/<movie_id>", view_func=self.update_movie, methods=["PUT"])
        bp.add_url_rule("/movies/<movie_id>", view_func=self.remove_movie, methods=["DELETE"])
        bp.add_url_rule("/tvshows", view_func=self.list_tvshows, methods=["GET"])
        bp.add_url_rule("/tvshows", view_func=self.add_tvshow, methods=["POST"])
        bp.add_url_rule("/tvshows/<tv_show_id>", view_func=self.update_tvshow, methods=["PUT"])
        bp.add_url_rule("/tvshows/<tv_show_id>", view_func=self.remove_tvshow, methods=["DELETE"])
        return bp
