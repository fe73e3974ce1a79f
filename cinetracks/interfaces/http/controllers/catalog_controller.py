# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from cinetracks.infrastructure.catalog import HttpCatalogClient
from cinetracks.interfaces.http.dto.watchlist import PageQueryDTO, SearchQueryDTO
from cinetracks.interfaces.http.session_context import SessionContext
from cinetracks.shared.errors import MovieNotFoundError
from cinetracks.shared.errors.validation import parse_payload


class CatalogController:
    def __init__(self, *, context: SessionContext, catalog: HttpCatalogClient) -> None:
        self._context = context
        self._catalog = catalog

    def popular(self) -> Response:
        query = parse_payload(PageQueryDTO, request.args.to_dict())
        movies = self._context.run(self._catalog.popular_movies(query.page))
        return jsonify(
            {
                "page": query.page,
                "results": [m.model_dump(mode="json", by_alias=True) for m in movies],
            }
        )

    def search(self) -> Response:
        query = parse_payload(SearchQueryDTO, request.args.to_dict())
        movies = self._context.run(self._catalog.search_movies(query.query, query.page))
        return jsonify(
            {
                "page": query.page,
                "query": query.query,
                "results": [m.model_dump(mode="json", by_alias=True) for m in movies],
            }
        )

    def details(self, movie_id: int) -> Response:
        movie = self._context.run(self._catalog.movie_details(movie_id))
        if movie is None:
            raise MovieNotFoundError(movie_id)
        return jsonify(movie.model_dump(mode="json", by_alias=True))

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("catalog", __name__, url_prefix="/api/movies")
        bp.add_url_rule("/popular", view_func=self.popular, methods=["GET"])
        bp.add_url_rule("/search", view_func=self.search, methods=["GET"])
        bp.add_url_rule("/<int:movie_id>", view_func=self.details, methods=["GET"])
        return bp
