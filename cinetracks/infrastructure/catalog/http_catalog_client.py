# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from cinetracks.infrastructure.catalog.models import (
    Movie,
    MovieDetails,
    TvShowWatchlistEntry,
    WatchlistEntry,
    WatchStatus,
    unwrap_results,
)
from cinetracks.infrastructure.resilience import CircuitBreaker, CircuitOpenError, resilient_call
from cinetracks.shared.config import ResilienceConfig
from cinetracks.shared.errors import (
    CatalogBadResponseError,
    CatalogUnavailableError,
    WatchlistEntryNotFoundError,
)
from cinetracks.shared.logging import logger


class _UpstreamServerError(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"upstream status {status_code}")
        self.status_code = status_code


class HttpCatalogClient:
    """Movie catalog and watchlist calls.

    Reads are retried with backoff behind a circuit breaker. Watchlist writes
    are sent once.
    """

    def __init__(
        self,
        base_url: str,
        *,
        resilience: ResilienceConfig,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._resilience = resilience
        self._breaker = breaker or CircuitBreaker.from_config(resilience, name="catalog")
        self._http: httpx.AsyncClient | None = None

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

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

    # ---------------------------------------------------------------- movies

    async def popular_movies(self, page: int = 1) -> list[Movie]:
        body = await self._read("/api/movie-catalog/movies/popular", params={"page": page})
        return self._parse_list(body, Movie, "popular_movies")

    async def movie_details(self, movie_id: int) -> MovieDetails | None:
        body = await self._read(f"/api/movie-catalog/movies/{movie_id}", allow_not_found=True)
        if body is None:
            return None
        try:
            return MovieDetails.model_validate(body)
        except PydanticValidationError as e:
            logger.warning(f"catalog: invalid movie payload movie_id={movie_id}")
            raise CatalogBadResponseError({"operation": "movie_details"}) from e

    async def search_movies(self, query: str, page: int = 1) -> list[Movie]:
        body = await self._read(
            "/api/movie-catalog/movies/search", params={"query": query, "page": page}
        )
        return self._parse_list(body, Movie, "search_movies")

    # ------------------------------------------------------------- watchlist

    async def movie_watchlist(self, username: str, *, token: str | None = None) -> list[WatchlistEntry]:
        body = await self._read(f"/api/watchlist/movies/{username}", token=token)
        return self._parse_list(body, WatchlistEntry, "movie_watchlist")

    async def add_movie(
        self,
        username: str,
        movie_id: str,
        status: WatchStatus = WatchStatus.PLAN_TO_WATCH,
        *,
        token: str | None = None,
    ) -> WatchlistEntry:
        body = await self._write(
            "POST",
            "/api/watchlist/movies",
            json={"username": username, "movieId": str(movie_id), "status": status.value},
            token=token,
        )
        return self._parse_entry(body, "add_movie")

    async def update_movie_status(
        self,
        username: str,
        movie_id: str,
        status: WatchStatus,
        *,
        token: str | None = None,
    ) -> WatchlistEntry:
        response = await self._send(
            "PUT",
            f"/api/watchlist/movies/{username}/{movie_id}",
            json={"status": status.value},
            token=token,
        )
        if response.status_code == 404:
            raise WatchlistEntryNotFoundError(str(movie_id))
        return self._parse_entry(self._json(response, "update_movie_status"), "update_movie_status")

    async def remove_movie(self, username: str, movie_id: str, *, token: str | None = None) -> None:
        await self._write("DELETE", f"/api/watchlist/movies/{username}/{movie_id}", token=token)
        logger.info(f"catalog: watchlist entry removed movie_id={movie_id}")

    # ----------------------------------------------------------- tv watchlist

    async def tvshow_watchlist(
        self, username: str, *, token: str | None = None
    ) -> list[TvShowWatchlistEntry]:
        body = await self._read(f"/api/watchlist/tvshows/{username}", token=token)
        return self._parse_list(body, TvShowWatchlistEntry, "tvshow_watchlist")

    async def add_tvshow(
        self,
        username: str,
        tv_show_id: str,
        status: WatchStatus = WatchStatus.PLAN_TO_WATCH,
        *,
        token: str | None = None,
    ) -> TvShowWatchlistEntry:
        body = await self._write(
            "POST",
            "/api/watchlist/tvshows",
            json={"username": username, "tvShowId": str(tv_show_id), "status": status.value},
            token=token,
        )
        return self._parse_entry(body, "add_tvshow", TvShowWatchlistEntry)

    async def update_tvshow_status(
        self,
        username: str,
        tv_show_id: str,
        status: WatchStatus,
        current_season: int | None = None,
        current_episode: int | None = None,
        *,
        token: str | None = None,
    ) -> TvShowWatchlistEntry:
        payload: dict[str, Any] = {"status": status.value}
        if current_season is not None:
            payload["currentSeason"] = current_season
        if current_episode is not None:
            payload["currentEpisode"] = current_episode
        response = await self._send(
            "PUT",
            f"/api/watchlist/tvshows/{username}/{tv_show_id}",
            json=payload,
            token=token,
        )
        if response.status_code == 404:
            raise WatchlistEntryNotFoundError(str(tv_show_id), media="tvshow")
        body = self._json(response, "update_tvshow_status")
        return self._parse_entry(body, "update_tvshow_status", TvShowWatchlistEntry)

    async def remove_tvshow(self, username: str, tv_show_id: str, *, token: str | None = None) -> None:
        await self._write("DELETE", f"/api/watchlist/tvshows/{username}/{tv_show_id}", token=token)
        logger.info(f"catalog: watchlist entry removed tv_show_id={tv_show_id}")

    # ------------------------------------------------------------- internals

    @staticmethod
    def _headers(token: str | None) -> dict[str, str] | None:
        return {"Authorization": f"Bearer {token}"} if token else None

    async def _read(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        token: str | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        async def _fetch() -> httpx.Response:
            response = await self._client().get(path, params=params, headers=self._headers(token))
            if response.status_code >= 500:
                raise _UpstreamServerError(response.status_code)
            return response

        try:
            response = await resilient_call(
                _fetch,
                config=self._resilience,
                breaker=self._breaker,
                timeout=self._timeout,
                retry_on=(httpx.TransportError, _UpstreamServerError),
            )
        except CircuitOpenError as e:
            raise CatalogUnavailableError({"path": path, "reason": "circuit_open"}) from e
        except _UpstreamServerError as e:
            logger.warning(f"catalog: upstream error path={path} status={e.status_code}")
            raise CatalogUnavailableError({"path": path, "status": e.status_code}) from e
        except (httpx.HTTPError, TimeoutError) as e:
            logger.warning(f"catalog: unreachable path={path} error={type(e).__name__}")
            raise CatalogUnavailableError({"path": path}) from e

        if response.status_code == 404 and allow_not_found:
            return None
        if not response.is_success:
            raise CatalogBadResponseError({"path": path, "status": response.status_code})
        return self._json(response, path)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client().request(
                method, path, json=json, headers=self._headers(token)
            )
        except httpx.HTTPError as e:
            logger.warning(f"catalog: write failed method={method} path={path} error={type(e).__name__}")
            raise CatalogUnavailableError({"path": path}) from e
        if response.status_code >= 500:
            raise CatalogUnavailableError({"path": path, "status": response.status_code})
        return response

    async def _write(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> Any:
        response = await self._send(method, path, json=json, token=token)
        if not response.is_success:
            raise CatalogBadResponseError({"path": path, "status": response.status_code})
        if not response.content:
            return None
        return self._json(response, path)

    @staticmethod
    def _json(response: httpx.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise CatalogBadResponseError({"operation": operation, "reason": "not_json"}) from e

    @staticmethod
    def _parse_list(body: Any, model: type[Any], operation: str) -> list[Any]:
        try:
            return [model.model_validate(item) for item in unwrap_results(body)]
        except (ValueError, PydanticValidationError) as e:
            logger.warning(f"catalog: invalid list payload operation={operation}")
            raise CatalogBadResponseError({"operation": operation}) from e

    @staticmethod
    def _parse_entry(body: Any, operation: str, model: type[Any] = WatchlistEntry) -> Any:
        try:
            return model.model_validate(body)
        except PydanticValidationError as e:
            raise CatalogBadResponseError({"operation": operation}) from e


__all__ = ["HttpCatalogClient"]
