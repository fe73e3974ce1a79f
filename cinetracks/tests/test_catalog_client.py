from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from cinetracks.infrastructure.catalog import HttpCatalogClient, WatchStatus
from cinetracks.infrastructure.resilience import CircuitBreaker
from cinetracks.shared.config import ResilienceConfig
from cinetracks.shared.errors import (
    CatalogBadResponseError,
    CatalogUnavailableError,
    WatchlistEntryNotFoundError,
)

MOVIE = {
    "id": 550,
    "title": "Fight Club",
    "overview": "An insomniac office worker...",
    "poster_path": "/poster.jpg",
    "backdrop_path": "/backdrop.jpg",
    "release_date": "1999-10-15",
    "vote_average": 8.4,
    "genre_ids": [18],
}


def fast_resilience(**overrides) -> ResilienceConfig:
    values = {
        "max_retries": 2,
        "backoff_base": 0.01,
        "backoff_cap": 0.02,
        "circuit_fail_threshold": 5,
        "circuit_reset_timeout": 60.0,
    }
    values.update(overrides)
    return ResilienceConfig(**values)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response], **resilience
) -> HttpCatalogClient:
    return HttpCatalogClient(
        "http://catalog.test",
        resilience=fast_resilience(**resilience),
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[MOVIE], {"page": 1, "results": [MOVIE]}])
async def test_popular_movies_accepts_list_and_page(body) -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["page"] = request.url.params["page"]
        return httpx.Response(200, json=body)

    client = make_client(handler)
    movies = await client.popular_movies(page=2)
    await client.aclose()

    assert [m.title for m in movies] == ["Fight Club"]
    assert movies[0].genre_ids == [18]
    assert seen == {"path": "/api/movie-catalog/movies/popular", "page": "2"}


@pytest.mark.asyncio
async def test_search_passes_query() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json=[])

    client = make_client(handler)
    movies = await client.search_movies("fight club")

    assert movies == []
    assert seen == {"query": "fight club", "page": "1"}


@pytest.mark.asyncio
async def test_movie_details_parses_nested_fields() -> None:
    details = dict(
        MOVIE,
        vote_count=27000,
        runtime=139,
        genres=[{"id": 18, "name": "Drama"}],
        trailerUrl="https://youtube.com/watch?v=x",
        credits={"cast": [{"id": 1, "name": "Edward Norton", "character": "Narrator"}], "crew": []},
        similar={"results": [dict(MOVIE, id=551, title="Se7en")]},
    )
    client = make_client(lambda request: httpx.Response(200, json=details))

    movie = await client.movie_details(550)

    assert movie is not None
    assert movie.runtime == 139
    assert movie.genres[0].name == "Drama"
    assert movie.trailer_url == "https://youtube.com/watch?v=x"
    assert movie.credits is not None and movie.credits.cast[0].name == "Edward Norton"
    assert movie.similar is not None and movie.similar.results[0].title == "Se7en"


@pytest.mark.asyncio
async def test_movie_details_not_found_returns_none() -> None:
    client = make_client(lambda request: httpx.Response(404))

    assert await client.movie_details(1) is None


@pytest.mark.asyncio
async def test_reads_retry_server_errors() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json=[MOVIE])

    client = make_client(handler)
    movies = await client.popular_movies()

    assert len(attempts) == 3
    assert len(movies) == 1
    assert client.breaker.is_open is False


@pytest.mark.asyncio
async def test_reads_give_up_after_retries() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        raise httpx.ConnectError("down", request=request)

    client = make_client(handler, max_retries=1)

    with pytest.raises(CatalogUnavailableError):
        await client.popular_movies()
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_client_errors_are_not_retried() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(400, json={"message": "bad page"})

    client = make_client(handler)

    with pytest.raises(CatalogBadResponseError):
        await client.popular_movies(page=0)
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_open_breaker_short_circuits() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(500)

    client = HttpCatalogClient(
        "http://catalog.test",
        resilience=fast_resilience(max_retries=0),
        transport=httpx.MockTransport(handler),
        breaker=CircuitBreaker(failure_threshold=1, reset_timeout=60.0, name="test"),
    )

    with pytest.raises(CatalogUnavailableError):
        await client.popular_movies()
    with pytest.raises(CatalogUnavailableError):
        await client.popular_movies()

    assert len(attempts) == 1
    assert client.breaker.is_open is True


@pytest.mark.asyncio
async def test_watchlist_calls_send_token_and_payload() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "POST":
            body = json.loads(request.content)
            return httpx.Response(201, json=dict(body, id=7, createdAt=1, updatedAt=1))
        if request.method == "GET":
            return httpx.Response(
                200, json=[{"id": 7, "username": "alice", "movieId": "550", "status": "WATCHING"}]
            )
        return httpx.Response(204)

    client = make_client(handler)
    entry = await client.add_movie("alice", "550", WatchStatus.WATCHING, token="tok-1")
    entries = await client.movie_watchlist("alice", token="tok-1")
    await client.remove_movie("alice", "550", token="tok-1")

    assert entry.movie_id == "550"
    assert entry.status == WatchStatus.WATCHING
    assert entries[0].username == "alice"
    assert json.loads(requests[0].content) == {
        "username": "alice",
        "movieId": "550",
        "status": "WATCHING",
    }
    assert [r.url.path for r in requests] == [
        "/api/watchlist/movies",
        "/api/watchlist/movies/alice",
        "/api/watchlist/movies/alice/550",
    ]
    assert all(r.headers["Authorization"] == "Bearer tok-1" for r in requests)


@pytest.mark.asyncio
async def test_update_status_of_missing_entry() -> None:
    client = make_client(lambda request: httpx.Response(404))

    with pytest.raises(WatchlistEntryNotFoundError):
        await client.update_movie_status("alice", "550", WatchStatus.COMPLETED)


@pytest.mark.asyncio
async def test_watchlist_write_server_error_is_single_attempt() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(502)

    client = make_client(handler)

    with pytest.raises(CatalogUnavailableError):
        await client.add_movie("alice", "550")
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_tvshow_watchlist_paths_and_progress_payload() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "POST":
            return httpx.Response(201, json=dict(json.loads(request.content), id=3))
        if request.method == "PUT":
            body = json.loads(request.content)
            return httpx.Response(
                200, json=dict(body, id=3, username="alice", tvShowId=1399)
            )
        if request.method == "GET":
            return httpx.Response(
                200,
                json=[
                    {
                        "id": 3,
                        "username": "alice",
                        "tvShowId": 1399,
                        "status": "WATCHING",
                        "currentSeason": 1,
                        "currentEpisode": 4,
                    }
                ],
            )
        return httpx.Response(204)

    client = make_client(handler)
    added = await client.add_tvshow("alice", "1399", token="tok-1")
    progressed = await client.update_tvshow_status(
        "alice", "1399", WatchStatus.WATCHING, current_season=2, current_episode=5, token="tok-1"
    )
    finished = await client.update_tvshow_status("alice", "1399", WatchStatus.COMPLETED, token="tok-1")
    entries = await client.tvshow_watchlist("alice", token="tok-1")
    await client.remove_tvshow("alice", "1399", token="tok-1")

    assert added.tv_show_id == "1399"
    assert added.status == WatchStatus.PLAN_TO_WATCH
    assert (progressed.current_season, progressed.current_episode) == (2, 5)
    assert finished.current_season is None
    assert entries[0].tv_show_id == "1399"
    assert entries[0].current_episode == 4
    assert json.loads(requests[1].content) == {
        "status": "WATCHING",
        "currentSeason": 2,
        "currentEpisode": 5,
    }
    assert json.loads(requests[2].content) == {"status": "COMPLETED"}
    assert [r.url.path for r in requests] == [
        "/api/watchlist/tvshows",
        "/api/watchlist/tvshows/alice/1399",
        "/api/watchlist/tvshows/alice/1399",
        "/api/watchlist/tvshows/alice",
        "/api/watchlist/tvshows/alice/1399",
    ]
    assert all(r.headers["Authorization"] == "Bearer tok-1" for r in requests)


@pytest.mark.asyncio
async def test_update_missing_tvshow_entry() -> None:
    client = make_client(lambda request: httpx.Response(404))

    with pytest.raises(WatchlistEntryNotFoundError) as exc_info:
        await client.update_tvshow_status("alice", "1399", WatchStatus.DROPPED)
    assert exc_info.value.context == {"media": "tvshow", "id": "1399"}
