# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WatchStatus(StrEnum):
    PLAN_TO_WATCH = "PLAN_TO_WATCH"
    WATCHING = "WATCHING"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"


class _CatalogModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Genre(_CatalogModel):
    id: int
    name: str


class CastMember(_CatalogModel):
    id: int
    name: str
    character: str | None = None
    profile_path: str | None = None


class CrewMember(_CatalogModel):
    id: int
    name: str
    job: str | None = None
    profile_path: str | None = None


class Credits(_CatalogModel):
    cast: list[CastMember] = Field(default_factory=list)
    crew: list[CrewMember] = Field(default_factory=list)


class Movie(_CatalogModel):
    id: int
    title: str
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    vote_average: float | None = None
    genre_ids: list[int] = Field(default_factory=list)
    trailer_url: str | None = Field(default=None, alias="trailerUrl")


class SimilarMovies(_CatalogModel):
    results: list[Movie] = Field(default_factory=list)


class MovieDetails(Movie):
    vote_count: int | None = None
    popularity: float | None = None
    runtime: int | None = None
    budget: int | None = None
    revenue: int | None = None
    genres: list[Genre] = Field(default_factory=list)
    tagline: str | None = None
    status: str | None = None
    homepage: str | None = None
    credits: Credits | None = None
    similar: SimilarMovies | None = None


class WatchlistEntry(_CatalogModel):
    id: int | None = None
    username: str
    movie_id: str = Field(alias="movieId")
    status: WatchStatus
    created_at: int | None = Field(default=None, alias="createdAt")
    updated_at: int | None = Field(default=None, alias="updatedAt")

    @field_validator("movie_id", mode="before")
    @classmethod
    def _coerce_movie_id(cls, value: Any) -> str:
        return str(value)


class TvShowWatchlistEntry(_CatalogModel):
    id: int | None = None
    username: str
    tv_show_id: str = Field(alias="tvShowId")
    status: WatchStatus
    current_season: int | None = Field(default=None, alias="currentSeason")
    current_episode: int | None = Field(default=None, alias="currentEpisode")
    created_at: int | None = Field(default=None, alias="createdAt")
    updated_at: int | None = Field(default=None, alias="updatedAt")

    @field_validator("tv_show_id", mode="before")
    @classmethod
    def _coerce_tv_show_id(cls, value: Any) -> str:
        return str(value)


def unwrap_results(body: Any) -> list[Any]:
    """Accept both a bare JSON array and a ``{"results": [...]}`` page."""
    if isinstance(body, list):
        return body
    if isinstance(body, dict) and isinstance(body.get("results"), list):
        return body["results"]
    raise ValueError("expected a list of results")


__all__ = [
    "CastMember",
    "Credits",
    "CrewMember",
    "Genre",
    "Movie",
    "MovieDetails",
    "SimilarMovies",
    "TvShowWatchlistEntry",
    "WatchStatus",
    "WatchlistEntry",
    "unwrap_results",
]
