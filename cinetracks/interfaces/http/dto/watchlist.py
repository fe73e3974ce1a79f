# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from cinetracks.infrastructure.catalog.models import WatchStatus
from cinetracks.shared.errors.validation_types import ValidationErrorType


def _parse_status(value: Any) -> WatchStatus:
    try:
        return WatchStatus(str(value).strip().upper())
    except ValueError:
        raise PydanticCustomError(
            ValidationErrorType.WATCH_STATUS_INVALID,
            "Unknown watch status",
            {"allowed": ", ".join(s.value for s in WatchStatus)}
        ) from None


class AddToWatchlistDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    movie_id: str = Field(alias="movieId", min_length=1, max_length=32)
    status: WatchStatus = WatchStatus.PLAN_TO_WATCH

    @field_validator("movie_id", mode="before")
    @classmethod
    def coerce_movie_id(cls, value: Any) -> str:
        return str(value).strip() if value is not None else ""

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, value: Any) -> WatchStatus:
        return _parse_status(value)


class UpdateWatchStatusDTO(BaseModel):
    status: WatchStatus

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, value: Any) -> WatchStatus:
        return _parse_status(value)


class AddTvShowDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tv_show_id: str = Field(alias="tvShowId", min_length=1, max_length=32)
    status: WatchStatus = WatchStatus.PLAN_TO_WATCH

    @field_validator("tv_show_id", mode="before")
    @classmethod
    def coerce_tv_show_id(cls, value: Any) -> str:
        return str(value).strip() if value is not None else ""

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, value: Any) -> WatchStatus:
        return _parse_status(value)


class UpdateTvShowStatusDTO(UpdateWatchStatusDTO):
    model_config = ConfigDict(populate_by_name=True)

    current_season: int | None = Field(default=None, alias="currentSeason", ge=1)
    current_episode: int | None = Field(default=None, alias="currentEpisode", ge=1)


class PageQueryDTO(BaseModel):
    page: int = Field(default=1, ge=1, le=500)


class SearchQueryDTO(PageQueryDTO):
    query: str = Field(min_length=1, max_length=200)
