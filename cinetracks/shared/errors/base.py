# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(code=resolved_code, status=resolved_status, context=context)


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, context=context)


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )


class NotAuthenticatedError(AppError):
    def __init__(self, redirect: str = "/login") -> None:
        super().__init__(
            code="unauthenticated",
            status=HTTPStatus.UNAUTHORIZED,
            context={"redirect": redirect},
        )


class MovieNotFoundError(AppError):
    def __init__(self, movie_id: int) -> None:
        super().__init__(
            code="movie_not_found",
            status=HTTPStatus.NOT_FOUND,
            context={"movie_id": movie_id},
        )


class WatchlistEntryNotFoundError(AppError):
    def __init__(self, item_id: str, *, media: str = "movie") -> None:
        super().__init__(
            code="watchlist_entry_not_found",
            status=HTTPStatus.NOT_FOUND,
            context={"media": media, "id": item_id},
        )


class CatalogUnavailableError(InfrastructureError):
    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            "catalog_unavailable",
            status=HTTPStatus.BAD_GATEWAY,
            context=context,
        )


class CatalogBadResponseError(InfrastructureError):
    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            "catalog_bad_response",
            status=HTTPStatus.BAD_GATEWAY,
            context=context,
        )
