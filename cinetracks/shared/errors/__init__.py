# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import (
    AppError,
    CatalogBadResponseError,
    CatalogUnavailableError,
    DomainError,
    InfrastructureError,
    MovieNotFoundError,
    NotAuthenticatedError,
    ValidationError,
    WatchlistEntryNotFoundError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "CatalogBadResponseError",
    "CatalogUnavailableError",
    "DomainError",
    "InfrastructureError",
    "MovieNotFoundError",
    "NotAuthenticatedError",
    "ValidationError",
    "WatchlistEntryNotFoundError",
    "handle_app_error",
    "register_error_handler",
]
