# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .http_catalog_client import HttpCatalogClient
from .models import Movie, MovieDetails, TvShowWatchlistEntry, WatchlistEntry, WatchStatus

__all__ = [
    "HttpCatalogClient",
    "Movie",
    "MovieDetails",
    "TvShowWatchlistEntry",
    "WatchStatus",
    "WatchlistEntry",
]
