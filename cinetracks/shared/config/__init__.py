# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import (
    AppConfig,
    AuthServiceConfig,
    CatalogServiceConfig,
    DatabaseConfig,
    ResilienceConfig,
    SecurityConfig,
    SessionConfig,
    load_config,
)

__all__ = [
    "AppConfig",
    "AuthServiceConfig",
    "CatalogServiceConfig",
    "DatabaseConfig",
    "ResilienceConfig",
    "SecurityConfig",
    "SessionConfig",
    "load_config",
]
