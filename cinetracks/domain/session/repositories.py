# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

TOKEN_KEY = "auth_token"
EXPIRY_KEY = "token_expiry"

# Wall clock in epoch milliseconds
Clock = Callable[[], int]


class TokenStore(Protocol):
    """Persisted key/value entries for one client."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...
