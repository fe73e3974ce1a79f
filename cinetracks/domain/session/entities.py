# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Session entities for one CineTracks client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .exceptions import InvariantViolation


class SessionState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"

    @property
    def is_authenticated(self) -> bool:
        return self is SessionState.AUTHENTICATED


@dataclass(slots=True, frozen=True)
class User:
    username: str
    role: str
    email: str | None = None

    def __post_init__(self) -> None:
        if not self.username or not self.username.strip():
            raise InvariantViolation("username must not be empty", field="username")

    def to_dict(self) -> dict[str, Any]:
        return {"username": self.username, "email": self.email, "role": self.role}


@dataclass(slots=True, frozen=True)
class TokenGrant:
    """Token issued by the auth service together with its time-to-live."""

    token: str
    expires_in_ms: int
    username: str | None = None
    email: str | None = None

    def __post_init__(self) -> None:
        if not self.token:
            raise InvariantViolation("token must not be empty", field="token")
        if self.expires_in_ms < 0:
            raise InvariantViolation("expiresIn must be non-negative", field="expires_in_ms")


@dataclass(slots=True, frozen=True)
class StoredToken:
    token: str
    expires_at: int

    def is_expired(self, now: int) -> bool:
        # A token whose expiry equals "now" is already unusable
        return now >= self.expires_at


@dataclass(slots=True, frozen=True)
class SessionSnapshot:
    state: SessionState
    user: User | None
    is_loading: bool
    error: str | None
    expires_at: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "authenticated": self.state.is_authenticated,
            "user": self.user.to_dict() if self.user else None,
            "isLoading": self.is_loading,
            "error": self.error,
            "expiresAt": self.expires_at,
        }
