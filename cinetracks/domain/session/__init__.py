# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import SessionSnapshot, SessionState, StoredToken, TokenGrant, User
from .exceptions import (
    EventLoopError,
    InvariantViolation,
    MalformedResponseError,
    RejectedError,
    SessionError,
    StorageError,
    TransportError,
)
from .repositories import EXPIRY_KEY, TOKEN_KEY, Clock, TokenStore
from .results import AuthResult, FailureKind

__all__ = [
    "AuthResult",
    "Clock",
    "EXPIRY_KEY",
    "EventLoopError",
    "InvariantViolation",
    "FailureKind",
    "MalformedResponseError",
    "RejectedError",
    "SessionError",
    "SessionSnapshot",
    "SessionState",
    "StorageError",
    "StoredToken",
    "TOKEN_KEY",
    "TokenGrant",
    "TokenStore",
    "TransportError",
    "User",
]
