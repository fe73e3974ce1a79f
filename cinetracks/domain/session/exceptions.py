# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from typing import Any


class SessionError(Exception):
    def __init__(self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class TransportError(SessionError):
    pass


class MalformedResponseError(SessionError):
    pass


class RejectedError(SessionError):
    def __init__(self, message: str, status_code: int, context: dict[str, Any] | None = None):
        super().__init__(message, error_code="rejected", context=context)
        self.status_code = status_code


class StorageError(SessionError):
    pass


class EventLoopError(SessionError):
    pass


class InvariantViolationError(ValueError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {super().__str__()}"
        return super().__str__()


InvariantViolation = InvariantViolationError
