# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class FailureKind(StrEnum):
    REJECTED = "rejected"
    TRANSPORT = "transport"
    MALFORMED = "malformed"
    UNAUTHENTICATED = "unauthenticated"
    EXPIRED = "expired"
    STORAGE = "storage"


@dataclass(frozen=True)
class AuthResult(Generic[T]):  # noqa: UP046
    success: bool
    value: T | None = None
    error: str | None = None
    kind: FailureKind | None = None
    http_status: int | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "AuthResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(
        cls,
        error: str,
        kind: FailureKind,
        http_status: int | None = None,
    ) -> "AuthResult[T]":
        return cls(success=False, error=error, kind=kind, http_status=http_status)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"ok": True}
        result: dict[str, Any] = {"ok": False, "error": self.error, "kind": str(self.kind)}
        if self.http_status is not None:
            result["upstreamStatus"] = self.http_status
        return result
