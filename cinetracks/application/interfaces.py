# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from cinetracks.domain.session import AuthResult, TokenGrant, User


class AuthGateway(Protocol):
    async def login(self, username: str, password: str) -> AuthResult[TokenGrant]: ...

    async def register(
        self, username: str, password: str, role: str
    ) -> AuthResult[TokenGrant]: ...

    async def fetch_user(self, token: str) -> AuthResult[User]: ...

    async def update_user(
        self,
        token: str,
        *,
        username: str,
        email: str | None = None,
        password: str | None = None,
    ) -> AuthResult[TokenGrant]: ...

    async def delete_user(self, token: str) -> AuthResult[None]: ...


class Navigator(Protocol):
    def push(self, path: str) -> None: ...
