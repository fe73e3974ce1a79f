# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cinetracks.domain.session import TokenGrant, User


class TokenGrantPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: str = Field(min_length=1)
    expires_in: int = Field(alias="expiresIn", ge=0)
    username: str | None = None
    email: str | None = None
    message: str | None = None

    def to_grant(self) -> TokenGrant:
        return TokenGrant(
            token=self.token,
            expires_in_ms=self.expires_in,
            username=self.username,
            email=self.email,
        )


class UpdateGrantPayload(TokenGrantPayload):
    username: str = Field(min_length=1)


class UserPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(min_length=1)
    email: str | None = None
    role: str = ""

    def to_user(self) -> User:
        return User(username=self.username, role=self.role, email=self.email)


class ProfileEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user: UserPayload
    message: str | None = None


class ErrorPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str | None = None
    error: str | None = None


__all__ = [
    "ErrorPayload",
    "ProfileEnvelope",
    "TokenGrantPayload",
    "UpdateGrantPayload",
    "UserPayload",
]
