# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from cinetracks.interfaces.http.dto.auth import check_username
from cinetracks.shared.errors.validation_types import ValidationErrorType

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


class ProfileUpdateDTO(BaseModel):
    username: str = Field(max_length=64)
    email: str | None = Field(default=None, max_length=254)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return check_username(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if not _EMAIL_RE.match(value.lower()):
            raise PydanticCustomError(
                ValidationErrorType.EMAIL_INVALID,
                "Please enter a valid email address",
                {}
            )
        return value


class PasswordChangeDTO(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=1, max_length=128)
    confirm_password: str = Field(min_length=1, max_length=128)

    @field_validator("new_password")
    @classmethod
    def validate_length(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_TOO_SHORT,
                "Password must be at least 8 characters long",
                {"min_length": MIN_PASSWORD_LENGTH}
            )
        return value

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordChangeDTO":
        if self.new_password != self.confirm_password:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_MISMATCH,
                "New passwords do not match",
                {}
            )
        return self
