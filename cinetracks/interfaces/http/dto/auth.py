# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from cinetracks.shared.errors.validation_types import ValidationErrorType


def check_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError(
            ValidationErrorType.MISSING,
            "Username cannot be empty",
            {}
        )
    if re.search(r"\s", value):
        raise PydanticCustomError(
            ValidationErrorType.USERNAME_INVALID_CHARS,
            "Username must not contain whitespace",
            {"pattern": r"^\S+$"}
        )
    return value


class LoginRequestDTO(BaseModel):
    username: str = Field(max_length=64)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return check_username(value)


class RegisterRequestDTO(BaseModel):
    username: str = Field(max_length=64)
    password: str = Field(min_length=1, max_length=128)
    role: str = Field(default="USER", max_length=32)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return check_username(value)

    @field_validator("role")
    @classmethod
    def normalize_role(cls, value: str) -> str:
        return value.strip() or "USER"
