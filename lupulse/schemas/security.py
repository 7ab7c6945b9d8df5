from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field, field_validator

from lupulse.schemas.common import CamelModel, NonEmptyStr
from lupulse.security.roles import normalize_role


class UserOut(CamelModel):
    email: str
    full_name: str
    institutional_id: str = Field(
        validation_alias=AliasChoices("institutional_id", "id"),
        serialization_alias="id",
    )
    user_type: str
    department: str
    designation: str | None = None
    image: str | None = None
    role: str
    created_at: datetime

    @field_validator("role", mode="before")
    @classmethod
    def _default_role(cls, value: object) -> str:
        return normalize_role(value).value


class SignupIn(CamelModel):
    full_name: NonEmptyStr
    institutional_id: NonEmptyStr = Field(alias="id")
    email: NonEmptyStr
    user_type: NonEmptyStr
    department: NonEmptyStr
    designation: str | None = None
    image: str | None = None

    @field_validator("institutional_id", mode="before")
    @classmethod
    def _id_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class SignupOut(CamelModel):
    message: str
    user: UserOut


class LoginIn(CamelModel):
    uid: str | None = None
    email: NonEmptyStr
    email_verified: bool = False


class LoginOut(CamelModel):
    message: str
    success: bool


class ProfileUpdateIn(CamelModel):
    full_name: NonEmptyStr
    designation: NonEmptyStr
    image: str | None = None


class UserUpdateOut(CamelModel):
    message: str
    user: UserOut
