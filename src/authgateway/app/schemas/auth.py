# src/authgateway/app/schemas/auth.py

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

# At least one lower, one upper, one ASCII digit and one special character; the
# first character must itself be one of the allowed characters.
NEW_PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[@$!%*?&])[A-Za-z0-9@$!%*?&]"
)
PHONE_PATTERN = r"^\+[0-9]{10,15}$"


class _CamelModel(BaseModel):
    """Wire names are camelCase; Python attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# Requests
# ============================================================

class SignInRequest(_CamelModel):
    username: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=6, max_length=100)


class SignUpRequest(_CamelModel):
    username: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=6, max_length=100)
    email: EmailStr
    phone_number: Optional[str] = Field(
        default=None,
        pattern=PHONE_PATTERN,
        description="International format, e.g. +5573999999999",
    )
    name: str = Field(..., min_length=2, max_length=50)

    @field_validator("name")
    @classmethod
    def _full_name(cls, value: str) -> str:
        if len(value.split()) < 2:
            raise ValueError("name must contain at least a first name and a surname")
        return value


class ConfirmSignUpRequest(_CamelModel):
    username: str = Field(..., min_length=3, max_length=30)
    confirmation_code: str = Field(..., min_length=6, max_length=6)


class ResendConfirmationCodeRequest(_CamelModel):
    username: str = Field(..., min_length=3, max_length=30)


class ForgotPasswordRequest(_CamelModel):
    username: str = Field(..., min_length=3, max_length=30)


class ConfirmForgotPasswordRequest(_CamelModel):
    username: str = Field(..., min_length=3, max_length=30)
    confirmation_code: str = Field(..., min_length=6, max_length=6)
    new_password: str = Field(..., min_length=8, max_length=100)

    @field_validator("new_password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        if not NEW_PASSWORD_PATTERN.match(value):
            raise ValueError(
                "new password must contain at least one lowercase letter, one uppercase "
                "letter, one digit and one special character (@$!%*?&)"
            )
        return value


# ============================================================
# Responses
# ============================================================

class SignInResponse(_CamelModel):
    access_token: str
    id_token: str
    refresh_token: str


class SignUpResponse(_CamelModel):
    cognito_sub: str
    username: str
    user_confirmed: bool
    message: str


class ConfirmSignUpResponse(_CamelModel):
    success: bool
    message: str


class ResendConfirmationCodeResponse(_CamelModel):
    success: bool
    message: str
    delivery_method: str


class ForgotPasswordResponse(_CamelModel):
    success: bool
    message: str
    delivery_method: str


class ConfirmForgotPasswordResponse(_CamelModel):
    success: bool
    message: str


class LogoutResponse(BaseModel):
    message: str
