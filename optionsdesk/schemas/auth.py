"""Request/response schemas for auth and user profile endpoints.

JSON keys are camelCase on the wire; Python attributes stay snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from optionsdesk.models.user import ExperienceLevel

USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128
# bcrypt only reads the first 72 bytes of its input; longer passwords are rejected.
PASSWORD_MAX_BYTES = 72


class CamelModel(BaseModel):
    """Base for response bodies serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Base for request bodies: camelCase keys, unknown fields rejected."""

    model_config = ConfigDict(extra="forbid")


def _strip_username(v: str) -> str:
    s = v.strip()
    if not s:
        raise ValueError("Username is required.")
    return s


def check_password_bytes(v: str) -> str:
    if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded.")
    return v


class RegisterRequest(RequestModel):
    """New account details."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    experience_level: ExperienceLevel | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _strip_username(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_bytes(v)


class LoginRequest(RequestModel):
    """Credentials for login."""

    email: EmailStr
    # Login does not re-apply the registration policy; any non-empty password is checked.
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class ChangePasswordRequest(RequestModel):
    """Current and replacement password."""

    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return check_password_bytes(v)


class RefreshRequest(RequestModel):
    """Refresh token to exchange for a new token pair."""

    refresh_token: str = Field(..., min_length=1)


class UpdateProfileRequest(RequestModel):
    """Partial profile update; omitted fields are left unchanged."""

    username: str | None = Field(
        default=None, min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN
    )
    email: EmailStr | None = None
    experience_level: ExperienceLevel | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        return None if v is None else _strip_username(v)


class TokenPayload(BaseModel):
    """Decoded bearer token claims. Keys match the JWT claim names."""

    sub: str
    email: str
    username: str
    iat: int
    exp: int


class UserResponse(CamelModel):
    """Public view of a user. The password hash is never serialized."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    experience_level: ExperienceLevel
    created_at: datetime
    updated_at: datetime


class AuthResponse(CamelModel):
    """Returned by register, login and refresh."""

    user: UserResponse
    access_token: str
    refresh_token: str


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ValidateTokenResponse(BaseModel):
    """Result of POST /auth/validate-token; payload is present only when valid."""

    valid: bool
    payload: TokenPayload | None = None
