"""Pydantic request/response schemas."""

from optionsdesk.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    TokenPayload,
    UpdateProfileRequest,
    UserResponse,
    ValidateTokenResponse,
)
from optionsdesk.schemas.health import HealthResponse

__all__ = [
    "AuthResponse",
    "ChangePasswordRequest",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RefreshRequest",
    "RegisterRequest",
    "TokenPayload",
    "UpdateProfileRequest",
    "UserResponse",
    "ValidateTokenResponse",
]
