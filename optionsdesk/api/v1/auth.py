"""Auth endpoints and the bearer-token guards (require_token_payload, require_current_user)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from optionsdesk.core.config import Settings, get_app_settings
from optionsdesk.core.database import get_db
from optionsdesk.core.exceptions import (
    InvalidTokenError,
    MissingAuthHeaderError,
    UserNotFoundError,
)
from optionsdesk.models import User
from optionsdesk.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    TokenPayload,
    UserResponse,
    ValidateTokenResponse,
)
from optionsdesk.services import auth as auth_service

router = APIRouter()
security = HTTPBearer(auto_error=False)


def require_token_payload(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenPayload:
    """
    Dependency: require a valid Bearer access token and return its payload.

    The payload is also attached to request.state.token_payload for handlers
    that do not take it as a parameter. Raises MissingAuthHeaderError when no
    Bearer credentials are sent and InvalidTokenError when they do not verify.
    """
    if credentials is None:
        raise MissingAuthHeaderError()
    payload = auth_service.validate_token(settings, credentials.credentials)
    request.state.token_payload = payload
    return payload


def require_current_user(
    payload: Annotated[TokenPayload, Depends(require_token_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """
    Dependency: load the user the access token belongs to.

    A valid token whose user has since been deleted is rejected with 401, not 404.
    """
    try:
        return auth_service.get_current_user(db, payload.sub)
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """Create an account and return it with an access and a refresh token."""
    return auth_service.register(db, settings, body)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns the user and a token pair.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    return auth_service.login(db, settings, body)


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    body: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """Exchange a refresh token for a new access/refresh pair."""
    return auth_service.refresh_tokens(db, settings, body.refresh_token)


@router.get("/me", response_model=UserResponse)
def me(
    user: Annotated[User, Depends(require_current_user)],
) -> UserResponse:
    """Return the user the access token belongs to."""
    return UserResponse.model_validate(user)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    user: Annotated[User, Depends(require_current_user)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> MessageResponse:
    """Change the caller's password; the current password must be supplied."""
    return auth_service.change_password(db, settings, user.id, body)


@router.post("/logout", response_model=MessageResponse)
def logout(
    payload: Annotated[TokenPayload, Depends(require_token_payload)],
) -> MessageResponse:
    """Acknowledge logout. Tokens are not revoked server-side; the client discards them."""
    return auth_service.logout(payload.sub)


@router.post(
    "/validate-token",
    response_model=ValidateTokenResponse,
    response_model_exclude_none=True,
)
def validate_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ValidateTokenResponse:
    """Report whether the Bearer token is a valid access token. Never fails."""
    if credentials is None:
        return ValidateTokenResponse(valid=False)
    try:
        payload = auth_service.validate_token(settings, credentials.credentials)
    except InvalidTokenError:
        return ValidateTokenResponse(valid=False)
    return ValidateTokenResponse(valid=True, payload=payload)
