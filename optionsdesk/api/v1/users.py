"""User profile endpoints. A user may only read or change their own account."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from optionsdesk.api.v1.auth import require_token_payload
from optionsdesk.core.database import get_db
from optionsdesk.core.exceptions import ForbiddenError
from optionsdesk.schemas.auth import (
    MessageResponse,
    TokenPayload,
    UpdateProfileRequest,
    UserResponse,
)
from optionsdesk.services import users as users_service

router = APIRouter()


def _require_self(payload: TokenPayload, user_id: str) -> None:
    if payload.sub != user_id:
        raise ForbiddenError()


@router.get("/{user_id}/profile", response_model=UserResponse)
def get_profile(
    user_id: str,
    payload: Annotated[TokenPayload, Depends(require_token_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    _require_self(payload, user_id)
    return UserResponse.model_validate(users_service.get_profile(db, user_id))


@router.patch("/{user_id}/profile", response_model=UserResponse)
def update_profile(
    user_id: str,
    body: UpdateProfileRequest,
    payload: Annotated[TokenPayload, Depends(require_token_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Partially update username, email and/or experience level."""
    _require_self(payload, user_id)
    return UserResponse.model_validate(users_service.update_profile(db, user_id, body))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    payload: Annotated[TokenPayload, Depends(require_token_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete the account. Tokens already issued stay valid until they expire."""
    _require_self(payload, user_id)
    return users_service.delete_user(db, user_id)
