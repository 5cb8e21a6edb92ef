from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from services.api.app.db.deps import get_db
from services.api.app.db.models import User
from services.api.app.identity import factory
from services.api.app.identity.base import (
    Identity,
    IdentityProviderError,
    InvalidAuthorizationCode,
)
from services.api.app.identity.deps import (
    STUDENT_SESSION_COOKIE,
    clear_student_cookie,
    current_identity,
    current_user,
    set_student_cookie,
)
from services.api.app.models.order import SuccessResponse
from services.api.app.models.user import (
    ProfileUpdateRequest,
    RedirectUrlResponse,
    SessionCreateRequest,
    UserProfile,
)
from services.api.app.services import users
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _raise_identity_http_error(e: Exception) -> None:
    if isinstance(e, InvalidAuthorizationCode):
        raise HTTPException(status_code=401, detail=str(e)) from e

    if isinstance(e, IdentityProviderError):
        raise HTTPException(status_code=502, detail=str(e)) from e

    if isinstance(e, ValueError):
        raise HTTPException(status_code=500, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e


def _profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        provider_user_id=user.provider_user_id,
        email=user.email,
        name=user.name,
        phone=user.phone,
        hostel=user.hostel,
    )


@router.get("/oauth/{oauth_provider}/redirect_url", response_model=RedirectUrlResponse)
def oauth_redirect_url(oauth_provider: str) -> RedirectUrlResponse:
    try:
        url = factory.get_identity_provider().oauth_redirect_url(oauth_provider)
    except Exception as e:
        _raise_identity_http_error(e)

    return RedirectUrlResponse(redirect_url=url)


@router.post("/sessions", response_model=SuccessResponse)
def create_session(payload: SessionCreateRequest, response: Response) -> SuccessResponse:
    try:
        token = factory.get_identity_provider().exchange_code_for_identity(payload.code)
    except Exception as e:
        logger.warning("Authorization code exchange failed: %s", e)
        _raise_identity_http_error(e)

    set_student_cookie(response, token)
    return SuccessResponse()


@router.get("/users/me", response_model=UserProfile)
def me(identity: Identity = Depends(current_identity), db: Session = Depends(get_db)) -> UserProfile:
    return _profile(users.ensure_user(db, identity))


@router.patch("/profile", response_model=SuccessResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    users.update_profile(db, user, phone=payload.phone, hostel=payload.hostel)
    return SuccessResponse()


@router.get("/logout", response_model=SuccessResponse)
def logout(request: Request, response: Response) -> SuccessResponse:
    token = request.cookies.get(STUDENT_SESSION_COOKIE)
    if token:
        try:
            factory.get_identity_provider().invalidate_session(token)
        except Exception as e:
            _raise_identity_http_error(e)

    clear_student_cookie(response)
    return SuccessResponse()
