from __future__ import annotations

import os

from fastapi import Depends, Request, Response
from services.api.app.db.deps import get_db
from services.api.app.db.models import User
from services.api.app.identity import factory
from services.api.app.identity.base import Identity
from services.api.app.services import users, vendor_auth
from services.api.app.services.errors import ServerMisconfiguration, Unauthorized
from sqlalchemy.orm import Session

STUDENT_SESSION_COOKIE = "printdrop_session"
STUDENT_SESSION_MAX_AGE = 60 * 24 * 60 * 60  # 60 days
VENDOR_SESSION_MAX_AGE = int(vendor_auth.VENDOR_SESSION_TTL.total_seconds())


def _cookie_secure() -> bool:
    return os.getenv("PRINTDROP_COOKIE_SECURE", "true").strip().lower() in {"1", "true", "yes", "y"}


def set_student_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        STUDENT_SESSION_COOKIE,
        token,
        max_age=STUDENT_SESSION_MAX_AGE,
        path="/",
        httponly=True,
        samesite="none",
        secure=_cookie_secure(),
    )


def clear_student_cookie(response: Response) -> None:
    response.set_cookie(
        STUDENT_SESSION_COOKIE,
        "",
        max_age=0,
        path="/",
        httponly=True,
        samesite="none",
        secure=_cookie_secure(),
    )


def set_vendor_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        vendor_auth.VENDOR_SESSION_COOKIE,
        token,
        max_age=VENDOR_SESSION_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=_cookie_secure(),
    )


def clear_vendor_cookie(response: Response) -> None:
    response.set_cookie(
        vendor_auth.VENDOR_SESSION_COOKIE,
        "",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=_cookie_secure(),
    )


def current_identity(request: Request) -> Identity:
    """Resolve the student session cookie and enforce the email domain allow-list."""

    token = request.cookies.get(STUDENT_SESSION_COOKIE)
    if not token:
        raise Unauthorized()

    try:
        provider = factory.get_identity_provider()
    except ValueError as e:
        raise ServerMisconfiguration(str(e)) from e

    identity = provider.current_identity(token)
    if identity is None:
        raise Unauthorized()

    users.check_email_domain(identity, factory.allowed_email_suffix())
    return identity


def current_user(
    identity: Identity = Depends(current_identity), db: Session = Depends(get_db)
) -> User:
    return users.require_user(db, identity)


def current_vendor_id(request: Request, db: Session = Depends(get_db)) -> str:
    vendor_id = vendor_auth.verify_session(db, request.cookies.get(vendor_auth.VENDOR_SESSION_COOKIE))
    if vendor_id is None:
        raise Unauthorized()
    return vendor_id
