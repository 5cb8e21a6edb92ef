from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from uuid import uuid4

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from services.api.app.db.models import Vendor, VendorSession, utcnow
from services.api.app.services.errors import InvalidCredentials, ValidationError
from sqlalchemy import delete
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

VENDOR_SESSION_COOKIE = "vendor_session"
VENDOR_SESSION_TTL = timedelta(days=7)

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def login(db: Session, username: str, password: str) -> str:
    """Check vendor credentials and issue a new session token.

    Every successful login adds a session row; earlier sessions stay valid until they
    expire or are logged out.
    """

    vendor = (
        db.query(Vendor)
        .filter(Vendor.username == username, Vendor.is_active.is_(True))
        .first()
    )
    if vendor is None or not vendor.password_hash:
        logger.warning("Vendor login rejected: unknown or inactive username=%s", username)
        raise InvalidCredentials()

    if not verify_password(password, vendor.password_hash):
        logger.warning("Vendor login rejected: bad password username=%s", username)
        raise InvalidCredentials()

    token = secrets.token_urlsafe(32)
    db.add(
        VendorSession(
            id=uuid4().hex,
            vendor_id=vendor.id,
            session_token=token,
            expires_at=utcnow() + VENDOR_SESSION_TTL,
        )
    )
    db.commit()

    logger.info("Vendor %s logged in", vendor.id)
    return token


def verify_session(db: Session, token: str | None) -> str | None:
    """Return the vendor id for a live session token, or None.

    Unknown and expired tokens are indistinguishable to the caller.
    """

    if not token:
        return None

    session = (
        db.query(VendorSession)
        .filter(VendorSession.session_token == token, VendorSession.expires_at > utcnow())
        .first()
    )
    if session is None:
        return None
    return session.vendor_id


def logout(db: Session, token: str | None) -> None:
    if not token:
        return

    db.execute(delete(VendorSession).where(VendorSession.session_token == token))
    db.commit()


def create_vendor(
    db: Session,
    *,
    username: str,
    password: str,
    shop_name: str,
    contact_email: str | None = None,
    contact_phone: str | None = None,
    is_active: bool = True,
) -> Vendor:
    """Provision a vendor account. Operator-only; there is no public signup."""

    username = username.strip()
    if not username or not password:
        raise ValidationError("username and password are required")

    if db.query(Vendor).filter(Vendor.username == username).first() is not None:
        raise ValidationError(f"Vendor username already exists: {username}")

    vendor = Vendor(
        id=uuid4().hex,
        username=username,
        password_hash=hash_password(password),
        shop_name=shop_name,
        contact_email=contact_email,
        contact_phone=contact_phone,
        is_active=is_active,
        current_load=0,
    )
    db.add(vendor)
    db.commit()
    return vendor
