from __future__ import annotations

import logging
from uuid import uuid4

from services.api.app.db.models import User, utcnow
from services.api.app.identity.base import Identity
from services.api.app.services.errors import EmailDomainNotAllowed, UserNotFound
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def check_email_domain(identity: Identity, allowed_suffix: str) -> None:
    if allowed_suffix and not identity.email.lower().endswith(allowed_suffix.lower()):
        logger.warning("Rejected identity %s with email outside %s", identity.id, allowed_suffix)
        raise EmailDomainNotAllowed(allowed_suffix)


def ensure_user(db: Session, identity: Identity) -> User:
    """Return the local user for an identity, creating it on first sight."""

    user = db.query(User).filter(User.provider_user_id == identity.id).first()
    if user is not None:
        return user

    user = User(
        id=uuid4().hex,
        provider_user_id=identity.id,
        email=identity.email,
        name=identity.name or None,
    )
    db.add(user)
    db.commit()
    logger.info("Created user %s for provider identity %s", user.id, identity.id)
    return user


def require_user(db: Session, identity: Identity) -> User:
    user = db.query(User).filter(User.provider_user_id == identity.id).first()
    if user is None:
        raise UserNotFound()
    return user


def update_profile(
    db: Session, user: User, *, phone: str | None = None, hostel: str | None = None
) -> User:
    # Empty values clear the field.
    user.phone = phone or None
    user.hostel = hostel or None
    user.updated_at = utcnow()
    db.commit()
    return user
