from __future__ import annotations

import os

from services.api.app.identity.base import IdentityProvider
from services.api.app.identity.fake import FakeIdentityProvider


def get_identity_provider() -> IdentityProvider:
    """Select the student identity provider.

    Default is the hosted users service (http), which needs PRINTDROP_IDENTITY_API_URL
    and PRINTDROP_IDENTITY_API_KEY. The fake issues unsigned tokens and must be
    selected explicitly with PRINTDROP_IDENTITY_PROVIDER=fake (local dev and tests).
    """

    provider = os.getenv("PRINTDROP_IDENTITY_PROVIDER", "http").strip().lower()

    if provider == "fake":
        return FakeIdentityProvider()

    if provider == "http":
        from services.api.app.identity.http_provider import HttpIdentityProvider

        api_url = os.getenv("PRINTDROP_IDENTITY_API_URL", "").strip()
        api_key = os.getenv("PRINTDROP_IDENTITY_API_KEY", "").strip()
        if not api_url or not api_key:
            raise ValueError(
                "PRINTDROP_IDENTITY_API_URL and PRINTDROP_IDENTITY_API_KEY are required "
                "when PRINTDROP_IDENTITY_PROVIDER=http"
            )

        return HttpIdentityProvider(api_url=api_url, api_key=api_key)

    raise ValueError(f"Unknown PRINTDROP_IDENTITY_PROVIDER={provider!r}. Expected fake or http.")


def allowed_email_suffix() -> str:
    return os.getenv("PRINTDROP_ALLOWED_EMAIL_DOMAIN", "@pilani.bits-pilani.ac.in").strip()
