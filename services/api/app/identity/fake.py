from __future__ import annotations

import base64
import json

from services.api.app.identity.base import Identity, InvalidAuthorizationCode

_TOKEN_PREFIX = "fake."


class FakeIdentityProvider:
    """Deterministic provider for local dev and tests.

    Authorization codes look like ``<user id>:<email>`` or ``<user id>:<email>:<name>``.
    The session token encodes the identity, so no state is kept between requests.
    """

    provider = "fake"

    def oauth_redirect_url(self, oauth_provider: str) -> str:
        return f"http://localhost:5173/auth/callback?provider={oauth_provider}&code=dev-user:dev@example.com"

    def exchange_code_for_identity(self, code: str) -> str:
        parts = code.split(":", 2)
        if len(parts) < 2 or not parts[0] or "@" not in parts[1]:
            raise InvalidAuthorizationCode()

        payload = {"id": parts[0], "email": parts[1], "name": parts[2] if len(parts) > 2 else None}
        raw = json.dumps(payload, sort_keys=True).encode("utf-8")
        return _TOKEN_PREFIX + base64.urlsafe_b64encode(raw).decode("ascii")

    def current_identity(self, session_token: str) -> Identity | None:
        if not session_token.startswith(_TOKEN_PREFIX):
            return None

        try:
            raw = base64.urlsafe_b64decode(session_token[len(_TOKEN_PREFIX) :].encode("ascii"))
            data = json.loads(raw)
            return Identity(id=str(data["id"]), email=str(data["email"]), name=data.get("name"))
        except (ValueError, KeyError, TypeError):
            return None

    def invalidate_session(self, session_token: str) -> None:
        del session_token
