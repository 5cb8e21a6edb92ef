from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from urllib.parse import quote

from services.api.app.identity.base import (
    Identity,
    IdentityProviderError,
    InvalidAuthorizationCode,
)

logger = logging.getLogger(__name__)


class HttpIdentityProvider:
    """Hosted users service reached over JSON/HTTP.

    Endpoints (relative to ``api_url``):
      GET    /oauth/{provider}/redirect_url -> {"redirect_url": str}
      POST   /sessions {"code"}             -> {"session_token": str}
      GET    /users/me (bearer session)     -> {"id", "email", "google_user_data": {"name"}}
      DELETE /sessions/{token}
    """

    provider = "http"

    def __init__(self, *, api_url: str, api_key: str, timeout: float = 15) -> None:
        self._api_url = api_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    def oauth_redirect_url(self, oauth_provider: str) -> str:
        payload = self._request("GET", f"/oauth/{quote(oauth_provider, safe='')}/redirect_url")
        try:
            return payload["redirect_url"]
        except (KeyError, TypeError) as e:
            raise IdentityProviderError(f"Unexpected redirect response: {payload!r}") from e

    def exchange_code_for_identity(self, code: str) -> str:
        try:
            payload = self._request("POST", "/sessions", body={"code": code})
        except _HttpStatusError as e:
            if e.status in {400, 401, 404}:
                raise InvalidAuthorizationCode() from e
            raise

        token = payload.get("session_token") if isinstance(payload, dict) else None
        if not token:
            raise IdentityProviderError(f"Unexpected session response: {payload!r}")
        return token

    def current_identity(self, session_token: str) -> Identity | None:
        try:
            payload = self._request("GET", "/users/me", session_token=session_token)
        except _HttpStatusError as e:
            if e.status in {401, 403, 404}:
                return None
            raise

        if not isinstance(payload, dict) or not payload.get("id") or not payload.get("email"):
            return None

        name = (payload.get("google_user_data") or {}).get("name") or payload.get("name")
        return Identity(id=str(payload["id"]), email=str(payload["email"]), name=name)

    def invalidate_session(self, session_token: str) -> None:
        try:
            self._request("DELETE", f"/sessions/{quote(session_token, safe='')}")
        except _HttpStatusError as e:
            if e.status != 404:
                raise

    def _request(
        self,
        method: str,
        path: str,
        *,
        body: dict | None = None,
        session_token: str | None = None,
    ) -> dict:
        req = urllib.request.Request(f"{self._api_url}{path}", method=method)
        req.add_header("x-api-key", self._api_key)
        req.add_header("Accept", "application/json")
        if session_token:
            req.add_header("Authorization", f"Bearer {session_token}")

        data = None
        if body is not None:
            req.add_header("Content-Type", "application/json")
            data = json.dumps(body).encode("utf-8")

        try:
            with urllib.request.urlopen(req, data=data, timeout=self._timeout) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            detail = e.read().decode("utf-8", errors="replace")
            raise _HttpStatusError(e.code, detail) from e
        except urllib.error.URLError as e:
            logger.warning("Identity provider unreachable: %s", e.reason)
            raise IdentityProviderError(f"Identity provider unreachable: {e.reason}") from e

        if not raw:
            return {}
        try:
            return json.loads(raw)
        except ValueError as e:
            raise IdentityProviderError("Identity provider returned invalid JSON") from e


class _HttpStatusError(IdentityProviderError):
    def __init__(self, status: int, detail: str) -> None:
        super().__init__(f"Identity provider HTTP {status}: {detail}")
        self.status = status
