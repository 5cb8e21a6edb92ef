from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class IdentityProviderError(Exception):
    """Base class for identity provider errors."""


class InvalidAuthorizationCode(IdentityProviderError):
    def __init__(self) -> None:
        super().__init__("Invalid or expired authorization code")


@dataclass(frozen=True, slots=True)
class Identity:
    id: str
    email: str
    name: str | None = None


class IdentityProvider(Protocol):
    provider: str

    def oauth_redirect_url(self, oauth_provider: str) -> str: ...

    def exchange_code_for_identity(self, code: str) -> str:
        """Trade an OAuth code for an opaque provider session token."""
        ...

    def current_identity(self, session_token: str) -> Identity | None: ...

    def invalidate_session(self, session_token: str) -> None: ...
