from __future__ import annotations

from collections.abc import Callable


class SessionContext:
    """Read-only view of the current user's credential.

    The token comes from an external auth collaborator and is read on every call, so a
    logout or token refresh elsewhere is seen immediately. This object never stores or
    renews credentials itself.
    """

    def __init__(self, token_provider: Callable[[], str | None]) -> None:
        self._token_provider = token_provider

    def bearer_token(self) -> str | None:
        token = self._token_provider()
        if token is None:
            return None
        token = token.strip()
        return token or None

    @property
    def is_authenticated(self) -> bool:
        return self.bearer_token() is not None

    def auth_headers(self) -> dict[str, str]:
        token = self.bearer_token()
        return {"Authorization": f"Bearer {token}"} if token else {}


class TokenHolder:
    """In-process stand-in for the auth collaborator that owns the token."""

    def __init__(self, token: str | None = None) -> None:
        self.token = token

    def __call__(self) -> str | None:
        return self.token
