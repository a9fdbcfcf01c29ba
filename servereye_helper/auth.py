"""Server-Eye credentials and session resolution."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import AuthError, ConfigError

if TYPE_CHECKING:
    from .api import ServerEyeClient

__all__ = ["Credential", "connect", "disconnect", "resolve_auth", "current_session"]

logger = logging.getLogger(__name__)

SESSION_COOKIE = "ServerEye"


@dataclass(frozen=True)
class Credential:
    """Either an API key or a login session cookie.

    The secret is excluded from ``repr`` so credentials can be logged safely.
    """

    api_key: str | None = field(default=None, repr=False)
    session_cookie: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if bool(self.api_key) == bool(self.session_cookie):
            raise ConfigError("a credential needs exactly one of api_key or session")

    @property
    def kind(self) -> str:
        return "apikey" if self.api_key else "session"

    @property
    def fingerprint(self) -> str:
        secret = self.api_key or self.session_cookie or ""
        digest = hashlib.sha256(secret.encode("utf-8")).hexdigest()[:16]
        return f"{self.kind}:{digest}"

    def headers(self) -> dict[str, str]:
        if self.api_key:
            return {"x-api-key": self.api_key}
        return {}

    def cookies(self) -> dict[str, str]:
        if self.session_cookie:
            return {SESSION_COOKIE: self.session_cookie}
        return {}


_session: Credential | None = None


def current_session() -> Credential | None:
    return _session


def connect(
    client: "ServerEyeClient",
    api_key: str | None = None,
    email: str | None = None,
    password: str | None = None,
    code: str | None = None,
    persist: bool = True,
) -> Credential:
    """Create and validate a credential, optionally making it the session.

    Args:
        client: API client used for login and validation.
        api_key: Server-Eye API key. Takes precedence over email/password.
        email: Login e-mail for a cookie session.
        password: Login password.
        code: Optional two-factor code.
        persist: Store the credential as the process-wide session.

    Raises:
        ConfigError: Neither an API key nor email and password were given.
        AuthError: The remote API rejected the credential.
    """
    global _session
    if api_key:
        credential = Credential(api_key=api_key)
    elif email and password:
        cookie = client.login(email, password, code=code)
        credential = Credential(session_cookie=cookie)
    else:
        raise ConfigError("connect() needs an api_key or email and password")

    me = client.me(credential)
    logger.info(
        "Connected to Server-Eye as %s (%s)",
        me.get("email") or me.get("userId") or "unknown user",
        credential.kind,
    )
    if persist:
        _session = credential
    return credential


def disconnect() -> None:
    global _session
    _session = None


def resolve_auth(explicit: Credential | None = None) -> Credential:
    """Return ``explicit`` or the global session; fail if neither exists."""
    if explicit is not None:
        return explicit
    if _session is not None:
        return _session
    raise AuthError("no Server-Eye session; call connect() or pass a credential")
