"""Exception taxonomy for Server-Eye lookups and filter configuration."""

from __future__ import annotations


class ServerEyeError(Exception):
    """Base class for all errors raised by servereye_helper."""


class ConfigError(ServerEyeError):
    """Invalid or mutually exclusive options were supplied by the caller."""


class NotFound(ServerEyeError):
    """The referenced entity does not exist upstream."""


class AuthError(ServerEyeError):
    """Missing, invalid or expired credential."""


class PermissionDenied(ServerEyeError):
    """The credential is valid but may not see the requested resource."""


class ApiError(ServerEyeError):
    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"Server-Eye HTTP {status_code}"
        super().__init__(f"{message}: {detail}" if detail else message)


__all__ = [
    "ServerEyeError",
    "ConfigError",
    "NotFound",
    "AuthError",
    "PermissionDenied",
    "ApiError",
]
