"""Provides exceptions occurring with external services."""

from typing import Any, Optional


class AuthenticationFailed(RuntimeError):
    """The provider rejected the credentials."""


class Unavailable(RuntimeError):
    """The provider could not be reached, or failed on its side."""


class MissingSession(RuntimeError):
    """Sign-in succeeded but the provider returned no user session."""


class ProfileNotFound(RuntimeError):
    """No ``perfil_usuarios`` row for the authenticated user."""


class PeluqueriaNotFound(RuntimeError):
    """No ``peluquerias`` row for the profile of the authenticated user."""


class SessionDeletionFailed(RuntimeError):
    """Failed to sign a session out at the provider."""


class RequestFailed(IOError):
    """A call to the REST API did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload
