"""
Authentication dependencies for FastAPI.

The API has a single admin identity. Its credentials are resolved once at
application construction (see ``AdminCredentials.from_settings``) and handed
to routes through ``get_admin_credentials``.
"""

from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from globaltrack.app.core.config import Settings
from globaltrack.app.core.exceptions import MissingTokenError, TokenRevokedError
from globaltrack.app.core.jwt import decode_access_token
from globaltrack.app.core.token_revocation import is_token_revoked

ADMIN_SUBJECT = "admin_user"

# auto_error is off so a missing header reaches get_current_admin and
# gets the API's own 401 message instead of FastAPI's default.
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AdminCredentials:
    """The configured admin identity."""
    username: str
    password: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminCredentials":
        return cls(username=settings.admin_username, password=settings.admin_password)

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password)


def get_admin_credentials(request: Request) -> AdminCredentials:
    """Return the admin identity installed on ``app.state`` at startup."""
    return request.app.state.admin_credentials


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    if credentials is None:
        raise MissingTokenError()
    return credentials.credentials


async def get_current_admin(token: str = Depends(get_bearer_token)) -> dict:
    """
    FastAPI dependency guarding every protected route.

    Checks, in order:
    1. A bearer token is present (MissingTokenError)
    2. Signature and expiry are valid (InvalidTokenError / TokenExpiredError)
    3. The token has not been revoked by logout (TokenRevokedError)

    Returns:
        Decoded token payload (``sub`` is the settings owner id)
    """
    payload = decode_access_token(token)

    if await is_token_revoked(token):
        raise TokenRevokedError()

    return payload
