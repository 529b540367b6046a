"""
HTTP Basic Authentication for the API.

Every non-health route depends on `require_auth`. Credentials are compared
against BASIC_AUTH_USERNAME / BASIC_AUTH_PASSWORD from settings.

Usage:
    from core.auth import require_auth, BasicUser

    @router.post("/protected")
    def protected_endpoint(user: BasicUser = Depends(require_auth)):
        ...
"""

import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from config.settings import get_settings


# Security scheme for OpenAPI docs
security = HTTPBasic(
    realm="Secure Area",
    description="Username and password configured through BASIC_AUTH_USERNAME / BASIC_AUTH_PASSWORD.",
    auto_error=False,  # Don't auto-raise, we handle it ourselves
)

_CHALLENGE = {"WWW-Authenticate": 'Basic realm="Secure Area"'}


@dataclass
class BasicUser:
    """Authenticated caller of the API."""
    username: str


def verify_credentials(username: str, password: str) -> bool:
    """
    Check a username/password pair against the configured credentials.

    An unconfigured username or password never authenticates anyone.
    """
    settings = get_settings()
    valid_username = settings.basic_auth_username
    valid_password = settings.basic_auth_password

    if not valid_username or not valid_password:
        return False

    username_ok = secrets.compare_digest(username.encode("utf-8"), valid_username.encode("utf-8"))
    password_ok = secrets.compare_digest(password.encode("utf-8"), valid_password.encode("utf-8"))
    return username_ok and password_ok


async def require_auth(
    credentials: Optional[HTTPBasicCredentials] = Depends(security)
) -> BasicUser:
    """
    FastAPI dependency that requires HTTP Basic authentication.

    Raises 401 with a Basic challenge when the header is missing or wrong.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers=_CHALLENGE,
        )

    if not verify_credentials(credentials.username, credentials.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers=_CHALLENGE,
        )

    return BasicUser(username=credentials.username)
