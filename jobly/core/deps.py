"""
FastAPI dependencies for authentication and authorization.

Authorization is decided from the JWT claims alone; the database is not
consulted, so a token stays valid until it expires.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from jobly.core.exceptions import ForbiddenError, UnauthorizedError
from jobly.core.security import decode_token

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    username: str
    is_admin: bool = False


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """
    Extract and validate the current user from the Bearer token.

    Raises:
        UnauthorizedError: If the token is missing, invalid or has no subject
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise UnauthorizedError("Could not validate credentials")

    username = payload.get("sub")
    if username is None:
        raise UnauthorizedError("Could not validate credentials")

    return CurrentUser(username=username, is_admin=bool(payload.get("is_admin")))


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Only admins pass."""
    if not user.is_admin:
        raise ForbiddenError("Admin privileges required")
    return user


def require_admin_or_self(
    username: str,
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Admins, or the user named by the {username} path parameter."""
    if not (user.is_admin or user.username == username):
        raise ForbiddenError("Not allowed to access this user")
    return user
