"""
Security utilities for JWT authentication and password hashing.

Tokens are signed with settings.SECRET_KEY (HS256 by default) and carry the
username in "sub" plus an "is_admin" claim. Passwords are hashed with bcrypt.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt
from passlib.context import CryptContext
from jobly.core.config import settings

# Password hashing context (bcrypt)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_WORK_FACTOR
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    # Bcrypt has a 72-byte limit - truncate if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    return pwd_context.verify(password_bytes, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Note: Bcrypt has a 72-byte limit. Passwords longer than 72 bytes
    are automatically truncated to comply with this limitation.
    """
    password_bytes = password.encode('utf-8')[:72]
    return pwd_context.hash(password_bytes)


def create_access_token(username: str, is_admin: bool = False, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        username: Subject of the token
        is_admin: Whether the user holds the admin role
        expires_delta: Optional expiration time delta (default: ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT token as a string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": username,
        "is_admin": bool(is_admin),
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Decode and validate a JWT token.

    Raises:
        JWTError: If token is invalid or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
