"""
Authentication utilities - JWT signing and bearer token verification.

Access tokens are issued by an external identity service; this backend only
verifies them and takes the caller's user id from the ``sub`` claim. The same
signing helpers back the short-lived blob URLs in ``services.signed_urls``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..config import settings
from ..core.exceptions import NotFoundError
from ..models import TokenData
from ..storage.keys import safe_segment

# Bearer token security
security = HTTPBearer()


def encode_token(claims: Dict[str, Any], expires_delta: timedelta) -> str:
    """Sign ``claims`` with the application secret, adding an ``exp`` claim."""
    to_encode = dict(claims)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify signature and expiry. Returns the claims, or None if invalid."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def create_access_token(
    user_id: str,
    username: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issue an access token. Used by operator tooling and tests.

    Args:
        user_id: Subject of the token
        username: Optional display name
        expires_delta: Lifetime (``access_token_expire_minutes`` if None)
    """
    claims: Dict[str, Any] = {"sub": user_id}
    if username:
        claims["username"] = username
    return encode_token(
        claims, expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )


def decode_access_token(token: str) -> Optional[TokenData]:
    """Read the caller identity from an access token, or None if invalid."""
    payload = decode_token(token)
    if payload is None or not payload.get("sub"):
        return None
    return TokenData(user_id=payload["sub"], username=payload.get("username"))


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """
    Dependency returning the authenticated user id.

    The id is used as a storage key segment, so ids that cannot be one are
    rejected like any other invalid token.

    Raises:
        HTTPException: 401 if the token is invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token_data = decode_access_token(credentials.credentials)
    if token_data is None:
        raise credentials_exception

    try:
        return safe_segment(token_data.user_id)
    except NotFoundError:
        raise credentials_exception
