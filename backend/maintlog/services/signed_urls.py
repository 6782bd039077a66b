"""
Signed blob URLs - Short-lived tokens that authorize one upload or download.

A token carries the blob key, the permitted action and, for uploads, the
declared content type. Tokens are signed like access tokens.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..config import settings
from ..utils.auth import encode_token, decode_token

UPLOAD = "upload"
DOWNLOAD = "download"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """Replace every character outside ``[A-Za-z0-9._-]`` with ``_``."""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


def build_upload_key(user_id: str, filename: str, now: Optional[datetime] = None) -> str:
    """Key for a new upload: ``uploads/<user_id>/<epoch_ms>_<sanitized name>``."""
    now = now or datetime.now(timezone.utc)
    epoch_ms = int(now.timestamp() * 1000)
    return f"uploads/{user_id}/{epoch_ms}_{sanitize_filename(filename)}"


def create_blob_token(
    key: str,
    action: str,
    content_type: Optional[str] = None,
    expires_minutes: Optional[int] = None
) -> str:
    """
    Sign a token for one blob action.

    Args:
        key: Blob key the token is bound to
        action: ``upload`` or ``download``
        content_type: Content type the upload must declare
        expires_minutes: Lifetime (``upload_url_expire_minutes`` if None)
    """
    if expires_minutes is None:
        expires_minutes = settings.upload_url_expire_minutes
    claims: Dict[str, Any] = {"key": key, "action": action}
    if content_type:
        claims["content_type"] = content_type
    return encode_token(claims, timedelta(minutes=expires_minutes))


def verify_blob_token(token: str, action: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid, unexpired token for ``action``, else None."""
    claims = decode_token(token)
    if claims is None or claims.get("action") != action or not claims.get("key"):
        return None
    return claims
