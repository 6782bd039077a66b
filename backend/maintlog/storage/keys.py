"""
Key helpers shared by the document stores.
"""

import re
from datetime import datetime, timezone

from ..core.exceptions import NotFoundError

_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")


def safe_segment(value: str) -> str:
    """
    Return ``value`` if it can be used as a single key segment.

    Identifiers arrive from URLs and tokens; anything that could address a
    different prefix is treated as an unknown resource.
    """
    if not value or not _SEGMENT.match(value):
        raise NotFoundError("Resource not found")
    return value


def timestamp_key(moment: datetime) -> str:
    """Render a timestamp so that lexical key order equals time order."""
    return moment.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
