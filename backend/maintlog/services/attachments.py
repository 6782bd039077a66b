"""
Attachment Resolver - Turns an uploaded document key into text for the model.
"""

import asyncio
import io
import logging
from abc import ABC, abstractmethod
from typing import Optional

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..storage import StorageInterface

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "uploads/"


def is_upload_key(key: str) -> bool:
    """True for keys that address an uploaded file and nothing else."""
    return key.startswith(UPLOAD_PREFIX) and ".." not in key.split("/")


class AttachmentError(Exception):
    """The attachment could not be resolved to text."""


class AttachmentResolver(ABC):
    """Resolves an opaque attachment reference to document text."""

    @abstractmethod
    async def resolve(self, ref: str) -> Optional[str]:
        """
        Args:
            ref: Attachment reference (a blob key)

        Returns:
            Document text, or None if the document has no text

        Raises:
            AttachmentError: If the document cannot be read
        """
        pass


def extract_pdf_text(content: bytes) -> str:
    """Extract plain text from all pages of a PDF."""
    reader = PdfReader(io.BytesIO(content))
    parts = []
    for page in reader.pages:
        parts.append(page.extract_text() or "")
    return "\n".join(parts)


class StorageAttachmentResolver(AttachmentResolver):
    """Reads uploaded blobs from storage; PDFs go through pypdf."""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    async def resolve(self, ref: str) -> Optional[str]:
        if not is_upload_key(ref):
            raise AttachmentError(f"Not an uploaded file: {ref}")

        content = await self.storage.load(ref)
        if content is None:
            raise AttachmentError(f"Attachment not found: {ref}")

        if content.startswith(b"%PDF"):
            try:
                # pypdf is CPU bound
                text = await asyncio.to_thread(extract_pdf_text, content)
            except PdfReadError as e:
                raise AttachmentError(f"Unreadable PDF {ref}: {e}") from e
        else:
            text = content.decode("utf-8", errors="replace")

        text = text.strip()
        logger.debug(f"Resolved attachment {ref}: {len(text)} chars")
        return text or None
