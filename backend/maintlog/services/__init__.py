"""Services module."""

from .attachments import (
    AttachmentResolver, AttachmentError, StorageAttachmentResolver, is_upload_key,
)
from .signed_urls import (
    UPLOAD, DOWNLOAD, sanitize_filename, build_upload_key, create_blob_token, verify_blob_token,
)

__all__ = [
    'AttachmentResolver', 'AttachmentError', 'StorageAttachmentResolver', 'is_upload_key',
    'UPLOAD', 'DOWNLOAD', 'sanitize_filename', 'build_upload_key',
    'create_blob_token', 'verify_blob_token',
]
