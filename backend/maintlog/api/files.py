"""
Files API endpoints - Signed upload and download URLs for PDF attachments.

The blob endpoints are authorized by the signed token in the URL rather than
by a bearer token, so a URL can be handed to any HTTP client.
"""

import logging
import mimetypes

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from .deps import get_storage
from ..config import settings
from ..core.exceptions import NotFoundError, StorageError, ValidationError
from ..models import UploadUrlRequest, UploadUrlResponse, DownloadUrlResponse
from ..services.attachments import is_upload_key
from ..services.signed_urls import (
    UPLOAD, DOWNLOAD, build_upload_key, create_blob_token, verify_blob_token,
)
from ..storage import StorageInterface
from ..utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


def _invalid_link() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Invalid or expired link",
    )


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail="File is too large",
    )


@router.post("/upload-url", response_model=UploadUrlResponse)
async def create_upload_url(
    request: UploadUrlRequest,
    http_request: Request,
    user_id: str = Depends(get_current_user_id)
):
    """
    Issue a short-lived URL the client can PUT a PDF to.

    Returns:
        The upload URL and the key to pass as ``attachment_key`` later
    """
    if request.content_type not in settings.allowed_upload_types:
        raise ValidationError("Only PDF files can be uploaded")

    key = build_upload_key(user_id, request.filename)
    token = create_blob_token(key, UPLOAD, content_type=request.content_type)
    upload_url = http_request.url_for("upload_blob").include_query_params(token=token)

    logger.info(f"Issued upload URL for {key}")
    return UploadUrlResponse(upload_url=str(upload_url), key=key)


@router.put("/blob", name="upload_blob")
async def upload_blob(
    request: Request,
    token: str = Query(...),
    storage: StorageInterface = Depends(get_storage)
):
    """Store the request body under the key bound to the token."""
    claims = verify_blob_token(token, UPLOAD)
    if claims is None:
        raise _invalid_link()

    declared = request.headers.get("content-type", "").split(";")[0].strip()
    if claims.get("content_type") and declared != claims["content_type"]:
        raise ValidationError(f"Content type must be {claims['content_type']}")

    declared_length = request.headers.get("content-length", "")
    if declared_length.isdigit() and int(declared_length) > settings.upload_max_bytes:
        raise _too_large()

    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > settings.upload_max_bytes:
            raise _too_large()
        chunks.append(chunk)
    content = b"".join(chunks)

    if not await storage.save(claims["key"], content):
        raise StorageError(f"Failed to store upload {claims['key']}")

    logger.info(f"Stored upload {claims['key']} ({len(content)} bytes)")
    return {"key": claims["key"]}


@router.get("/blob", name="download_blob")
async def download_blob(
    token: str = Query(...),
    storage: StorageInterface = Depends(get_storage)
):
    """Return the bytes of the blob bound to the token."""
    claims = verify_blob_token(token, DOWNLOAD)
    if claims is None:
        raise _invalid_link()

    content = await storage.load(claims["key"])
    if content is None:
        raise NotFoundError("File not found")

    media_type = mimetypes.guess_type(claims["key"])[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type)


@router.get("/{key:path}", response_model=DownloadUrlResponse)
async def create_download_url(
    key: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    storage: StorageInterface = Depends(get_storage)
):
    """Issue a short-lived download URL for an uploaded file."""
    if not is_upload_key(key) or not await storage.exists(key):
        raise NotFoundError("File not found")

    token = create_blob_token(key, DOWNLOAD)
    download_url = request.url_for("download_blob").include_query_params(token=token)
    return DownloadUrlResponse(download_url=str(download_url))
