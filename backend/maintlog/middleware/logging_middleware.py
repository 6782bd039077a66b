"""
ASGI middleware for logging API requests and responses.

Pure ASGI (not BaseHTTPMiddleware) so request bodies can be observed
without consuming them. Each request gets an ``X-Request-ID`` response
header that is also attached to every log line written for it.
"""

import json
import logging
import time
import uuid
from typing import Optional
from urllib.parse import parse_qsl

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)

MAX_BODY_LOG_LENGTH = 5000


def _sanitize_body(data: bytes) -> Optional[str]:
    """Decode a body for logging, masking credentials when it is JSON."""
    if not data:
        return None
    text = data.decode("utf-8", errors="ignore")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return truncate_large_data(text, max_length=MAX_BODY_LOG_LENGTH)
    return truncate_large_data(
        json.dumps(filter_sensitive_data(payload), ensure_ascii=False),
        max_length=MAX_BODY_LOG_LENGTH
    )


def _error_reason(body_text: Optional[str]) -> Optional[str]:
    """Pull the ``detail`` message out of an error response body."""
    if not body_text:
        return None
    try:
        payload = json.loads(body_text)
    except json.JSONDecodeError:
        return truncate_large_data(body_text, max_length=500)
    if isinstance(payload, dict) and payload.get("detail"):
        return str(payload["detail"])
    return truncate_large_data(body_text, max_length=500)


class RequestLoggingMiddleware:
    """Log one line when a request starts and one when it completes."""

    def __init__(
        self,
        app: ASGIApp,
        exclude_paths: Optional[list] = None,
        binary_path_prefixes: Optional[list] = None
    ):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths that are not logged at all
            binary_path_prefixes: Paths whose bodies are raw file content and
                are never logged
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health", "/"]
        self.binary_path_prefixes = binary_path_prefixes or ["/files/blob"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        request_id = uuid.uuid4().hex[:12]
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        log_bodies = not any(path.startswith(p) for p in self.binary_path_prefixes)

        query_string = scope.get("query_string", b"").decode("utf-8", errors="ignore")
        query_params = filter_sensitive_data(dict(parse_qsl(query_string))) or None
        client = scope.get("client")

        request_chunks = []
        response_chunks = []
        status_code = 0

        async def logging_receive() -> Message:
            message = await receive()
            if log_bodies and message["type"] == "http.request":
                request_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("ascii")))
                message = {**message, "headers": headers}
            elif log_bodies and message["type"] == "http.response.body":
                response_chunks.append(message.get("body", b""))
            await send(message)

        logger.info(
            f"Request started: {method} {path}",
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "query_params": query_params,
                "client": client[0] if client else None,
            }}
        )

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} - {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": round(duration_ms, 2),
                }}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        request_body = _sanitize_body(b"".join(request_chunks))
        response_body = _sanitize_body(b"".join(response_chunks))
        error_reason = _error_reason(response_body) if status_code >= 400 else None

        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        message = f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if error_reason:
            message += f" | error_reason={error_reason}"

        logger.log(
            log_level,
            message,
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "request_body": request_body,
                "response_body": response_body,
                "error_reason": error_reason,
            }}
        )

        if logger.isEnabledFor(logging.DEBUG) and (request_body or response_body):
            logger.debug(
                f"Bodies for {request_id}: request={request_body or '-'} | response={response_body or '-'}"
            )
