"""
Request validation middleware: request ids, size and content-type checks,
optional per-client rate limiting, and request/response logging.
"""

from typing import Callable, Dict, Any
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from portal.services.error_handler import ErrorHandlerService
from portal.utils.exceptions import APIException, BadRequestError, RateLimitExceededError

logger = logging.getLogger(__name__)


class ValidationMiddleware(BaseHTTPMiddleware):
    """
    Assigns every request an id (echoed as ``X-Request-ID``) and rejects
    oversized or non-JSON API writes before they reach a router.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 1024 * 1024,
        enable_request_logging: bool = True,
        enable_rate_limiting: bool = False,
        rate_limit_requests: int = 100,
        rate_limit_window: int = 60
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enable_request_logging = enable_request_logging
        self.enable_rate_limiting = enable_rate_limiting
        self.rate_limit_requests = rate_limit_requests
        self.rate_limit_window = rate_limit_window
        self.request_counts: Dict[str, Dict[str, Any]] = {}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        start_time = time.time()

        try:
            self._validate_request_size(request)
            if self.enable_rate_limiting:
                self._apply_rate_limiting(request)
            self._validate_content_type(request)
        except APIException as exc:
            return ErrorHandlerService.handle_api_exception(exc, request)

        if self.enable_request_logging:
            logger.info(
                f"Request [{request_id}]: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "client_ip": self._get_client_ip(request),
                }
            )

        response = await call_next(request)

        if self.enable_request_logging:
            processing_time = time.time() - start_time
            logger.info(
                f"Response [{request_id}]: {response.status_code} - {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "processing_time": processing_time,
                    "path": request.url.path,
                }
            )

        response.headers["X-Request-ID"] = request_id
        return response

    def _validate_request_size(self, request: Request) -> None:
        content_length = request.headers.get("content-length")
        if not content_length:
            return
        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")
        if size > self.max_request_size:
            raise BadRequestError(
                f"Request size {size} bytes exceeds maximum allowed size {self.max_request_size} bytes"
            )

    def _validate_content_type(self, request: Request) -> None:
        """API writes must send JSON."""
        if request.method not in ("POST", "PUT", "PATCH"):
            return
        content_type = request.headers.get("content-type", "")
        if request.url.path.startswith("/api/") and content_type and not content_type.startswith("application/json"):
            raise BadRequestError(f"Unsupported content type '{content_type}'. Expected 'application/json'")

    def _apply_rate_limiting(self, request: Request) -> None:
        """Fixed-window request limit per client IP."""
        client_ip = self._get_client_ip(request)
        now = time.time()

        expired = [ip for ip, data in self.request_counts.items() if now - data["window_start"] > self.rate_limit_window * 2]
        for ip in expired:
            del self.request_counts[ip]

        client = self.request_counts.setdefault(client_ip, {"count": 0, "window_start": now})
        if now - client["window_start"] > self.rate_limit_window:
            client["count"] = 0
            client["window_start"] = now

        if client["count"] >= self.rate_limit_requests:
            raise RateLimitExceededError(int(self.rate_limit_window - (now - client["window_start"])))
        client["count"] += 1

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
