"""
Central error formatting for the API.

Every error response has the shape
``{"error": {"code", "message", "timestamp", "request_id", "details"?}}``.
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional, List
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from portal.utils.exceptions import APIException, ValidationError
import logging
import uuid

logger = logging.getLogger(__name__)

_CONSTRAINT_MESSAGES = (
    ("unique", "Duplicate value for unique field"),
    ("foreign key", "Referenced record does not exist"),
    ("not null", "Required field cannot be empty"),
    ("check constraint", "Value does not meet validation requirements"),
)


class ErrorHandlerService:
    """Formats and logs errors raised anywhere in request handling."""

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        error: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if request_id:
            error["request_id"] = request_id
        if details:
            error["details"] = details
        return {"error": error}

    @staticmethod
    def request_id(request: Optional[Request]) -> str:
        """Request id assigned by the validation middleware, or a fresh one."""
        if request is not None:
            existing = getattr(request.state, "request_id", None)
            if existing:
                return existing
        return uuid.uuid4().hex[:8]

    @staticmethod
    def _path(request: Optional[Request]) -> Optional[str]:
        return request.url.path if request is not None else None

    @classmethod
    def handle_api_exception(cls, exception: APIException, request: Optional[Request] = None) -> JSONResponse:
        request_id = cls.request_id(request)
        logger.warning(
            f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}",
            extra={
                "error_code": exception.error_code,
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": cls._path(request)
            }
        )

        details = None
        if isinstance(exception, ValidationError) and exception.field_errors:
            details = exception.field_errors

        return JSONResponse(
            status_code=exception.status_code,
            content=cls.format_error_response(
                exception.error_code or "API_ERROR",
                exception.detail,
                details=details,
                request_id=request_id
            ),
            headers=exception.headers
        )

    @classmethod
    def handle_validation_error(cls, exception: PydanticValidationError, request: Optional[Request] = None) -> JSONResponse:
        """
        Request body/query validation failures.
        Accepts both pydantic's ValidationError and FastAPI's RequestValidationError.
        """
        request_id = cls.request_id(request)
        details = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exception.errors()
        ]

        logger.warning(
            f"Validation Error [{request_id}]: {len(details)} field errors",
            extra={"request_id": request_id, "path": cls._path(request), "validation_errors": details}
        )

        return JSONResponse(
            status_code=422,
            content=cls.format_error_response(
                "VALIDATION_ERROR",
                "Request validation failed",
                details=details,
                request_id=request_id
            )
        )

    @classmethod
    def handle_database_error(cls, exception: SQLAlchemyError, request: Optional[Request] = None) -> JSONResponse:
        request_id = cls.request_id(request)

        if isinstance(exception, IntegrityError):
            error_code, status_code = "INTEGRITY_ERROR", 409
            message = "Data integrity constraint violation"
            constraint = cls._constraint_message(exception)
            if constraint:
                message = f"Constraint violation: {constraint}"
        else:
            error_code, status_code = "DATABASE_ERROR", 500
            message = "Database operation failed"

        logger.error(
            f"Database Error [{request_id}]: {error_code} - {exception}",
            extra={
                "error_code": error_code,
                "request_id": request_id,
                "path": cls._path(request),
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=status_code,
            content=cls.format_error_response(error_code, message, request_id=request_id)
        )

    @classmethod
    def handle_http_exception(cls, exception: HTTPException, request: Optional[Request] = None) -> JSONResponse:
        request_id = cls.request_id(request)
        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={"status_code": exception.status_code, "request_id": request_id, "path": cls._path(request)}
        )
        return JSONResponse(
            status_code=exception.status_code,
            content=cls.format_error_response(
                f"HTTP_{exception.status_code}",
                str(exception.detail),
                request_id=request_id
            ),
            headers=getattr(exception, "headers", None)
        )

    @classmethod
    def handle_unexpected_error(cls, exception: Exception, request: Optional[Request] = None) -> JSONResponse:
        request_id = cls.request_id(request)
        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {exception}",
            extra={
                "request_id": request_id,
                "path": cls._path(request),
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=cls.format_error_response(
                "INTERNAL_SERVER_ERROR",
                "An unexpected error occurred. Please try again later.",
                request_id=request_id
            )
        )

    @staticmethod
    def _constraint_message(exception: IntegrityError) -> Optional[str]:
        error_msg = str(exception.orig).lower()
        for needle, message in _CONSTRAINT_MESSAGES:
            if needle in error_msg:
                return message
        return None
