"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error", examples=["email"])
    message: str = Field(..., description="Human-readable error message", examples=["Invalid email format"])
    type: Optional[str] = Field(None, description="Error type identifier", examples=["value_error"])
    input: Optional[Any] = Field(None, description="Input value that caused the error")
    rule: Optional[str] = Field(None, description="Business rule that was violated")


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message", examples=["Request validation failed"])
    timestamp: str = Field(..., description="Error timestamp in ISO format", examples=["2024-01-01T00:00:00Z"])
    request_id: Optional[str] = Field(None, description="Request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = Field(None, description="Detailed error information")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "timestamp": "2024-01-01T00:00:00Z",
            "request_id": "abc12345"
        }
    }


# Common error responses for documentation
_ERROR_EXAMPLES = {
    400: ("Bad Request - Invalid request or business rule violation", "BAD_REQUEST", "Invalid request parameters"),
    401: ("Unauthorized - Authentication required", "UNAUTHORIZED", "Authentication required"),
    402: ("Payment Required - Payment was declined", "PAYMENT_FAILED", "Your card was declined."),
    403: ("Forbidden - Insufficient permissions", "FORBIDDEN", "Access forbidden"),
    404: ("Not Found - Resource does not exist", "NOT_FOUND", "Order not found"),
    409: ("Conflict - Resource already exists", "CONFLICT", "Resource already exists"),
    422: ("Unprocessable Entity - Validation failed", "VALIDATION_ERROR", "Request validation failed"),
    500: ("Internal Server Error", "INTERNAL_SERVER_ERROR", "An unexpected error occurred. Please try again later."),
    503: ("Service Unavailable", "SERVICE_UNAVAILABLE", "Service temporarily unavailable"),
}

COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    status_code: {
        "description": description,
        "model": APIErrorResponse,
        "content": {"application/json": {"example": _example(code, message)}},
    }
    for status_code, (description, code, message) in _ERROR_EXAMPLES.items()
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403)


def get_common_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get common error response schemas for most endpoints."""
    return get_error_responses(400, 401, 403, 404, 422, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for CRUD operations."""
    return get_error_responses(400, 401, 403, 404, 409, 422, 500)
