"""
Utility modules for the Realty Media Portal.
"""

from .auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
    extract_token_from_header,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    PaymentFailedError,
    OverrideStorageError
)

from .poller import Poller

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "extract_token_from_header",
    "TokenPayload",
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "PaymentFailedError",
    "OverrideStorageError",
    "Poller",
]
