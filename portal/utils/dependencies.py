"""
FastAPI dependency injection utilities for authentication and service construction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from portal.database import get_db
from portal.models.user import User
from portal.overrides.registry import OverrideRegistry, get_override_registry
from portal.services.auth import AuthService
from portal.services.billing import BillingService
from portal.services.catalog import CatalogService
from portal.services.messaging import MessagingService
from portal.services.order import OrderService
from portal.services.payment_gateway import StripeGateway, get_payment_gateway
from portal.services.property import PropertyService
from portal.services.reports import ReportService
from portal.utils.exceptions import (
    APIException,
    UnauthorizedError,
    InactiveUserError,
    InsufficientPermissionsError
)


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


async def get_order_service(
    db: AsyncSession = Depends(get_db),
    overrides: OverrideRegistry = Depends(get_override_registry),
    gateway: StripeGateway = Depends(get_payment_gateway)
) -> OrderService:
    return OrderService(db, overrides, gateway)


async def get_report_service(
    db: AsyncSession = Depends(get_db),
    overrides: OverrideRegistry = Depends(get_override_registry)
) -> ReportService:
    return ReportService(db, overrides)


async def get_billing_service(
    db: AsyncSession = Depends(get_db),
    overrides: OverrideRegistry = Depends(get_override_registry)
) -> BillingService:
    return BillingService(db, overrides)


async def get_messaging_service(db: AsyncSession = Depends(get_db)) -> MessagingService:
    return MessagingService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the bearer token.

    Raises:
        UnauthorizedError: If no token is provided or it cannot be used
        TokenExpiredError: If the token is expired
        InactiveUserError: If the account is inactive
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except APIException:
        raise
    except Exception as e:
        raise UnauthorizedError(f"Authentication failed: {str(e)}")


async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise InactiveUserError()
    return current_user


async def get_current_admin_user(current_user: User = Depends(get_current_active_user)) -> User:
    """Require a staff account."""
    if not current_user.is_staff:
        raise InsufficientPermissionsError("access admin resources")
    return current_user


async def get_current_customer_user(current_user: User = Depends(get_current_active_user)) -> User:
    """Require a customer (agent or brokerage admin) account."""
    if not current_user.is_customer:
        raise InsufficientPermissionsError("access customer resources")
    return current_user
