"""
Service layer for business logic implementation.
"""

from .auth import AuthService
from .billing import BillingService
from .catalog import CatalogService
from .error_handler import ErrorHandlerService
from .messaging import MessagingService
from .order import OrderService
from .payment_gateway import StripeGateway, get_payment_gateway
from .property import PropertyService
from .reports import ReportService

__all__ = [
    "AuthService",
    "BillingService",
    "CatalogService",
    "ErrorHandlerService",
    "MessagingService",
    "OrderService",
    "StripeGateway",
    "get_payment_gateway",
    "PropertyService",
    "ReportService",
]
