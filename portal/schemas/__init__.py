"""
Pydantic schemas for request and response validation.
"""

from .auth import (
    LoginRequest,
    RegisterRequest,
    AdminRegisterRequest,
    LoginResponse,
    CurrentUserResponse,
)
from .property import PropertyCreate, PropertyUpdate, PropertyResponse, PropertyListResponse
from .order import OrderCreate, OrderUpdate, OrderResponse, OrderListResponse, OrderTimelineResponse
from .catalog import ServicePricingCreate, ServicePricingUpdate, ServicePricingResponse
from .message import MessageCreate, MessageResponse, ConversationSummary, ConversationThread
from .billing import PaymentMethodCreate, PaymentMethodResponse, BillingSummaryResponse
from .reports import CustomerDashboardResponse, AdminDashboardResponse, CalendarMonthResponse, BookingsResponse
from .error import ErrorResponse, APIErrorResponse

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "AdminRegisterRequest",
    "LoginResponse",
    "CurrentUserResponse",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyListResponse",
    "OrderCreate",
    "OrderUpdate",
    "OrderResponse",
    "OrderListResponse",
    "OrderTimelineResponse",
    "ServicePricingCreate",
    "ServicePricingUpdate",
    "ServicePricingResponse",
    "MessageCreate",
    "MessageResponse",
    "ConversationSummary",
    "ConversationThread",
    "PaymentMethodCreate",
    "PaymentMethodResponse",
    "BillingSummaryResponse",
    "CustomerDashboardResponse",
    "AdminDashboardResponse",
    "CalendarMonthResponse",
    "BookingsResponse",
    "ErrorResponse",
    "APIErrorResponse",
]
