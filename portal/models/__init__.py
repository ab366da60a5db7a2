"""
Database models for the Realty Media Portal.
"""

from portal.models.user import User, UserRole
from portal.models.property import Property, PropertyStatus
from portal.models.order import Order, OrderStatus, PaymentStatus
from portal.models.deliverable import Deliverable, DeliverableType
from portal.models.message import Message
from portal.models.service_pricing import ServicePricing, DEFAULT_SERVICES
from portal.models.payment_method import PaymentMethod

__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyStatus",
    "Order",
    "OrderStatus",
    "PaymentStatus",
    "Deliverable",
    "DeliverableType",
    "Message",
    "ServicePricing",
    "DEFAULT_SERVICES",
    "PaymentMethod",
]
