"""
Repository layer for data access operations.
"""

from portal.repositories.base import BaseRepository
from portal.repositories.user import UserRepository
from portal.repositories.property import PropertyRepository
from portal.repositories.order import OrderRepository
from portal.repositories.message import MessageRepository
from portal.repositories.service_pricing import ServicePricingRepository
from portal.repositories.payment_method import PaymentMethodRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PropertyRepository",
    "OrderRepository",
    "MessageRepository",
    "ServicePricingRepository",
    "PaymentMethodRepository",
]
