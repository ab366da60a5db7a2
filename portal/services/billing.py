"""
Billing service: saved payment methods and the billing summary.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from portal.config import settings
from portal.models.payment_method import PaymentMethod
from portal.models.user import User
from portal.overrides.registry import OverrideRegistry
from portal.repositories.payment_method import PaymentMethodRepository
from portal.schemas.billing import PaymentMethodCreate
from portal.services.order import OrderService
from portal.services.stats import billing_summary
from portal.utils.exceptions import (
    APIException,
    NotFoundError,
    BadRequestError,
    BusinessRuleViolationError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class BillingService:
    """Payment methods and invoices for a customer."""

    def __init__(self, db_session: AsyncSession, overrides: OverrideRegistry):
        self.db = db_session
        self.method_repo = PaymentMethodRepository(db_session)
        self.orders = OrderService(db_session, overrides)

    async def _get_owned(self, method_id: uuid.UUID, current_user: User) -> PaymentMethod:
        method = await self.method_repo.get_by_id(method_id)
        if not method or method.user_id != current_user.id:
            raise NotFoundError("Payment method", str(method_id))
        return method

    async def list_payment_methods(self, current_user: User) -> List[PaymentMethod]:
        return await self.method_repo.list_for_user(current_user.id)

    async def add_payment_method(self, data: PaymentMethodCreate, current_user: User) -> PaymentMethod:
        """
        Save a card. The first card saved becomes the default, as does any card
        saved with ``make_default``.
        """
        try:
            existing = await self.method_repo.list_for_user(current_user.id)
            fields = data.model_dump(exclude={"make_default"})
            method = await self.method_repo.create({**fields, "user_id": current_user.id, "is_default": not existing})

            if existing and data.make_default:
                method = await self.method_repo.set_default(current_user.id, method.id)

            logger.info(f"Payment method {method.brand} ****{method.last4} saved for {current_user.email}")
            return method
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to save payment method for {current_user.email}: {e}")
            raise BadRequestError("Failed to save payment method")

    async def set_default(self, method_id: uuid.UUID, current_user: User) -> PaymentMethod:
        await self._get_owned(method_id, current_user)
        return await self.method_repo.set_default(current_user.id, method_id)

    async def remove_payment_method(self, method_id: uuid.UUID, current_user: User) -> bool:
        """
        Remove a saved card.

        Raises:
            BusinessRuleViolationError: If the card is the default and other cards exist
        """
        method = await self._get_owned(method_id, current_user)
        if method.is_default:
            others = [m for m in await self.method_repo.list_for_user(current_user.id) if m.id != method.id]
            if others:
                raise BusinessRuleViolationError(
                    "default payment method",
                    "Please set another card as default before removing this one."
                )

        deleted = await self.method_repo.delete(method_id)
        logger.info(f"Payment method {method_id} removed for {current_user.email}")
        return deleted

    async def summary(self, current_user: User, search: Optional[str] = None) -> Dict[str, Any]:
        orders = await self.orders.merged_orders(agent_id=current_user.id)
        return billing_summary(orders, settings.tax_rate, search=search)
