"""
Payment method repository for saved customer cards.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from portal.repositories.base import BaseRepository
from portal.models.payment_method import PaymentMethod
from typing import List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class PaymentMethodRepository(BaseRepository[PaymentMethod]):

    def __init__(self, db: AsyncSession):
        super().__init__(PaymentMethod, db)

    async def list_for_user(self, user_id: uuid.UUID) -> List[PaymentMethod]:
        """Saved cards, default first."""
        query = (
            select(PaymentMethod)
            .where(PaymentMethod.user_id == user_id)
            .order_by(PaymentMethod.is_default.desc(), PaymentMethod.created_at.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_default(self, user_id: uuid.UUID) -> Optional[PaymentMethod]:
        result = await self.db.execute(
            select(PaymentMethod).where(
                PaymentMethod.user_id == user_id,
                PaymentMethod.is_default.is_(True)
            )
        )
        return result.scalars().first()

    async def set_default(self, user_id: uuid.UUID, method_id: uuid.UUID) -> Optional[PaymentMethod]:
        """Make one card the default and clear the flag on the others."""
        try:
            await self.db.execute(
                update(PaymentMethod)
                .where(PaymentMethod.user_id == user_id, PaymentMethod.id != method_id)
                .values(is_default=False)
                .execution_options(synchronize_session="fetch")
            )
            await self.db.execute(
                update(PaymentMethod)
                .where(PaymentMethod.user_id == user_id, PaymentMethod.id == method_id)
                .values(is_default=True)
                .execution_options(synchronize_session="fetch")
            )
            await self.db.commit()
            return await self.get_by_id(method_id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to set default payment method {method_id}: {e}")
            raise
