"""
Order repository with eager loading of property, agent and deliverables.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, cast, String
from sqlalchemy.orm import selectinload
from portal.repositories.base import BaseRepository
from portal.models.order import Order
from portal.models.property import Property
from portal.models.deliverable import Deliverable
from typing import Optional, List, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository[Order]):
    """Repository for service orders and their deliverables."""

    def __init__(self, db: AsyncSession):
        super().__init__(Order, db)

    def _with_details(self, query):
        return query.options(
            selectinload(Order.property),
            selectinload(Order.agent),
            selectinload(Order.deliverables),
        ).execution_options(populate_existing=True)

    async def get_order_with_details(self, order_id: uuid.UUID) -> Optional[Order]:
        """
        Load an order with property, agent and deliverables, refreshing any
        instance already in the session.
        """
        try:
            result = await self.db.execute(self._with_details(select(Order).where(Order.id == order_id)))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to load order {order_id}: {e}")
            raise

    async def list_orders(
        self,
        agent_id: Optional[uuid.UUID] = None,
        property_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
    ) -> List[Order]:
        """
        List orders newest first, optionally scoped to an agent or property.

        ``search`` matches the property address or the order id.
        """
        try:
            query = select(Order).join(Property, Order.property_id == Property.id)

            if agent_id is not None:
                query = query.where(Order.agent_id == agent_id)
            if property_id is not None:
                query = query.where(Order.property_id == property_id)
            if search:
                pattern = f"%{search.strip().lower()}%"
                query = query.where(or_(
                    func.lower(Property.address).like(pattern),
                    func.lower(cast(Order.id, String)).like(pattern.replace("-", "")),
                    func.lower(cast(Order.id, String)).like(pattern),
                ))

            query = self._with_details(query.order_by(Order.created_at.desc()))
            result = await self.db.execute(query)
            orders = list(result.scalars().unique().all())

            logger.debug(f"Listed {len(orders)} orders")
            return orders
        except Exception as e:
            logger.error(f"Failed to list orders: {e}")
            raise

    async def count_for_property(self, property_id: uuid.UUID) -> int:
        return await self.count({"property_id": property_id})

    async def add_deliverable(self, order_id: uuid.UUID, data: Dict[str, Any]) -> Deliverable:
        """Attach a deliverable to an order."""
        try:
            deliverable = Deliverable(order_id=order_id, **data)
            self.db.add(deliverable)
            await self.db.commit()
            await self.db.refresh(deliverable)
            logger.info(f"Deliverable {deliverable.id} added to order {order_id}")
            return deliverable
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to add deliverable to order {order_id}: {e}")
            raise

    async def remove_deliverable(self, order_id: uuid.UUID, deliverable_id: uuid.UUID) -> bool:
        """Detach a deliverable from an order. Returns False when it does not exist."""
        try:
            result = await self.db.execute(
                select(Deliverable).where(
                    Deliverable.id == deliverable_id,
                    Deliverable.order_id == order_id
                )
            )
            deliverable = result.scalar_one_or_none()
            if deliverable is None:
                return False

            await self.db.delete(deliverable)
            await self.db.commit()
            logger.info(f"Deliverable {deliverable_id} removed from order {order_id}")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove deliverable {deliverable_id}: {e}")
            raise
