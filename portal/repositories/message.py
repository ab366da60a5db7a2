"""
Message repository for customer support conversations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, and_
from portal.repositories.base import BaseRepository
from portal.models.message import Message
from typing import Dict, List, Optional
from datetime import datetime
import uuid
import logging

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):
    """Repository for support messages, grouped by customer conversation."""

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    async def list_for_customer(
        self,
        customer_id: uuid.UUID,
        since: Optional[datetime] = None
    ) -> List[Message]:
        """Messages in a customer's conversation, oldest first."""
        try:
            query = select(Message).where(Message.customer_id == customer_id)
            if since is not None:
                query = query.where(Message.sent_at > since)
            query = query.order_by(Message.sent_at.asc())
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to list messages for customer {customer_id}: {e}")
            raise

    async def list_all(self) -> List[Message]:
        """Every message, newest first. Used to build the staff inbox."""
        result = await self.db.execute(select(Message).order_by(Message.sent_at.desc()))
        return list(result.scalars().all())

    async def unread_counts(self) -> Dict[uuid.UUID, int]:
        """Unread customer-sent messages per conversation."""
        query = (
            select(Message.customer_id, func.count(Message.id))
            .where(and_(Message.is_admin.is_(False), Message.is_read.is_(False)))
            .group_by(Message.customer_id)
        )
        result = await self.db.execute(query)
        return {customer_id: count for customer_id, count in result.all()}

    async def mark_read(self, customer_id: uuid.UUID, from_admin: bool) -> int:
        """
        Mark messages in a conversation as read.

        Args:
            customer_id: Conversation owner
            from_admin: Mark staff-sent messages (customer reading) or
                        customer-sent messages (staff reading)

        Returns:
            Number of messages marked
        """
        try:
            stmt = (
                update(Message)
                .where(
                    Message.customer_id == customer_id,
                    Message.is_admin.is_(from_admin),
                    Message.is_read.is_(False)
                )
                .values(is_read=True)
                .execution_options(synchronize_session="fetch")
            )
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount or 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to mark messages read for {customer_id}: {e}")
            raise
