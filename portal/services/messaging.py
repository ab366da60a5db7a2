"""
Support messaging between customers and portal staff.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from portal.models.user import User
from portal.repositories.message import MessageRepository
from portal.repositories.order import OrderRepository
from portal.repositories.user import UserRepository
from portal.schemas.message import MessageCreate
from portal.services.order import parse_uuid
from portal.utils.exceptions import APIException, NotFoundError, ForbiddenError, BadRequestError
import uuid
import logging

logger = logging.getLogger(__name__)

STAFF_SENDER_NAME = "UPCA Admin"


class MessagingService:
    """
    One conversation per customer. Customers post into their own
    conversation; staff read and reply to any of them.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.message_repo = MessageRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.order_repo = OrderRepository(db_session)

    async def _validate_order(self, order_id: Optional[str], customer_id: uuid.UUID) -> Optional[uuid.UUID]:
        if not order_id:
            return None
        parsed = parse_uuid(order_id, "order_id")
        order = await self.order_repo.get_by_id(parsed)
        if not order:
            raise NotFoundError("Order", order_id)
        if order.agent_id != customer_id:
            raise ForbiddenError("Messages can only reference the customer's own orders")
        return parsed

    async def send_customer_message(self, data: MessageCreate, current_user: User) -> Dict[str, Any]:
        try:
            order_id = await self._validate_order(data.order_id, current_user.id)
            message = await self.message_repo.create({
                "customer_id": current_user.id,
                "order_id": order_id,
                "sender_id": current_user.id,
                "sender_name": current_user.full_name,
                "content": data.content,
                "is_admin": False,
            })
            logger.info(f"Message {message.id} sent by {current_user.email}")
            return message.to_dict()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to send message for {current_user.email}: {e}")
            raise BadRequestError("Failed to send message")

    async def list_customer_messages(
        self,
        current_user: User,
        since: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        """
        The customer's conversation, oldest first. Staff replies are marked
        read once the customer has fetched them.
        """
        messages = await self.message_repo.list_for_customer(current_user.id, since=since)
        payload = [message.to_dict() for message in messages]
        if any(m["is_admin"] and not m["is_read"] for m in payload):
            await self.message_repo.mark_read(current_user.id, from_admin=True)
        return payload

    async def list_conversations(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Staff inbox: one row per customer, most recent conversation first.

        ``search`` matches customer name, email or the conversation's order id.
        """
        messages = await self.message_repo.list_all()
        unread = await self.message_repo.unread_counts()

        latest: Dict[uuid.UUID, Any] = {}
        latest_order: Dict[uuid.UUID, Optional[uuid.UUID]] = {}
        for message in messages:
            latest.setdefault(message.customer_id, message)
            if message.order_id and message.customer_id not in latest_order:
                latest_order[message.customer_id] = message.order_id

        customers = await self.user_repo.get_by_ids(list(latest))
        needle = search.strip().lower() if search else None

        conversations = []
        for customer_id, message in latest.items():
            customer = customers.get(customer_id)
            if customer is None:
                continue
            order_id = latest_order.get(customer_id)
            row = {
                "customer_id": str(customer_id),
                "customer_name": customer.full_name,
                "customer_email": customer.email,
                "last_message": message.content,
                "last_message_at": message.sent_at,
                "unread_count": unread.get(customer_id, 0),
                "order_id": str(order_id) if order_id else None,
            }
            if needle and not any(
                needle in (value or "").lower()
                for value in (row["customer_name"], row["customer_email"], row["order_id"])
            ):
                continue
            conversations.append(row)
        return conversations

    async def _get_customer(self, customer_id: uuid.UUID) -> User:
        customer = await self.user_repo.get_by_id(customer_id)
        if not customer:
            raise NotFoundError("Customer", str(customer_id))
        return customer

    async def get_thread(self, customer_id: uuid.UUID) -> Dict[str, Any]:
        """A customer's conversation for staff. Marks the customer's messages read."""
        customer = await self._get_customer(customer_id)
        marked = await self.message_repo.mark_read(customer_id, from_admin=False)
        if marked:
            logger.debug(f"Marked {marked} messages read for customer {customer_id}")

        messages = await self.message_repo.list_for_customer(customer_id)
        return {
            "customer_id": str(customer.id),
            "customer_name": customer.full_name,
            "customer_email": customer.email,
            "messages": [message.to_dict() for message in messages],
        }

    async def reply(self, customer_id: uuid.UUID, data: MessageCreate, staff_user: User) -> Dict[str, Any]:
        """Post a staff reply into a customer's conversation."""
        await self._get_customer(customer_id)
        order_id = await self._validate_order(data.order_id, customer_id)
        message = await self.message_repo.create({
            "customer_id": customer_id,
            "order_id": order_id,
            "sender_id": staff_user.id,
            "sender_name": STAFF_SENDER_NAME,
            "content": data.content,
            "is_admin": True,
        })
        logger.info(f"Staff reply {message.id} sent to customer {customer_id} by {staff_user.email}")
        return message.to_dict()
