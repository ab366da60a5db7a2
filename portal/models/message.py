"""
Message model for the support conversation between a customer and portal staff.
"""

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column
from portal.database import Base
from datetime import datetime, timezone
from typing import Optional
import uuid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(Base):
    """
    A single message in a customer's support conversation.
    Every customer has exactly one conversation, identified by customer_id.
    """

    __tablename__ = "messages"

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Customer who owns the conversation"
    )

    order_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )

    sender_name: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    # Microsecond resolution so messages sent in the same second keep their order
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        index=True
    )

    __table_args__ = (
        Index("idx_message_customer_sent", "customer_id", "sent_at"),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, customer_id={self.customer_id}, is_admin={self.is_admin})>"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "customer_id": str(self.customer_id),
            "order_id": str(self.order_id) if self.order_id else None,
            "sender_id": str(self.sender_id),
            "sender_name": self.sender_name,
            "content": self.content,
            "is_admin": self.is_admin,
            "is_read": self.is_read,
            "timestamp": self.sent_at.isoformat(),
        }
