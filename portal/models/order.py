"""
Order model for marketing service orders placed against a property.
Tracks shoot scheduling, production status, payment state and the price snapshot.
"""

from sqlalchemy import String, Text, Numeric, Date, JSON, Enum as SQLEnum, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from portal.database import Base
from decimal import Decimal
from datetime import date
from typing import Dict, List, Optional, TYPE_CHECKING
import enum
import uuid

if TYPE_CHECKING:
    from portal.models.user import User
    from portal.models.property import Property
    from portal.models.deliverable import Deliverable


class OrderStatus(str, enum.Enum):
    """Production status of an order."""
    DRAFT = "Draft"
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    EDITING = "Editing"
    DELIVERED = "Delivered"
    ARCHIVED = "Archived"


class PaymentStatus(str, enum.Enum):
    """Payment state of an order."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PAID = "paid"


class Order(Base):
    """
    Service order for a property.
    The row is the authoritative record; status, payment status and deliverables
    may be shadowed by local overrides when read.
    """

    __tablename__ = "orders"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Agent who placed the order"
    )

    services: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered service names"
    )

    service_prices: Mapped[Dict[str, float]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Base price of each service at the time of ordering"
    )

    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus),
        nullable=False,
        default=OrderStatus.DRAFT,
        index=True
    )

    payment_status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True
    )

    shoot_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)

    shoot_time: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment="Preferred time window label"
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Subtotal of ordered services before tax"
    )

    payment_intent_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    property: Mapped["Property"] = relationship("Property", lazy="selectin")

    agent: Mapped["User"] = relationship("User", lazy="selectin")

    deliverables: Mapped[List["Deliverable"]] = relationship(
        "Deliverable",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Deliverable.created_at.asc()"
    )

    __table_args__ = (
        Index("idx_order_agent_status", "agent_id", "status"),
        Index("idx_order_status_shoot_date", "status", "shoot_date"),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, status={self.status}, total={self.total_amount})>"

    def calculate_subtotal(self) -> Decimal:
        """Sum the price snapshot of the ordered services."""
        total = sum((Decimal(str(self.service_prices.get(name, 0))) for name in self.services), Decimal("0"))
        return total.quantize(Decimal("0.01"))

    def has_service(self, name: str) -> bool:
        return name in (self.services or [])

    def to_dict(self) -> dict:
        """
        Convert order to dictionary including the property address,
        the agent's name and the attached deliverables.
        """
        return {
            "id": str(self.id),
            "property_id": str(self.property_id),
            "property_address": self.property.address if self.property else None,
            "agent_id": str(self.agent_id),
            "agent_name": self.agent.full_name if self.agent else None,
            "agent_email": self.agent.email if self.agent else None,
            "services": list(self.services or []),
            "service_prices": dict(self.service_prices or {}),
            "status": self.status.value,
            "payment_status": self.payment_status.value,
            "shoot_date": self.shoot_date.isoformat() if self.shoot_date else None,
            "shoot_time": self.shoot_time,
            "notes": self.notes,
            "total_amount": float(self.total_amount),
            "payment_intent_id": self.payment_intent_id,
            "deliverables": [deliverable.to_dict() for deliverable in self.deliverables],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
