"""
Deliverable model for finished media files and links attached to an order.
"""

from sqlalchemy import String, Boolean, Enum as SQLEnum, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from portal.database import Base
from typing import Optional, TYPE_CHECKING
import enum
import uuid

if TYPE_CHECKING:
    from portal.models.order import Order


class DeliverableType(str, enum.Enum):
    """Kind of asset produced for an ordered service."""
    PHOTO = "photo"
    VIDEO = "video"
    TOUR_360 = "360"
    DRONE = "drone"
    MICROSITE = "microsite"
    LINK = "link"
    OTHER = "other"


# Service names that deliver a hosted link rather than files
LINK_SERVICES = ("Property Microsites & Agent Websites",)


class Deliverable(Base):
    """
    Asset delivered for one of the services on an order.
    """

    __tablename__ = "deliverables"

    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    type: Mapped[DeliverableType] = mapped_column(
        SQLEnum(DeliverableType),
        nullable=False,
        default=DeliverableType.OTHER,
        index=True
    )

    label: Mapped[str] = mapped_column(String(255), nullable=False)

    url: Mapped[str] = mapped_column(String(2048), nullable=False)

    service_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Ordered service this asset belongs to"
    )

    is_web_optimized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_print_optimized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    order: Mapped["Order"] = relationship("Order", back_populates="deliverables")

    def __repr__(self) -> str:
        return f"<Deliverable(id={self.id}, type={self.type}, order_id={self.order_id})>"

    @staticmethod
    def default_type_for_service(service_name: Optional[str]) -> DeliverableType:
        """Microsite services deliver a link; everything else defaults to a generic asset."""
        if service_name in LINK_SERVICES:
            return DeliverableType.LINK
        return DeliverableType.OTHER

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "order_id": str(self.order_id),
            "type": self.type.value,
            "label": self.label,
            "url": self.url,
            "service_name": self.service_name,
            "is_web_optimized": self.is_web_optimized,
            "is_print_optimized": self.is_print_optimized,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
