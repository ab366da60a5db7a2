"""
Property model for listings that agents order marketing media for.
"""

from sqlalchemy import String, Integer, Numeric, Enum as SQLEnum, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column
from portal.database import Base
from decimal import Decimal
from typing import Optional
import enum
import uuid


class PropertyStatus(str, enum.Enum):
    """Listing status shown on the agent's property cards."""
    ACTIVE = "Active listing"
    COMING_SOON = "Coming soon"
    SOLD = "Sold"


class Property(Base):
    """
    Property listing owned by an agent.
    Orders for photo, video, drone and tour services are placed against a property.
    """

    __tablename__ = "properties"

    address: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Street address of the listing"
    )

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus),
        nullable=False,
        default=PropertyStatus.ACTIVE,
        index=True
    )

    beds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    baths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    sqft: Mapped[int] = mapped_column(Integer, nullable=False)

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        comment="Listing price"
    )

    mls_number: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        index=True
    )

    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the agent who owns this property"
    )

    __table_args__ = (
        Index("idx_property_agent_status", "agent_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, address={self.address[:30]}, price={self.price})>"

    def validate_price(self) -> bool:
        """Validate that price is positive."""
        return self.price is not None and self.price > 0

    def validate_rooms(self) -> bool:
        """Validate bed and bath counts are within 0..50."""
        return 0 <= self.beds <= 50 and 0 <= self.baths <= 50

    def validate_sqft(self) -> bool:
        return self.sqft is not None and self.sqft > 0

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.agent_id == user_id

    def to_dict(self) -> dict:
        """Convert property to dictionary."""
        return {
            "id": str(self.id),
            "address": self.address,
            "status": self.status.value,
            "beds": self.beds,
            "baths": self.baths,
            "sqft": self.sqft,
            "price": float(self.price),
            "mls_number": self.mls_number,
            "thumbnail_url": self.thumbnail_url,
            "agent_id": str(self.agent_id),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
