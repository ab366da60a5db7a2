"""
Service pricing model for the catalog of orderable marketing services.
"""

from sqlalchemy import String, Text, Boolean, Numeric, JSON
from sqlalchemy.orm import Mapped, mapped_column
from portal.database import Base
from decimal import Decimal
from typing import List, Optional


# Catalog seeded into an empty database
DEFAULT_SERVICES = [
    {
        "name": "Real Estate Photography",
        "base_price": Decimal("250.00"),
        "description": "Professional property photography with HDR processing",
        "features": ["25-35 HDR Photos", "Same-day turnaround", "Web & print optimized"],
        "icon": "Camera",
    },
    {
        "name": "Property Video Tours",
        "base_price": Decimal("350.00"),
        "description": "Cinematic walkthrough videos with music",
        "features": ["2-3 minute video", "Professional editing", "Music licensing included"],
        "icon": "Video",
    },
    {
        "name": "360 / Virtual Tours",
        "base_price": Decimal("400.00"),
        "description": "Interactive 360° virtual tour experience",
        "features": ["Matterport 3D tour", "Floor plan included", "Unlimited hosting"],
        "icon": "Box",
    },
    {
        "name": "Drone Photos & Films",
        "base_price": Decimal("300.00"),
        "description": "Aerial photography and videography",
        "features": ["10-15 aerial photos", "1-minute aerial video", "Weather permitting"],
        "icon": "Plane",
    },
    {
        "name": "Property Microsites & Agent Websites",
        "base_price": Decimal("500.00"),
        "description": "Custom property website with all media",
        "features": ["Custom domain", "All media integrated", "Lead capture forms"],
        "icon": "Globe",
    },
    {
        "name": "Full-Service Real Estate Marketing",
        "base_price": Decimal("1200.00"),
        "description": "Complete marketing package for luxury properties",
        "features": ["All services included", "Social media content", "Print materials"],
        "icon": "ShoppingCart",
    },
]


class ServicePricing(Base):
    """
    A service in the catalog. The name identifies the service on orders.
    """

    __tablename__ = "service_pricing"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )

    base_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False
    )

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    icon: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<ServicePricing(name={self.name}, base_price={self.base_price})>"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "base_price": float(self.base_price),
            "description": self.description,
            "features": list(self.features or []),
            "is_active": self.is_active,
            "icon": self.icon,
            "updated_at": self.updated_at.isoformat(),
        }
