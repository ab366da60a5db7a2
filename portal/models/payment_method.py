"""
Saved payment method (card) model.
Stores only the gateway reference and display details, never card numbers.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from portal.database import Base
import uuid


class PaymentMethod(Base):
    """Card saved by a customer for paying orders."""

    __tablename__ = "payment_methods"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    gateway_reference: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Payment method identifier at the payment gateway"
    )

    brand: Mapped[str] = mapped_column(String(32), nullable=False)

    last4: Mapped[str] = mapped_column(String(4), nullable=False)

    exp_month: Mapped[int] = mapped_column(Integer, nullable=False)

    exp_year: Mapped[int] = mapped_column(Integer, nullable=False)

    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<PaymentMethod(id={self.id}, brand={self.brand}, last4={self.last4})>"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "gateway_reference": self.gateway_reference,
            "brand": self.brand,
            "last4": self.last4,
            "exp_month": self.exp_month,
            "exp_year": self.exp_year,
            "is_default": self.is_default,
            "created_at": self.created_at.isoformat(),
        }
