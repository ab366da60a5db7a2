"""
Pydantic schemas for payment methods, invoices and billing summaries.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import date, datetime
from portal.models.order import OrderStatus, PaymentStatus


class PaymentMethodCreate(BaseModel):
    """Card tokenized by the payment gateway on the client."""

    gateway_reference: str = Field(..., min_length=3, max_length=255, examples=["pm_card_visa"])
    brand: str = Field(..., min_length=1, max_length=32, examples=["visa"])
    last4: str = Field(..., min_length=4, max_length=4, examples=["4242"])
    exp_month: int = Field(..., ge=1, le=12)
    exp_year: int = Field(..., ge=2000, le=2100)
    make_default: bool = False

    @field_validator("last4")
    @classmethod
    def validate_last4(cls, v):
        if not v.isdigit():
            raise ValueError("last4 must contain digits only")
        return v


class PaymentMethodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    gateway_reference: str
    brand: str
    last4: str
    exp_month: int
    exp_year: int
    is_default: bool
    created_at: datetime


class InvoiceResponse(BaseModel):
    """An order shown as an invoice on the billing page."""

    order_id: str
    property_address: Optional[str] = None
    services: List[str]
    status: OrderStatus
    payment_status: PaymentStatus
    subtotal: float
    tax: float
    total: float
    shoot_date: Optional[date] = None
    created_at: datetime


class BillingSummaryResponse(BaseModel):
    total_spent: float
    paid_count: int
    unpaid_count: int
    invoices: List[InvoiceResponse]

