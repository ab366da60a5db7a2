"""
Pydantic schemas for orders, deliverables and the order status timeline.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Dict, List, Optional
from datetime import date, datetime
from portal.models.order import OrderStatus, PaymentStatus
from portal.models.deliverable import DeliverableType


class OrderCreate(BaseModel):
    """
    New order for a property.

    A paid order needs a saved payment method; ``save_as_draft`` creates an
    unpaid draft instead.
    """

    property_id: str = Field(..., description="Property the services are ordered for")
    services: List[str] = Field(..., min_length=1, description="Names of the services to order")
    shoot_date: Optional[date] = Field(None, description="Requested shoot date")
    shoot_time: Optional[str] = Field(None, max_length=64, examples=["Morning (8am - 12pm)"])
    notes: Optional[str] = Field(None, max_length=5000)
    payment_method_id: Optional[str] = Field(None, description="Saved payment method to charge")
    save_as_draft: bool = False

    @field_validator("services")
    @classmethod
    def validate_services(cls, v):
        cleaned = []
        for name in v:
            name = name.strip()
            if not name:
                raise ValueError("Service names cannot be empty")
            if name not in cleaned:
                cleaned.append(name)
        return cleaned

    @model_validator(mode="after")
    def validate_payment(self):
        if not self.save_as_draft and not self.payment_method_id:
            raise ValueError("A payment method is required unless the order is saved as a draft")
        return self


class OrderUpdate(BaseModel):
    """Staff edits to an order."""

    shoot_date: Optional[date] = None
    shoot_time: Optional[str] = Field(None, max_length=64)
    notes: Optional[str] = Field(None, max_length=5000)
    services: Optional[List[str]] = Field(None, min_length=1)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


class AssetCreate(BaseModel):
    """Asset added by staff for one of the order's services."""

    service_name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048, examples=["https://media.example.com/42-harbour.zip"])
    label: Optional[str] = Field(None, max_length=255)
    type: Optional[DeliverableType] = None
    is_web_optimized: bool = True
    is_print_optimized: bool = False


class DeliverableResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_id: str
    type: DeliverableType
    label: str
    url: str
    service_name: Optional[str] = None
    is_web_optimized: bool = True
    is_print_optimized: bool = False
    created_at: Optional[datetime] = None


class OrderResponse(BaseModel):
    """Order as seen by customers and staff, with overrides applied."""

    id: str
    property_id: str
    property_address: Optional[str] = None
    agent_id: str
    agent_name: Optional[str] = None
    agent_email: Optional[str] = None
    services: List[str]
    service_prices: Dict[str, float]
    status: OrderStatus
    client_status: str = Field(..., description="Status label shown to the customer")
    payment_status: PaymentStatus
    shoot_date: Optional[date] = None
    shoot_time: Optional[str] = None
    notes: Optional[str] = None
    total_amount: float = Field(..., description="Subtotal before tax")
    total_with_tax: float
    payment_intent_id: Optional[str] = None
    deliverables: List[DeliverableResponse]
    created_at: datetime
    updated_at: datetime


class OrderListResponse(BaseModel):
    orders: List[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class TimelineStep(BaseModel):
    label: str
    status: OrderStatus
    completed: bool
    current: bool


class AdminTimelineEntry(BaseModel):
    label: str
    completed: bool


class OrderTimelineResponse(BaseModel):
    """Progress tracker for an order."""

    order_id: str
    status: OrderStatus
    client_status: str
    step_index: int
    progress_percent: float
    steps: List[TimelineStep]
    admin_timeline: List[AdminTimelineEntry]


class DeliverablesOrderResponse(BaseModel):
    """Order summary on the customer deliverables page."""

    order_id: str
    property_address: Optional[str] = None
    status: OrderStatus
    shoot_date: Optional[date] = None
    deliverables: List[DeliverableResponse]
