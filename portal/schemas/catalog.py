"""
Pydantic schemas for the service pricing catalog.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class ServicePricingCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255, examples=["Twilight Photography"])
    base_price: Decimal = Field(..., gt=0, examples=[275])
    description: str = Field("", max_length=2000)
    features: List[str] = Field(default_factory=list)
    is_active: bool = True
    icon: Optional[str] = Field(None, max_length=64)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Service name cannot be empty")
        return v.strip()


class ServicePricingUpdate(BaseModel):
    """Price, copy and availability edits from the admin services page."""

    base_price: Optional[Decimal] = Field(None, gt=0)
    description: Optional[str] = Field(None, max_length=2000)
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None
    icon: Optional[str] = Field(None, max_length=64)


class ServicePricingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    base_price: float
    description: str
    features: List[str]
    is_active: bool
    icon: Optional[str] = None
    updated_at: datetime


class ServiceQuoteRequest(BaseModel):
    services: List[str] = Field(..., min_length=1)


class ServiceQuoteResponse(BaseModel):
    services: List[str]
    service_prices: dict
    subtotal: float
    tax: float
    total: float
