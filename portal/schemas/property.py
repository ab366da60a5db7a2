"""
Pydantic schemas for property listing requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from portal.models.property import PropertyStatus


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    address: str = Field(
        ...,
        min_length=5,
        max_length=255,
        description="Street address of the listing",
        examples=["42 Harbour View Rd, Toronto, ON"]
    )
    status: PropertyStatus = Field(PropertyStatus.ACTIVE, description="Listing status")
    beds: int = Field(..., ge=0, le=50, examples=[3])
    baths: int = Field(..., ge=0, le=50, examples=[2])
    sqft: int = Field(..., gt=0, le=1000000, examples=[1850])
    price: Decimal = Field(..., gt=0, examples=[899000])
    mls_number: Optional[str] = Field(None, max_length=64, examples=["C5829173"])
    thumbnail_url: Optional[str] = Field(None, max_length=1024)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        """Validate and clean address."""
        if not v or not v.strip():
            raise ValueError("Address cannot be empty")
        return v.strip()

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        """Round price to cents."""
        return v.quantize(Decimal("0.01"))


class PropertyCreate(PropertyBase):
    """Schema for creating a property."""


class PropertyUpdate(BaseModel):
    """Schema for updating a property; all fields optional."""

    address: Optional[str] = Field(None, min_length=5, max_length=255)
    status: Optional[PropertyStatus] = None
    beds: Optional[int] = Field(None, ge=0, le=50)
    baths: Optional[int] = Field(None, ge=0, le=50)
    sqft: Optional[int] = Field(None, gt=0, le=1000000)
    price: Optional[Decimal] = Field(None, gt=0)
    mls_number: Optional[str] = Field(None, max_length=64)
    thumbnail_url: Optional[str] = Field(None, max_length=1024)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Address cannot be empty")
        return v.strip() if v else v


class PropertyResponse(BaseModel):
    """Property response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    address: str
    status: PropertyStatus
    beds: int
    baths: int
    sqft: int
    price: float
    mls_number: Optional[str] = None
    thumbnail_url: Optional[str] = None
    agent_id: str
    created_at: datetime
    updated_at: datetime


class PropertyListResponse(BaseModel):
    """Paginated property list."""

    properties: List[PropertyResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
