"""
Pydantic schemas for support messaging.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    order_id: Optional[str] = Field(None, description="Order the message is about")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class MessageResponse(BaseModel):
    id: str
    customer_id: str
    order_id: Optional[str] = None
    sender_id: str
    sender_name: str
    content: str
    is_admin: bool
    is_read: bool
    timestamp: datetime


class ConversationSummary(BaseModel):
    """One row in the staff inbox."""

    customer_id: str
    customer_name: str
    customer_email: str
    last_message: str
    last_message_at: datetime
    unread_count: int
    order_id: Optional[str] = None


class ConversationThread(BaseModel):
    customer_id: str
    customer_name: str
    customer_email: str
    messages: List[MessageResponse]
