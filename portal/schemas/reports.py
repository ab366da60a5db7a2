"""
Pydantic schemas for dashboards, calendar and bookings views.
"""

from pydantic import BaseModel
from typing import Dict, List, Optional
from portal.schemas.order import OrderResponse


class CustomerDashboardResponse(BaseModel):
    active_orders: int
    upcoming_shoots: int
    total_properties: int
    recently_delivered: int
    recent_orders: List[OrderResponse]


class AdminDashboardResponse(BaseModel):
    pending_orders: int
    in_progress_orders: int
    completed_orders: int
    total_revenue: float
    recent_orders: List[OrderResponse]


class CalendarDay(BaseModel):
    date: str
    day: int
    orders: List[OrderResponse]


class CalendarMonthResponse(BaseModel):
    """Month grid: leading blank cells equal first_weekday (Sunday = 0)."""

    year: int
    month: int
    days_in_month: int
    first_weekday: int
    days: List[CalendarDay]
    selected_date: Optional[str] = None
    selected_orders: List[OrderResponse] = []


class BookingGroup(BaseModel):
    date: str
    orders: List[OrderResponse]


class BookingsResponse(BaseModel):
    filter: str
    scheduled_count: int
    in_progress_count: int
    groups: List[BookingGroup]
    counts_by_date: Dict[str, int]
