"""
Customer dashboard and shoot calendar endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import Optional

from portal.models.user import User
from portal.services.reports import ReportService
from portal.schemas.reports import CustomerDashboardResponse, CalendarMonthResponse
from portal.utils.dependencies import get_current_active_user, get_report_service


router = APIRouter(tags=["Dashboard"])


@router.get("/dashboard", response_model=CustomerDashboardResponse, summary="Customer dashboard")
async def get_dashboard(
    current_user: User = Depends(get_current_active_user),
    report_service: ReportService = Depends(get_report_service)
) -> CustomerDashboardResponse:
    return CustomerDashboardResponse.model_validate(await report_service.customer_dashboard(current_user))


@router.get(
    "/calendar",
    response_model=CalendarMonthResponse,
    summary="Shoot calendar",
    description="Month grid of booked, on-site, editing and delivered shoots. Defaults to the current month."
)
async def get_calendar(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    selected_date: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_active_user),
    report_service: ReportService = Depends(get_report_service)
) -> CalendarMonthResponse:
    today = date.today()
    view = await report_service.calendar(
        current_user,
        year or today.year,
        month or today.month,
        selected_date.isoformat() if selected_date else None
    )
    return CalendarMonthResponse.model_validate(view)
