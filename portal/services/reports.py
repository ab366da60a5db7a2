"""
Dashboard, calendar and bookings views built from merged order records.
"""

from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from portal.models.user import User
from portal.overrides.registry import OverrideRegistry
from portal.repositories.property import PropertyRepository
from portal.services.bookings import build_bookings, build_calendar_month
from portal.services.order import OrderService
from portal.services.stats import admin_dashboard_stats, customer_dashboard_stats
import logging

logger = logging.getLogger(__name__)

RECENT_ORDERS = 5


class ReportService:
    """Read-only aggregate views for customers and staff."""

    def __init__(self, db_session: AsyncSession, overrides: OverrideRegistry):
        self.db = db_session
        self.orders = OrderService(db_session, overrides)
        self.property_repo = PropertyRepository(db_session)

    async def customer_dashboard(self, current_user: User) -> Dict[str, Any]:
        orders = await self.orders.merged_orders(agent_id=current_user.id)
        total_properties = await self.property_repo.count_for_agent(current_user.id)
        return {
            **customer_dashboard_stats(orders, total_properties),
            "recent_orders": orders[:RECENT_ORDERS],
        }

    async def admin_dashboard(self) -> Dict[str, Any]:
        orders = await self.orders.merged_orders()
        return {**admin_dashboard_stats(orders), "recent_orders": orders[:RECENT_ORDERS]}

    async def calendar(
        self,
        current_user: User,
        year: int,
        month: int,
        selected_date: Optional[str] = None
    ) -> Dict[str, Any]:
        """The customer's shoots laid out on a month grid."""
        orders = await self.orders.merged_orders(agent_id=current_user.id)
        return build_calendar_month(orders, year, month, selected_date)

    async def bookings(self, booking_filter: str = "all", search: Optional[str] = None) -> Dict[str, Any]:
        """Staff bookings grouped by shoot date."""
        orders = await self.orders.merged_orders(search=search)
        view = build_bookings(orders, booking_filter)
        logger.debug(f"Bookings view '{booking_filter}': {len(view['groups'])} dates")
        return view
