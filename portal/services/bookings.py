"""
Calendar and bookings views over merged order records.

All functions take order dicts whose status already reflects overrides and
whose ``shoot_date`` is an ISO ``YYYY-MM-DD`` string or None.
"""

from typing import Any, Dict, Iterable, List, Optional
from collections import OrderedDict
import calendar
import logging

from portal.models.order import OrderStatus
from portal.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Statuses that appear on the customer shoot calendar
CALENDAR_STATUSES = (
    OrderStatus.SCHEDULED.value,
    OrderStatus.IN_PROGRESS.value,
    OrderStatus.EDITING.value,
    OrderStatus.DELIVERED.value,
)

# Staff bookings filter -> statuses included
BOOKING_FILTERS: Dict[str, tuple] = {
    "all": (OrderStatus.SCHEDULED.value, OrderStatus.IN_PROGRESS.value),
    "scheduled": (OrderStatus.SCHEDULED.value,),
    "in-progress": (OrderStatus.IN_PROGRESS.value,),
}


def _status_value(order: Dict[str, Any]) -> str:
    status = order["status"]
    return status.value if isinstance(status, OrderStatus) else status


def month_grid(year: int, month: int) -> Dict[str, int]:
    """
    Days in the month and the weekday of the 1st, with Sunday = 0.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")

    monday_based_first, days_in_month = calendar.monthrange(year, month)
    return {
        "days_in_month": days_in_month,
        "first_weekday": (monday_based_first + 1) % 7,
    }


def calendar_orders(orders: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Orders that belong on the customer calendar."""
    return [order for order in orders if _status_value(order) in CALENDAR_STATUSES and order.get("shoot_date")]


def orders_by_day(orders: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Group orders by shoot date string."""
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for order in orders:
        shoot_date = order.get("shoot_date")
        if shoot_date:
            grouped.setdefault(shoot_date, []).append(order)
    return grouped


def build_calendar_month(
    orders: Iterable[Dict[str, Any]],
    year: int,
    month: int,
    selected_date: Optional[str] = None
) -> Dict[str, Any]:
    """
    Customer calendar for one month: every day with its shoots, plus the
    shoots on ``selected_date`` when given.
    """
    grid = month_grid(year, month)
    visible = calendar_orders(orders)
    by_day = orders_by_day(visible)

    days = []
    for day in range(1, grid["days_in_month"] + 1):
        key = f"{year:04d}-{month:02d}-{day:02d}"
        days.append({"date": key, "day": day, "orders": by_day.get(key, [])})

    return {
        "year": year,
        "month": month,
        **grid,
        "days": days,
        "selected_date": selected_date,
        "selected_orders": by_day.get(selected_date, []) if selected_date else [],
    }


def filter_bookings(orders: Iterable[Dict[str, Any]], booking_filter: str = "all") -> List[Dict[str, Any]]:
    """Orders matching a staff bookings filter."""
    if booking_filter not in BOOKING_FILTERS:
        raise ValidationError(
            f"Invalid bookings filter '{booking_filter}'. Must be one of: {', '.join(BOOKING_FILTERS)}"
        )
    statuses = BOOKING_FILTERS[booking_filter]
    return [order for order in orders if _status_value(order) in statuses]


def group_by_shoot_date(orders: Iterable[Dict[str, Any]]) -> "OrderedDict[str, List[Dict[str, Any]]]":
    """
    Group orders by shoot date with dates ascending.
    Orders without a shoot date are grouped under "unscheduled", listed last.
    """
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for order in orders:
        grouped.setdefault(order.get("shoot_date") or "unscheduled", []).append(order)

    dated = sorted(key for key in grouped if key != "unscheduled")
    result: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict((key, grouped[key]) for key in dated)
    if "unscheduled" in grouped:
        result["unscheduled"] = grouped["unscheduled"]
    return result


def build_bookings(orders: Iterable[Dict[str, Any]], booking_filter: str = "all") -> Dict[str, Any]:
    """Staff bookings view: filtered orders grouped by shoot date."""
    orders = list(orders)
    selected = filter_bookings(orders, booking_filter)
    groups = group_by_shoot_date(selected)

    return {
        "filter": booking_filter,
        "scheduled_count": sum(1 for o in selected if _status_value(o) == OrderStatus.SCHEDULED.value),
        "in_progress_count": sum(1 for o in selected if _status_value(o) == OrderStatus.IN_PROGRESS.value),
        "groups": [{"date": key, "orders": value} for key, value in groups.items()],
        "counts_by_date": {key: len(value) for key, value in groups.items()},
    }
