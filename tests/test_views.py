"""
Tests for the order timeline, shoot calendar, staff bookings and dashboard stats.
These work on plain order dicts, as produced after overrides are merged.
"""

from decimal import Decimal

import pytest

from portal.models.order import OrderStatus
from portal.services.timeline import (
    client_status_label,
    step_index,
    progress_percent,
    tracker_steps,
    admin_timeline,
    build_timeline,
)
from portal.services.bookings import (
    month_grid,
    calendar_orders,
    build_calendar_month,
    filter_bookings,
    group_by_shoot_date,
    build_bookings,
)
from portal.services.stats import (
    money,
    with_tax,
    customer_dashboard_stats,
    admin_dashboard_stats,
    billing_summary,
)
from portal.utils.exceptions import ValidationError


def make_order(
    order_id: str = "order-1",
    status: str = "Scheduled",
    payment_status: str = "paid",
    shoot_date: str = None,
    total_amount: float = 250.0,
    address: str = "42 Harbour Street"
) -> dict:
    return {
        "id": order_id,
        "status": status,
        "payment_status": payment_status,
        "shoot_date": shoot_date,
        "total_amount": total_amount,
        "property_address": address,
        "services": ["Real Estate Photography"],
        "created_at": "2024-06-01T09:00:00",
    }


class TestTimeline:

    @pytest.mark.parametrize("status,label", [
        (OrderStatus.DRAFT, "Draft"),
        (OrderStatus.SCHEDULED, "Shoot Booked"),
        (OrderStatus.IN_PROGRESS, "On Site"),
        (OrderStatus.EDITING, "Post-Production"),
        (OrderStatus.DELIVERED, "Media Ready"),
        (OrderStatus.ARCHIVED, "Archived"),
    ])
    def test_client_labels(self, status, label):
        assert client_status_label(status) == label
        assert client_status_label(status.value) == label

    def test_step_positions(self):
        assert step_index("Draft") == -1
        assert step_index("Scheduled") == 0
        assert step_index("Editing") == 2
        assert step_index("Delivered") == 3
        assert step_index("Archived") == 3

    def test_progress(self):
        assert progress_percent("Draft") == 0
        assert progress_percent("Scheduled") == 0
        assert progress_percent("In Progress") == pytest.approx(100 / 3)
        assert progress_percent("Delivered") == 100

    def test_tracker_flags(self):
        steps = tracker_steps("Editing")
        assert [s["completed"] for s in steps] == [True, True, True, False]
        assert [s["current"] for s in steps] == [False, False, True, False]
        assert steps[0]["label"] == "Shoot Booked"

    def test_draft_has_no_completed_steps(self):
        assert not any(step["completed"] for step in tracker_steps("Draft"))

    def test_admin_timeline(self):
        assert [e["completed"] for e in admin_timeline("Draft")] == [True, False, False]
        assert [e["completed"] for e in admin_timeline("Editing")] == [True, True, False]
        assert [e["completed"] for e in admin_timeline("Delivered")] == [True, True, True]

    def test_build_timeline(self):
        timeline = build_timeline(make_order(status="In Progress"))
        assert timeline["order_id"] == "order-1"
        assert timeline["status"] == OrderStatus.IN_PROGRESS
        assert timeline["client_status"] == "On Site"
        assert timeline["step_index"] == 1
        assert len(timeline["steps"]) == 4


class TestCalendar:

    def test_month_grid_sunday_based(self):
        # 1 June 2024 was a Saturday, 1 September 2024 a Sunday
        assert month_grid(2024, 6) == {"days_in_month": 30, "first_weekday": 6}
        assert month_grid(2024, 9) == {"days_in_month": 30, "first_weekday": 0}
        assert month_grid(2024, 2)["days_in_month"] == 29

    def test_invalid_month(self):
        with pytest.raises(ValidationError):
            month_grid(2024, 13)

    def test_calendar_excludes_drafts_and_undated(self):
        orders = [
            make_order("a", "Scheduled", shoot_date="2024-06-10"),
            make_order("b", "Draft", shoot_date="2024-06-10"),
            make_order("c", "Delivered", shoot_date="2024-06-12"),
            make_order("d", "Scheduled"),
            make_order("e", "Archived", shoot_date="2024-06-12"),
        ]
        assert [o["id"] for o in calendar_orders(orders)] == ["a", "c"]

    def test_build_calendar_month(self):
        orders = [
            make_order("a", "Scheduled", shoot_date="2024-06-10"),
            make_order("b", "Editing", shoot_date="2024-06-10"),
            make_order("c", "Scheduled", shoot_date="2024-07-01"),
        ]
        month = build_calendar_month(orders, 2024, 6, selected_date="2024-06-10")

        assert len(month["days"]) == 30
        assert month["days"][9]["date"] == "2024-06-10"
        assert [o["id"] for o in month["days"][9]["orders"]] == ["a", "b"]
        assert all(not day["orders"] for day in month["days"] if day["day"] != 10)
        assert [o["id"] for o in month["selected_orders"]] == ["a", "b"]

    def test_calendar_without_selection(self):
        month = build_calendar_month([], 2024, 6)
        assert month["selected_date"] is None
        assert month["selected_orders"] == []


class TestBookings:

    def test_filters(self):
        orders = [
            make_order("a", "Scheduled"),
            make_order("b", "In Progress"),
            make_order("c", "Editing"),
        ]
        assert [o["id"] for o in filter_bookings(orders, "all")] == ["a", "b"]
        assert [o["id"] for o in filter_bookings(orders, "scheduled")] == ["a"]
        assert [o["id"] for o in filter_bookings(orders, "in-progress")] == ["b"]

    def test_unknown_filter(self):
        with pytest.raises(ValidationError):
            filter_bookings([], "delivered")

    def test_grouping_sorts_dates_and_puts_unscheduled_last(self):
        orders = [
            make_order("a", shoot_date="2024-06-12"),
            make_order("b"),
            make_order("c", shoot_date="2024-06-03"),
            make_order("d", shoot_date="2024-06-12"),
        ]
        groups = group_by_shoot_date(orders)
        assert list(groups) == ["2024-06-03", "2024-06-12", "unscheduled"]
        assert [o["id"] for o in groups["2024-06-12"]] == ["a", "d"]

    def test_build_bookings_counts(self):
        orders = [
            make_order("a", "Scheduled", shoot_date="2024-06-03"),
            make_order("b", "In Progress", shoot_date="2024-06-03"),
            make_order("c", "Scheduled", shoot_date="2024-06-05"),
            make_order("d", "Delivered", shoot_date="2024-06-05"),
        ]
        everything = build_bookings(orders, "all")
        assert everything["scheduled_count"] == 2
        assert everything["in_progress_count"] == 1

        bookings = build_bookings(orders, "scheduled")

        assert bookings["scheduled_count"] == 2
        assert bookings["in_progress_count"] == 0
        assert bookings["counts_by_date"] == {"2024-06-03": 1, "2024-06-05": 1}
        assert [g["date"] for g in bookings["groups"]] == ["2024-06-03", "2024-06-05"]


class TestStats:

    def test_money_rounds_half_up(self):
        assert money("10.005") == Decimal("10.01")
        assert money(250) == Decimal("250.00")

    def test_with_tax(self):
        assert with_tax(Decimal("250.00"), 0.13) == Decimal("282.50")
        assert with_tax("1200", 0.13) == Decimal("1356.00")

    def test_customer_dashboard(self):
        orders = [
            make_order("a", "Scheduled"),
            make_order("b", "Editing"),
            make_order("c", "Delivered"),
            make_order("d", "Archived"),
            make_order("e", "Draft"),
        ]
        stats = customer_dashboard_stats(orders, total_properties=4)
        assert stats == {
            "active_orders": 3,
            "upcoming_shoots": 1,
            "total_properties": 4,
            "recently_delivered": 1,
        }

    def test_admin_dashboard_revenue_counts_paid_orders_only(self):
        orders = [
            make_order("a", "Draft", payment_status="pending", total_amount=500),
            make_order("b", "Scheduled", payment_status="paid", total_amount=250),
            make_order("c", "In Progress", payment_status="paid", total_amount=350),
            make_order("d", "Delivered", payment_status="confirmed", total_amount=400),
        ]
        stats = admin_dashboard_stats(orders)
        assert stats["pending_orders"] == 2
        assert stats["in_progress_orders"] == 1
        assert stats["completed_orders"] == 1
        assert stats["total_revenue"] == 600.0

    def test_billing_summary(self):
        orders = [
            make_order("a", payment_status="paid", total_amount=250, address="42 Harbour Street"),
            make_order("b", payment_status="pending", total_amount=400, address="7 Queen Street"),
            make_order("c", payment_status="confirmed", total_amount=300, address="9 King Street"),
        ]
        summary = billing_summary(orders, 0.13)

        assert summary["total_spent"] == 282.5
        assert summary["paid_count"] == 1
        assert summary["unpaid_count"] == 1
        assert len(summary["invoices"]) == 3
        invoice = summary["invoices"][1]
        assert invoice["subtotal"] == 400.0
        assert invoice["tax"] == 52.0
        assert invoice["total"] == 452.0

    def test_billing_search_narrows_invoices_only(self):
        orders = [
            make_order("a", total_amount=250, address="42 Harbour Street"),
            make_order("b", total_amount=400, address="7 Queen Street"),
        ]
        summary = billing_summary(orders, 0.13, search="queen")

        assert [i["order_id"] for i in summary["invoices"]] == ["b"]
        assert summary["paid_count"] == 2
