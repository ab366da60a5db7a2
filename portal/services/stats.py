"""
Stat aggregation for the customer dashboard, staff dashboard and billing page.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from portal.models.order import OrderStatus, PaymentStatus

CENT = Decimal("0.01")


def _value(value: Any) -> str:
    return value.value if hasattr(value, "value") else value


def money(amount: Any) -> Decimal:
    """Round an amount to cents."""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def with_tax(subtotal: Any, tax_rate: float) -> Decimal:
    return money(Decimal(str(subtotal)) * (Decimal("1") + Decimal(str(tax_rate))))


def count_status(orders: Iterable[Dict[str, Any]], *statuses: OrderStatus) -> int:
    wanted = {status.value for status in statuses}
    return sum(1 for order in orders if _value(order["status"]) in wanted)


def customer_dashboard_stats(orders: List[Dict[str, Any]], total_properties: int) -> Dict[str, int]:
    """Counts shown on the customer dashboard."""
    finished = {OrderStatus.DELIVERED.value, OrderStatus.ARCHIVED.value}
    return {
        "active_orders": sum(1 for order in orders if _value(order["status"]) not in finished),
        "upcoming_shoots": count_status(orders, OrderStatus.SCHEDULED),
        "total_properties": total_properties,
        "recently_delivered": count_status(orders, OrderStatus.DELIVERED),
    }


def admin_dashboard_stats(orders: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Counts and revenue shown on the staff dashboard."""
    revenue = sum(
        (money(order["total_amount"]) for order in orders
         if _value(order["payment_status"]) == PaymentStatus.PAID.value),
        Decimal("0")
    )
    return {
        "pending_orders": count_status(orders, OrderStatus.DRAFT, OrderStatus.SCHEDULED),
        "in_progress_orders": count_status(orders, OrderStatus.IN_PROGRESS, OrderStatus.EDITING),
        "completed_orders": count_status(orders, OrderStatus.DELIVERED),
        "total_revenue": float(money(revenue)),
    }


def billing_summary(
    orders: List[Dict[str, Any]],
    tax_rate: float,
    search: Optional[str] = None
) -> Dict[str, Any]:
    """
    Billing page totals and invoice rows.

    Totals cover every order; ``search`` (address or order id) narrows the
    invoice list only.
    """
    paid = [o for o in orders if _value(o["payment_status"]) == PaymentStatus.PAID.value]
    total_spent = sum((with_tax(o["total_amount"], tax_rate) for o in paid), Decimal("0"))

    invoices = []
    needle = search.strip().lower() if search else None
    for order in orders:
        if needle:
            address = (order.get("property_address") or "").lower()
            if needle not in address and needle not in order["id"].lower():
                continue
        subtotal = money(order["total_amount"])
        total = with_tax(subtotal, tax_rate)
        invoices.append({
            "order_id": order["id"],
            "property_address": order.get("property_address"),
            "services": order["services"],
            "status": _value(order["status"]),
            "payment_status": _value(order["payment_status"]),
            "subtotal": float(subtotal),
            "tax": float(total - subtotal),
            "total": float(total),
            "shoot_date": order.get("shoot_date"),
            "created_at": order["created_at"],
        })

    return {
        "total_spent": float(money(total_spent)),
        "paid_count": len(paid),
        "unpaid_count": sum(1 for o in orders if _value(o["payment_status"]) == PaymentStatus.PENDING.value),
        "invoices": invoices,
    }
