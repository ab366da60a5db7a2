"""
Order status timeline: customer-facing labels, tracker steps and progress.
"""

from typing import Any, Dict, List, Union
from portal.models.order import OrderStatus

StatusLike = Union[OrderStatus, str]

# Label the customer sees for each production status
CLIENT_STATUS_LABELS: Dict[OrderStatus, str] = {
    OrderStatus.DRAFT: "Draft",
    OrderStatus.SCHEDULED: "Shoot Booked",
    OrderStatus.IN_PROGRESS: "On Site",
    OrderStatus.EDITING: "Post-Production",
    OrderStatus.DELIVERED: "Media Ready",
    OrderStatus.ARCHIVED: "Archived",
}

# Steps on the customer progress tracker
TRACKER_STEPS: List[OrderStatus] = [
    OrderStatus.SCHEDULED,
    OrderStatus.IN_PROGRESS,
    OrderStatus.EDITING,
    OrderStatus.DELIVERED,
]


def _status(value: StatusLike) -> OrderStatus:
    return value if isinstance(value, OrderStatus) else OrderStatus(value)


def client_status_label(status: StatusLike) -> str:
    """Customer-facing label for a production status."""
    return CLIENT_STATUS_LABELS[_status(status)]


def step_index(status: StatusLike) -> int:
    """
    Position of a status on the tracker.

    Drafts are before the first step (-1); archived orders count as past the
    final step.
    """
    status = _status(status)
    if status == OrderStatus.DRAFT:
        return -1
    if status == OrderStatus.ARCHIVED:
        return len(TRACKER_STEPS) - 1
    return TRACKER_STEPS.index(status)


def progress_percent(status: StatusLike) -> float:
    index = step_index(status)
    return max(0.0, index / (len(TRACKER_STEPS) - 1) * 100)


def tracker_steps(status: StatusLike) -> List[Dict[str, Any]]:
    """Tracker steps with completed/current flags for the given status."""
    index = step_index(status)
    return [
        {
            "label": CLIENT_STATUS_LABELS[step],
            "status": step,
            "completed": position <= index,
            "current": position == index,
        }
        for position, step in enumerate(TRACKER_STEPS)
    ]


def admin_timeline(status: StatusLike) -> List[Dict[str, Any]]:
    """Three-point timeline shown on the staff order page."""
    status = _status(status)
    return [
        {"label": "Order Created", "completed": True},
        {"label": "Scheduled", "completed": status != OrderStatus.DRAFT},
        {"label": "Delivered", "completed": status == OrderStatus.DELIVERED},
    ]


def build_timeline(order: Dict[str, Any]) -> Dict[str, Any]:
    """Timeline payload for a merged order record."""
    status = _status(order["status"])
    return {
        "order_id": order["id"],
        "status": status,
        "client_status": client_status_label(status),
        "step_index": step_index(status),
        "progress_percent": progress_percent(status),
        "steps": tracker_steps(status),
        "admin_timeline": admin_timeline(status),
    }
