"""
Customer order endpoints: placing orders, order history, status timeline
and delivered media.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import List, Optional
from uuid import UUID
import math

from portal.models.user import User
from portal.models.order import OrderStatus
from portal.models.deliverable import DeliverableType
from portal.services.order import OrderService
from portal.schemas.order import (
    OrderCreate,
    OrderResponse,
    OrderListResponse,
    OrderTimelineResponse,
    DeliverablesOrderResponse
)
from portal.schemas.error import get_error_responses, get_common_error_responses
from portal.utils.dependencies import get_current_active_user, get_order_service


router = APIRouter(tags=["Orders"])


@router.post(
    "/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description=(
        "Charges the selected payment method for the services plus tax, then "
        "creates the order. With save_as_draft the order is stored unpaid."
    ),
    responses=get_error_responses(400, 401, 402, 403, 404, 422)
)
async def create_order(
    order_data: OrderCreate,
    current_user: User = Depends(get_current_active_user),
    order_service: OrderService = Depends(get_order_service)
) -> OrderResponse:
    return OrderResponse.model_validate(await order_service.create_order(order_data, current_user))


@router.get("/orders", response_model=OrderListResponse, summary="List my orders")
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=255, description="Match address or order id"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    order_service: OrderService = Depends(get_order_service)
) -> OrderListResponse:
    orders, total = await order_service.list_orders(
        current_user,
        status=status_filter,
        search=search,
        page=page,
        page_size=page_size
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0
    )


@router.get(
    "/orders/{order_id}",
    response_model=OrderResponse,
    summary="Get order",
    responses=get_common_error_responses()
)
async def get_order(
    order_id: UUID = Path(...),
    current_user: User = Depends(get_current_active_user),
    order_service: OrderService = Depends(get_order_service)
) -> OrderResponse:
    return OrderResponse.model_validate(await order_service.get_order(order_id, current_user))


@router.get(
    "/orders/{order_id}/timeline",
    response_model=OrderTimelineResponse,
    summary="Order progress tracker",
    responses=get_common_error_responses()
)
async def get_order_timeline(
    order_id: UUID = Path(...),
    current_user: User = Depends(get_current_active_user),
    order_service: OrderService = Depends(get_order_service)
) -> OrderTimelineResponse:
    return OrderTimelineResponse.model_validate(await order_service.get_timeline(order_id, current_user))


@router.get(
    "/deliverables",
    response_model=List[DeliverablesOrderResponse],
    summary="Delivered media",
    description="Orders with at least one asset, optionally filtered by asset type and address"
)
async def list_deliverables(
    asset_type: Optional[DeliverableType] = Query(None, alias="type"),
    search: Optional[str] = Query(None, max_length=255),
    current_user: User = Depends(get_current_active_user),
    order_service: OrderService = Depends(get_order_service)
) -> List[DeliverablesOrderResponse]:
    results = await order_service.list_deliverables(current_user, deliverable_type=asset_type, search=search)
    return [DeliverablesOrderResponse.model_validate(r) for r in results]
