"""
Staff console endpoints: dashboard, order management, deliverables,
bookings, client messaging and service pricing.

Every route requires a staff account.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import List, Optional
from uuid import UUID
import math

from portal.models.user import User
from portal.models.order import OrderStatus
from portal.services.order import OrderService
from portal.services.reports import ReportService
from portal.services.messaging import MessagingService
from portal.services.catalog import CatalogService
from portal.schemas.order import (
    OrderResponse,
    OrderListResponse,
    OrderUpdate,
    OrderStatusUpdate,
    PaymentStatusUpdate,
    AssetCreate
)
from portal.schemas.reports import AdminDashboardResponse, BookingsResponse
from portal.schemas.message import MessageCreate, MessageResponse, ConversationSummary, ConversationThread
from portal.schemas.catalog import ServicePricingCreate, ServicePricingUpdate, ServicePricingResponse
from portal.schemas.error import get_common_error_responses, get_crud_error_responses
from portal.utils.dependencies import (
    get_current_admin_user,
    get_order_service,
    get_report_service,
    get_messaging_service,
    get_catalog_service
)


router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(get_current_admin_user)])


@router.get("/dashboard", response_model=AdminDashboardResponse, summary="Staff dashboard")
async def get_admin_dashboard(
    report_service: ReportService = Depends(get_report_service)
) -> AdminDashboardResponse:
    return AdminDashboardResponse.model_validate(await report_service.admin_dashboard())


# Orders

@router.get("/orders", response_model=OrderListResponse, summary="All orders")
async def list_all_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_admin_user),
    order_service: OrderService = Depends(get_order_service)
) -> OrderListResponse:
    orders, total = await order_service.list_orders(
        current_user,
        status=status_filter,
        search=search,
        page=page,
        page_size=page_size,
        all_customers=True
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0
    )


@router.get("/orders/{order_id}", response_model=OrderResponse, responses=get_common_error_responses())
async def get_any_order(
    order_id: UUID = Path(...),
    current_user: User = Depends(get_current_admin_user),
    order_service: OrderService = Depends(get_order_service)
) -> OrderResponse:
    return OrderResponse.model_validate(await order_service.get_order(order_id, current_user))


@router.put("/orders/{order_id}", response_model=OrderResponse, responses=get_crud_error_responses())
async def update_order(
    data: OrderUpdate,
    order_id: UUID = Path(...),
    order_service: OrderService = Depends(get_order_service)
) -> OrderResponse:
    return OrderResponse.model_validate(await order_service.update_order(order_id, data))


@router.put(
    "/orders/{order_id}/status",
    response_model=OrderResponse,
    summary="Set production status",
    description="Visible to the customer immediately",
    responses=get_common_error_responses()
)
async def update_order_status(
    data: OrderStatusUpdate,
    order_id: UUID = Path(...),
    order_service: OrderService = Depends(get_order_service)
) -> OrderResponse:
    return OrderResponse.model_validate(await order_service.update_status(order_id, data.status))


@router.put(
    "/orders/{order_id}/payment-status",
    response_model=OrderResponse,
    summary="Set payment status",
    responses=get_common_error_responses()
)
async def update_payment_status(
    data: PaymentStatusUpdate,
    order_id: UUID = Path(...),
    order_service: OrderService = Depends(get_order_service)
) -> OrderResponse:
    return OrderResponse.model_validate(await order_service.update_payment_status(order_id, data.payment_status))


@router.post(
    "/orders/{order_id}/assets",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach a deliverable",
    responses=get_common_error_responses()
)
async def add_order_asset(
    data: AssetCreate,
    order_id: UUID = Path(...),
    order_service: OrderService = Depends(get_order_service)
) -> OrderResponse:
    return OrderResponse.model_validate(await order_service.add_asset(order_id, data))


@router.delete(
    "/orders/{order_id}/assets/{asset_id}",
    response_model=OrderResponse,
    summary="Remove a deliverable",
    responses=get_common_error_responses()
)
async def remove_order_asset(
    order_id: UUID = Path(...),
    asset_id: UUID = Path(...),
    order_service: OrderService = Depends(get_order_service)
) -> OrderResponse:
    return OrderResponse.model_validate(await order_service.remove_asset(order_id, asset_id))


# Bookings

@router.get(
    "/bookings",
    response_model=BookingsResponse,
    summary="Upcoming shoots by date",
    description="filter: all (scheduled and on site), scheduled, in-progress"
)
async def list_bookings(
    booking_filter: str = Query("all", alias="filter"),
    search: Optional[str] = Query(None, max_length=255),
    report_service: ReportService = Depends(get_report_service)
) -> BookingsResponse:
    return BookingsResponse.model_validate(await report_service.bookings(booking_filter, search=search))


# Messaging

@router.get("/conversations", response_model=List[ConversationSummary], summary="Client inbox")
async def list_conversations(
    search: Optional[str] = Query(None, max_length=255, description="Match name, email or order id"),
    messaging_service: MessagingService = Depends(get_messaging_service)
) -> List[ConversationSummary]:
    return [ConversationSummary.model_validate(c) for c in await messaging_service.list_conversations(search)]


@router.get(
    "/conversations/{customer_id}",
    response_model=ConversationThread,
    summary="Read a conversation",
    description="Marks the customer's messages as read",
    responses=get_common_error_responses()
)
async def get_conversation(
    customer_id: UUID = Path(...),
    messaging_service: MessagingService = Depends(get_messaging_service)
) -> ConversationThread:
    return ConversationThread.model_validate(await messaging_service.get_thread(customer_id))


@router.post(
    "/conversations/{customer_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to a customer",
    responses=get_common_error_responses()
)
async def reply_to_customer(
    data: MessageCreate,
    customer_id: UUID = Path(...),
    current_user: User = Depends(get_current_admin_user),
    messaging_service: MessagingService = Depends(get_messaging_service)
) -> MessageResponse:
    return MessageResponse.model_validate(await messaging_service.reply(customer_id, data, current_user))


# Service pricing

@router.get("/services", response_model=List[ServicePricingResponse], summary="Full catalog")
async def list_all_services(
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> List[ServicePricingResponse]:
    services = await catalog_service.list_services(active_only=False)
    return [ServicePricingResponse.model_validate(s.to_dict()) for s in services]


@router.post(
    "/services",
    response_model=ServicePricingResponse,
    status_code=status.HTTP_201_CREATED,
    responses=get_crud_error_responses()
)
async def create_service(
    data: ServicePricingCreate,
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> ServicePricingResponse:
    return ServicePricingResponse.model_validate((await catalog_service.create_service(data)).to_dict())


@router.put("/services/{service_id}", response_model=ServicePricingResponse, responses=get_crud_error_responses())
async def update_service(
    data: ServicePricingUpdate,
    service_id: UUID = Path(...),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> ServicePricingResponse:
    return ServicePricingResponse.model_validate((await catalog_service.update_service(service_id, data)).to_dict())


@router.post(
    "/services/{service_id}/toggle",
    response_model=ServicePricingResponse,
    summary="Enable or disable a service",
    responses=get_common_error_responses()
)
async def toggle_service(
    service_id: UUID = Path(...),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> ServicePricingResponse:
    service = await catalog_service.get_service(service_id)
    updated = await catalog_service.set_active(service_id, not service.is_active)
    return ServicePricingResponse.model_validate(updated.to_dict())
