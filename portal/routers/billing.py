"""
Billing endpoints: invoice summary and saved payment methods.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import List, Optional
from uuid import UUID

from portal.models.user import User
from portal.services.billing import BillingService
from portal.schemas.billing import PaymentMethodCreate, PaymentMethodResponse, BillingSummaryResponse
from portal.schemas.error import get_error_responses, get_common_error_responses
from portal.utils.dependencies import get_current_customer_user, get_billing_service


router = APIRouter(prefix="/billing", tags=["Billing"])


@router.get("", response_model=BillingSummaryResponse, summary="Billing summary and invoices")
async def get_billing_summary(
    search: Optional[str] = Query(None, max_length=255, description="Match address or order id"),
    current_user: User = Depends(get_current_customer_user),
    billing_service: BillingService = Depends(get_billing_service)
) -> BillingSummaryResponse:
    return BillingSummaryResponse.model_validate(await billing_service.summary(current_user, search=search))


@router.get("/payment-methods", response_model=List[PaymentMethodResponse], summary="Saved cards")
async def list_payment_methods(
    current_user: User = Depends(get_current_customer_user),
    billing_service: BillingService = Depends(get_billing_service)
) -> List[PaymentMethodResponse]:
    methods = await billing_service.list_payment_methods(current_user)
    return [PaymentMethodResponse.model_validate(m.to_dict()) for m in methods]


@router.post(
    "/payment-methods",
    response_model=PaymentMethodResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a card",
    description="The first saved card becomes the default",
    responses=get_error_responses(400, 401, 422)
)
async def add_payment_method(
    data: PaymentMethodCreate,
    current_user: User = Depends(get_current_customer_user),
    billing_service: BillingService = Depends(get_billing_service)
) -> PaymentMethodResponse:
    method = await billing_service.add_payment_method(data, current_user)
    return PaymentMethodResponse.model_validate(method.to_dict())


@router.post(
    "/payment-methods/{method_id}/default",
    response_model=PaymentMethodResponse,
    summary="Make a card the default",
    responses=get_common_error_responses()
)
async def set_default_payment_method(
    method_id: UUID = Path(...),
    current_user: User = Depends(get_current_customer_user),
    billing_service: BillingService = Depends(get_billing_service)
) -> PaymentMethodResponse:
    method = await billing_service.set_default(method_id, current_user)
    return PaymentMethodResponse.model_validate(method.to_dict())


@router.delete(
    "/payment-methods/{method_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a card",
    description="The default card can only be removed when it is the last one",
    responses=get_common_error_responses()
)
async def remove_payment_method(
    method_id: UUID = Path(...),
    current_user: User = Depends(get_current_customer_user),
    billing_service: BillingService = Depends(get_billing_service)
) -> None:
    await billing_service.remove_payment_method(method_id, current_user)
