"""
Service catalog endpoints for customers: active services and price quotes.
"""

from fastapi import APIRouter, Depends
from typing import List

from portal.models.user import User
from portal.services.catalog import CatalogService
from portal.schemas.catalog import ServicePricingResponse, ServiceQuoteRequest, ServiceQuoteResponse
from portal.schemas.error import get_error_responses
from portal.utils.dependencies import get_current_active_user, get_catalog_service


router = APIRouter(prefix="/services", tags=["Services"])


@router.get("", response_model=List[ServicePricingResponse], summary="List orderable services")
async def list_services(
    current_user: User = Depends(get_current_active_user),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> List[ServicePricingResponse]:
    services = await catalog_service.list_services(active_only=True)
    return [ServicePricingResponse.model_validate(s.to_dict()) for s in services]


@router.post(
    "/quote",
    response_model=ServiceQuoteResponse,
    summary="Price a set of services",
    description="Subtotal of current base prices plus tax",
    responses=get_error_responses(400, 401, 422)
)
async def quote_services(
    data: ServiceQuoteRequest,
    current_user: User = Depends(get_current_active_user),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> ServiceQuoteResponse:
    return ServiceQuoteResponse(**await catalog_service.quote(data.services))
