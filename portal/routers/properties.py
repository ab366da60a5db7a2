"""
Property listing endpoints. Agents manage their own listings; staff can see all.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional
from uuid import UUID
import math

from portal.models.user import User
from portal.models.property import PropertyStatus
from portal.services.property import PropertyService
from portal.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse
)
from portal.schemas.error import get_crud_error_responses, get_common_error_responses
from portal.utils.dependencies import get_current_active_user, get_property_service


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.create_property(property_data, current_user)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List properties",
    description="The caller's listings (every listing for staff), newest first"
)
async def list_properties(
    search: Optional[str] = Query(None, max_length=255, description="Match address or MLS number"),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    properties, total = await property_service.list_properties(
        current_user,
        status=status_filter,
        search=search,
        page=page,
        page_size=page_size
    )
    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(p.to_dict()) for p in properties],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get property",
    responses=get_common_error_responses()
)
async def get_property(
    property_id: UUID = Path(...),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.get_property(property_id, current_user)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update property",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(...),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.update_property(property_id, property_data, current_user)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    description="Properties with orders cannot be deleted",
    responses=get_common_error_responses()
)
async def delete_property(
    property_id: UUID = Path(...),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> None:
    await property_service.delete_property(property_id, current_user)
