"""
Customer support messaging endpoints.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, status, Query
from typing import List, Optional

from portal.models.user import User
from portal.services.messaging import MessagingService
from portal.schemas.message import MessageCreate, MessageResponse
from portal.schemas.error import get_error_responses
from portal.utils.dependencies import get_current_customer_user, get_messaging_service


router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get(
    "",
    response_model=List[MessageResponse],
    summary="My support conversation",
    description="Oldest first. Pass `since` to fetch only newer messages when polling."
)
async def list_messages(
    since: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_customer_user),
    messaging_service: MessagingService = Depends(get_messaging_service)
) -> List[MessageResponse]:
    messages = await messaging_service.list_customer_messages(current_user, since=since)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message to support",
    responses=get_error_responses(401, 403, 404, 422)
)
async def send_message(
    data: MessageCreate,
    current_user: User = Depends(get_current_customer_user),
    messaging_service: MessagingService = Depends(get_messaging_service)
) -> MessageResponse:
    return MessageResponse.model_validate(await messaging_service.send_customer_message(data, current_user))
