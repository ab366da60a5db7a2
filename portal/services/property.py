"""
Property service for managing an agent's listings with ownership checks.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from portal.repositories.property import PropertyRepository
from portal.repositories.order import OrderRepository
from portal.models.property import Property, PropertyStatus
from portal.models.user import User
from portal.schemas.property import PropertyCreate, PropertyUpdate
from portal.utils.exceptions import (
    APIException,
    NotFoundError,
    ForbiddenError,
    ValidationError,
    BadRequestError,
    BusinessRuleViolationError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Property listings owned by agents. Staff can read and edit every listing.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.order_repo = OrderRepository(db_session)

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a listing owned by the current user.

        Raises:
            ForbiddenError: If the user is inactive
            ValidationError: If the listing data breaks a model rule
        """
        if not current_user.is_active:
            raise ForbiddenError("Inactive users cannot create properties")

        try:
            create_data = property_data.model_dump()
            create_data["agent_id"] = current_user.id
            self._validate_listing(Property(**create_data))

            property_obj = await self.property_repo.create(create_data)
            logger.info(f"Property created by {current_user.email}: {property_obj.address} (ID: {property_obj.id})")
            return property_obj
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create property for {current_user.email}: {e}")
            raise BadRequestError("Failed to create property")

    @staticmethod
    def _validate_listing(property_obj: Property) -> None:
        if not property_obj.validate_price():
            raise ValidationError("Price must be greater than 0")
        if not property_obj.validate_rooms():
            raise ValidationError("Beds and baths must be between 0 and 50")
        if not property_obj.validate_sqft():
            raise ValidationError("Square footage must be greater than 0")

    async def get_property(self, property_id: uuid.UUID, current_user: User) -> Property:
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))
        if not current_user.can_access(property_obj.agent_id):
            logger.warning(f"User {current_user.email} denied access to property {property_id}")
            raise ForbiddenError("You can only access your own properties")
        return property_obj

    async def list_properties(
        self,
        current_user: User,
        status: Optional[PropertyStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20
    ) -> Tuple[List[Property], int]:
        """Customers see their own listings; staff see every listing."""
        agent_id = None if current_user.is_staff else current_user.id
        return await self.property_repo.list_properties(
            agent_id=agent_id,
            status=status,
            search=search,
            page=page,
            page_size=page_size
        )

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        property_obj = await self.get_property(property_id, current_user)
        changes = property_data.model_dump(exclude_unset=True)

        try:
            updated = await self.property_repo.update(property_obj.id, changes)
            logger.info(f"Property {property_id} updated by {current_user.email}: {', '.join(changes)}")
            return updated
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise BadRequestError("Failed to update property")

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> bool:
        """
        Delete a listing.

        Raises:
            BusinessRuleViolationError: If orders have been placed for the property
        """
        property_obj = await self.get_property(property_id, current_user)

        order_count = await self.order_repo.count_for_property(property_obj.id)
        if order_count:
            raise BusinessRuleViolationError(
                "property has orders",
                f"{order_count} order(s) reference this property"
            )

        deleted = await self.property_repo.delete(property_obj.id)
        logger.info(f"Property {property_id} deleted by {current_user.email}")
        return deleted
