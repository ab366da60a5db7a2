"""
Property repository with agent-scoped listing and address search.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from portal.repositories.base import BaseRepository
from portal.models.property import Property, PropertyStatus
from typing import Optional, List, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """Repository for property listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def list_properties(
        self,
        agent_id: Optional[uuid.UUID] = None,
        status: Optional[PropertyStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20
    ) -> Tuple[List[Property], int]:
        """
        List properties with optional agent, status and address/MLS search filters.

        Returns:
            Tuple of (properties for the page, total matching count)
        """
        try:
            conditions = []
            if agent_id is not None:
                conditions.append(Property.agent_id == agent_id)
            if status is not None:
                conditions.append(Property.status == status)
            if search:
                pattern = f"%{search.strip().lower()}%"
                conditions.append(or_(
                    func.lower(Property.address).like(pattern),
                    func.lower(Property.mls_number).like(pattern)
                ))

            count_query = select(func.count(Property.id)).where(*conditions)
            total = (await self.db.execute(count_query)).scalar()

            query = (
                select(Property)
                .where(*conditions)
                .order_by(Property.created_at.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            result = await self.db.execute(query)
            properties = list(result.scalars().all())

            logger.debug(f"Listed {len(properties)} of {total} properties")
            return properties, total
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    async def count_for_agent(self, agent_id: uuid.UUID) -> int:
        return await self.count({"agent_id": agent_id})

    async def get_by_ids(self, property_ids: List[uuid.UUID]) -> List[Property]:
        if not property_ids:
            return []
        result = await self.db.execute(select(Property).where(Property.id.in_(property_ids)))
        return list(result.scalars().all())
