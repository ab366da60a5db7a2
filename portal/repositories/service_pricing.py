"""
Service pricing repository for the orderable service catalog.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from portal.repositories.base import BaseRepository
from portal.models.service_pricing import ServicePricing
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class ServicePricingRepository(BaseRepository[ServicePricing]):

    def __init__(self, db: AsyncSession):
        super().__init__(ServicePricing, db)

    async def list_services(self, active_only: bool = False) -> List[ServicePricing]:
        """List catalog services in display order (cheapest first, then name)."""
        query = select(ServicePricing)
        if active_only:
            query = query.where(ServicePricing.is_active.is_(True))
        query = query.order_by(ServicePricing.base_price.asc(), ServicePricing.name.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Optional[ServicePricing]:
        return await self.get_by_field("name", name)

    async def get_by_names(self, names: List[str]) -> Dict[str, ServicePricing]:
        if not names:
            return {}
        result = await self.db.execute(select(ServicePricing).where(ServicePricing.name.in_(names)))
        return {service.name: service for service in result.scalars().all()}
