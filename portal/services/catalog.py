"""
Service catalog: listing, staff price management and order quotes.
"""

from decimal import Decimal
from typing import Dict, List, Any
from sqlalchemy.ext.asyncio import AsyncSession
from portal.config import settings
from portal.models.service_pricing import ServicePricing, DEFAULT_SERVICES
from portal.repositories.service_pricing import ServicePricingRepository
from portal.schemas.catalog import ServicePricingCreate, ServicePricingUpdate
from portal.services.stats import money
from portal.utils.exceptions import (
    APIException,
    NotFoundError,
    BadRequestError,
    DuplicateResourceError,
    ServiceUnavailableForOrderError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class CatalogService:
    """Manages the orderable services and their base prices."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.service_repo = ServicePricingRepository(db_session)

    async def list_services(self, active_only: bool = True) -> List[ServicePricing]:
        return await self.service_repo.list_services(active_only=active_only)

    async def get_service(self, service_id: uuid.UUID) -> ServicePricing:
        service = await self.service_repo.get_by_id(service_id)
        if not service:
            raise NotFoundError("Service", str(service_id))
        return service

    async def create_service(self, data: ServicePricingCreate) -> ServicePricing:
        try:
            if await self.service_repo.get_by_name(data.name):
                raise DuplicateResourceError("Service", data.name)
            service = await self.service_repo.create(data.model_dump())
            logger.info(f"Service added to catalog: {service.name} at {service.base_price}")
            return service
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create service {data.name}: {e}")
            raise BadRequestError("Failed to create service")

    async def update_service(self, service_id: uuid.UUID, data: ServicePricingUpdate) -> ServicePricing:
        """
        Update price, copy or availability of a service.
        Existing orders keep the prices they were placed with.
        """
        await self.get_service(service_id)
        try:
            service = await self.service_repo.update(service_id, data.model_dump(exclude_unset=True))
            logger.info(f"Service {service.name} updated")
            return service
        except Exception as e:
            logger.error(f"Failed to update service {service_id}: {e}")
            raise BadRequestError("Failed to update service")

    async def set_active(self, service_id: uuid.UUID, is_active: bool) -> ServicePricing:
        await self.get_service(service_id)
        return await self.service_repo.update(service_id, {"is_active": is_active})

    async def seed_default_services(self) -> int:
        """Insert the default catalog when no services exist. Returns the number inserted."""
        if await self.service_repo.count() > 0:
            return 0
        created = await self.service_repo.bulk_create([dict(service) for service in DEFAULT_SERVICES])
        logger.info(f"Seeded {len(created)} default services")
        return len(created)

    async def resolve_services(self, names: List[str]) -> Dict[str, Decimal]:
        """
        Look up the current base price of each named service.

        Raises:
            BadRequestError: If no services are given
            ServiceUnavailableForOrderError: If a service is unknown or inactive
        """
        if not names:
            raise BadRequestError("Select at least one service")

        services = await self.service_repo.get_by_names(names)
        prices: Dict[str, Decimal] = {}
        for name in names:
            service = services.get(name)
            if service is None or not service.is_active:
                raise ServiceUnavailableForOrderError(name)
            prices[name] = Decimal(str(service.base_price))
        return prices

    async def quote(self, names: List[str]) -> Dict[str, Any]:
        """Price a set of services: per-service prices, subtotal, tax and total."""
        prices = await self.resolve_services(names)
        subtotal = money(sum(prices.values(), Decimal("0")))
        tax = money(subtotal * Decimal(str(settings.tax_rate)))
        return {
            "services": list(prices),
            "service_prices": {name: float(price) for name, price in prices.items()},
            "subtotal": float(subtotal),
            "tax": float(tax),
            "total": float(subtotal + tax),
        }
