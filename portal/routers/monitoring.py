"""
Health and operational status endpoints.
"""

from fastapi import APIRouter, Depends
from typing import Dict, Any
import logging

from portal.config import settings
from portal.database import test_database_connection, get_database_info
from portal.models.user import User
from portal.overrides.registry import OverrideRegistry, get_override_registry
from portal.utils.dependencies import get_current_admin_user
from portal.utils.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/monitoring", tags=["Health"])


@router.get("/health", response_model=Dict[str, Any])
async def health_check() -> Dict[str, Any]:
    """Database connectivity and API status."""
    db_healthy = await test_database_connection()
    if not db_healthy:
        logger.error("Health check failed: database unreachable")
        raise ServiceUnavailableError("Database is unreachable")
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "database": {"connected": True},
    }


@router.get("/database", response_model=Dict[str, Any])
async def database_status(current_user: User = Depends(get_current_admin_user)) -> Dict[str, Any]:
    return await get_database_info()


@router.get("/overrides", response_model=Dict[str, Any])
async def override_status(
    current_user: User = Depends(get_current_admin_user),
    overrides: OverrideRegistry = Depends(get_override_registry)
) -> Dict[str, Any]:
    """Merge policy, storage location and entry count of each override store."""
    return overrides.stats()
