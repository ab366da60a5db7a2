"""
API routers for the Realty Media Portal.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .catalog import router as catalog_router
from .orders import router as orders_router
from .messages import router as messages_router
from .billing import router as billing_router
from .dashboard import router as dashboard_router
from .admin import router as admin_router
from .monitoring import router as monitoring_router

__all__ = [
    "auth_router",
    "properties_router",
    "catalog_router",
    "orders_router",
    "messages_router",
    "billing_router",
    "dashboard_router",
    "admin_router",
    "monitoring_router",
]
