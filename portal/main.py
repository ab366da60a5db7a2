"""
FastAPI application entry point.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from portal.config import settings
from portal.database import AsyncSessionLocal, test_database_connection, create_tables, close_db_connection
from portal.routers import (
    auth_router,
    properties_router,
    catalog_router,
    orders_router,
    messages_router,
    billing_router,
    dashboard_router,
    admin_router,
    monitoring_router
)
from portal.services.catalog import CatalogService
from portal.services.error_handler import ErrorHandlerService
from portal.middleware.validation import ValidationMiddleware
from portal.middleware.performance import PerformanceMonitoringMiddleware
from portal.utils.exceptions import APIException

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: check the database, create tables outside production and seed
    the service catalog. Shutdown: dispose of the engine.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if await test_database_connection():
        if not settings.is_production:
            await create_tables()
        async with AsyncSessionLocal() as session:
            await CatalogService(session).seed_default_services()
    else:
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Ordering portal for real-estate marketing services.

    Agents list properties, order photography, video, drone, 360 tours and
    microsites, follow each shoot from booking to delivery, download their
    media, message support and manage billing. Staff manage pricing,
    bookings, order status, deliverables and client conversations.

    ## Authentication

    Obtain a token from `/api/v1/auth/login` (or `/api/v1/auth/admin/login` for
    staff) and send it as `Authorization: Bearer <token>`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Accounts and JWT tokens"},
        {"name": "Properties", "description": "Property listings"},
        {"name": "Services", "description": "Service catalog and quotes"},
        {"name": "Orders", "description": "Ordering, progress tracking and deliverables"},
        {"name": "Messages", "description": "Support conversation"},
        {"name": "Billing", "description": "Invoices and payment methods"},
        {"name": "Dashboard", "description": "Customer dashboard and shoot calendar"},
        {"name": "Admin", "description": "Staff console"},
        {"name": "Health", "description": "Health and operational status"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time"],
)

app.add_middleware(PerformanceMonitoringMiddleware, slow_request_threshold=2.0)

app.add_middleware(
    ValidationMiddleware,
    enable_request_logging=settings.debug,
    enable_rate_limiting=settings.is_production
)

for router in (
    auth_router,
    properties_router,
    catalog_router,
    orders_router,
    messages_router,
    billing_router,
    dashboard_router,
    admin_router,
    monitoring_router,
):
    app.include_router(router, prefix=settings.api_v1_prefix)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "documentation": {"swagger_ui": "/docs", "redoc": "/redoc"},
        "api_prefix": settings.api_v1_prefix
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
