"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request context), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cleanstation.core.logging_config import get_logger, setup_logging

from .api.v1 import (
    auth,
    bom,
    catalog,
    configurator,
    health,
    notifications,
    orders,
    pre_qc,
    procurement,
    qc,
    qc_templates,
    service,
    service_orders,
    tasks,
    users,
)
from .core import constant
from .core.config import settings
from .core.database import init_db
from .exception_handlers import setup_exception_handlers
from .middleware import RequestContextMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    logger.info(f"Starting up {constant.PROJECT_NAME} Server...")
    try:
        await init_db()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        raise
    logger.info("Database initialized successfully")

    yield

    # Shutdown
    logger.info(f"Shutting down {constant.PROJECT_NAME} Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    CleanStation Production API

    Backend for the sink manufacturing workflow: order intake and sink configuration,
    BOM generation, procurement of outsourced parts, Pre-QC and QC inspections,
    assembly tasks and service part requests.
    """,
    version=constant.APP_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Process-Time"],
)
app.add_middleware(RequestContextMiddleware)

setup_exception_handlers(app)


app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_STR}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/admin/users", tags=["users"])
app.include_router(configurator.router, prefix=f"{constant.API_STR}/configurator", tags=["configurator"])
app.include_router(bom.router, prefix=f"{constant.API_STR}/bom", tags=["bom"])
app.include_router(catalog.router, prefix=constant.API_STR, tags=["catalog"])
app.include_router(orders.router, prefix=f"{constant.API_STR}/orders", tags=["orders"])
app.include_router(pre_qc.router, prefix=f"{constant.API_STR}/orders", tags=["pre-qc"])
app.include_router(qc.router, prefix=f"{constant.API_STR}/orders", tags=["qc"])
app.include_router(procurement.router, prefix=f"{constant.API_STR}/orders", tags=["procurement"])
app.include_router(qc_templates.router, prefix=f"{constant.API_STR}/admin/qc-templates", tags=["qc-templates"])
app.include_router(tasks.router, prefix=f"{constant.API_V1_STR}/assembly/tasks", tags=["tasks"])
app.include_router(service_orders.router, prefix=f"{constant.API_STR}/service-orders", tags=["service-orders"])
app.include_router(service.router, prefix=f"{constant.API_V1_STR}/service", tags=["service"])
app.include_router(notifications.router, prefix=f"{constant.API_V1_STR}/notifications", tags=["notifications"])
