# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Business Operations API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    ApiError,
    api_error_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    analytics,
    auth,
    customers,
    dashboard,
    health,
    inventory,
    inventory_alerts,
    milestones,
    projects,
    purchase_orders,
    shipments,
    suppliers,
    tasks,
    upload,
    users,
)
from app.routers.health import API_VERSION
from core.services.system_status_service import SystemStatusService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: seed the system status components (failures are logged,
    the API still starts).
    """
    logger.info(f"Starting Business Operations API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    SystemStatusService.initialize_system_components()

    yield

    logger.info("Shutting down Business Operations API")


# Create FastAPI application
app = FastAPI(
    title="Business Operations API",
    description="""
## Business Operations API

Tasks, projects and milestones, customers and suppliers, inventory with
stock alerts, shipments and purchase orders, plus analytics and a
dashboard.

### Authentication

1. `POST /api/auth/register` or `POST /api/auth/login`
2. Send the returned token as `Authorization: Bearer <token>`

### Responses

Every response uses the same envelope:

```json
{"success": true, "data": {...}}
{"success": true, "count": 10, "total": 42, "pagination": {"page": 1, "limit": 10, "totalPages": 5}, "data": [...]}
{"success": false, "message": "Task not found"}
```
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Registration, login and password reset"},
        {"name": "Users", "description": "User administration"},
        {"name": "Tasks", "description": "Personal task lists"},
        {"name": "Customers", "description": "Customer accounts"},
        {"name": "Suppliers", "description": "Supplier directory"},
        {"name": "Inventory", "description": "Inventory items and stock levels"},
        {"name": "Inventory Alerts", "description": "Low and out-of-stock alerts"},
        {"name": "Projects", "description": "Customer projects and documents"},
        {"name": "Milestones", "description": "Project milestones, approvals and progress"},
        {"name": "Shipments", "description": "Inbound and outbound shipments"},
        {"name": "Purchase Orders", "description": "Supplier purchase orders"},
        {"name": "Analytics", "description": "Cross-entity reports"},
        {"name": "Dashboard", "description": "Dashboard widgets and system status"},
        {"name": "Upload", "description": "Signed upload URLs and image attachment"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "An unexpected error occurred"},
    )


# =============================================================================
# Routers
# =============================================================================

ROUTERS = [
    (auth.router, "/api/auth", "Auth"),
    (users.router, "/api/users", "Users"),
    (tasks.router, "/api/tasks", "Tasks"),
    (customers.router, "/api/customers", "Customers"),
    (suppliers.router, "/api/suppliers", "Suppliers"),
    (inventory.router, "/api/inventory", "Inventory"),
    (inventory_alerts.router, "/api/inventory-alerts", "Inventory Alerts"),
    (projects.router, "/api/projects", "Projects"),
    (milestones.router, "/api/milestones", "Milestones"),
    (shipments.router, "/api/shipments", "Shipments"),
    (purchase_orders.router, "/api/purchase-orders", "Purchase Orders"),
    (analytics.router, "/api/analytics", "Analytics"),
    (dashboard.router, "/api/dashboard", "Dashboard"),
    (upload.router, "/api/upload", "Upload"),
    (health.router, "/api", "Health"),
]

for router, prefix, tag in ROUTERS:
    app.include_router(router, prefix=prefix, tags=[tag])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Business Operations API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/health",
    }
