# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by resource:
# - auth.py: Registration, login, logout, password reset
# - users.py: User administration
# - tasks.py, customers.py, suppliers.py: Resource CRUD
# - inventory.py, inventory_alerts.py: Stock and stock alerts
# - projects.py, milestones.py: Projects, documents, approvals
# - shipments.py, purchase_orders.py: Logistics and ordering
# - analytics.py, dashboard.py: Read-only aggregates
# - upload.py: Signed upload URLs and inventory images
# - health.py: Health check endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import analytics
from . import auth
from . import customers
from . import dashboard
from . import health
from . import inventory
from . import inventory_alerts
from . import milestones
from . import projects
from . import purchase_orders
from . import shipments
from . import suppliers
from . import tasks
from . import upload
from . import users

__all__ = [
    "analytics",
    "auth",
    "customers",
    "dashboard",
    "health",
    "inventory",
    "inventory_alerts",
    "milestones",
    "projects",
    "purchase_orders",
    "shipments",
    "suppliers",
    "tasks",
    "upload",
    "users",
]
