# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .activity_service import ActivityService
from .alert_service import AlertService
from .analytics_service import AnalyticsService
from .auth_service import AuthService
from .customer_service import CustomerService
from .dashboard_service import DashboardService
from .inventory_service import InventoryService
from .milestone_service import MilestoneService
from .project_service import ProjectService
from .purchase_order_service import PurchaseOrderService
from .shipment_service import ShipmentService
from .storage_service import StorageService
from .supplier_service import SupplierService
from .system_status_service import SystemStatusService
from .task_service import TaskService
from .user_service import UserService

__all__ = [
    "ActivityService",
    "AlertService",
    "AnalyticsService",
    "AuthService",
    "CustomerService",
    "DashboardService",
    "InventoryService",
    "MilestoneService",
    "ProjectService",
    "PurchaseOrderService",
    "ShipmentService",
    "StorageService",
    "SupplierService",
    "SystemStatusService",
    "TaskService",
    "UserService",
]
