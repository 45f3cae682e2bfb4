# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for request validation:
# - base.py: CamelModel and shared embedded types (address, contact)
# - user.py, task.py: Accounts and personal tasks
# - customer.py, supplier.py: Business partners
# - inventory.py: Items, stock adjustments and stock alerts
# - project.py: Projects and milestones
# - shipment.py: Shipments and purchase orders
# - activity.py: Activity log and system component enums
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Shared
# -----------------------------------------------------------------------------
from .base import Address, AttachedDocument, CamelModel, Contact, Dimensions

# -----------------------------------------------------------------------------
# Users & Tasks
# -----------------------------------------------------------------------------
from .user import (
    ForgotPasswordRequest,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    ResetPasswordRequest,
    RoleChangeRequest,
    UserCreate,
    UserRole,
    UserUpdate,
)
from .task import TaskCreate, TaskPriority, TaskStatus, TaskUpdate

# -----------------------------------------------------------------------------
# Customers & Suppliers
# -----------------------------------------------------------------------------
from .customer import CustomerCreate, CustomerSize, CustomerStatus, CustomerUpdate
from .supplier import SupplierCreate, SupplierStatus, SupplierUpdate

# -----------------------------------------------------------------------------
# Inventory
# -----------------------------------------------------------------------------
from .inventory import (
    AdjustmentType,
    AlertAssign,
    AlertCreate,
    AlertPriority,
    AlertResolve,
    AlertStatus,
    AlertType,
    AlertUpdate,
    ImageAttach,
    InventoryItemCreate,
    InventoryItemUpdate,
    StockAdjustment,
    Variation,
)

# -----------------------------------------------------------------------------
# Projects & Milestones
# -----------------------------------------------------------------------------
from .project import (
    KeyResult,
    MilestoneCreate,
    MilestonePriority,
    MilestoneStatus,
    MilestoneUpdate,
    ProgressUpdate,
    ProjectCreate,
    ProjectPhase,
    ProjectStatus,
    ProjectUpdate,
    Stakeholder,
)

# -----------------------------------------------------------------------------
# Shipments & Purchase Orders
# -----------------------------------------------------------------------------
from .shipment import (
    PurchaseOrderCreate,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    PurchaseOrderStatusChange,
    PurchaseOrderUpdate,
    ShipmentCreate,
    ShipmentItem,
    ShipmentStatus,
    ShipmentType,
    ShipmentUpdate,
)

# -----------------------------------------------------------------------------
# Activity & System Status
# -----------------------------------------------------------------------------
from .activity import ActivityAction, ActivityStatus, ComponentStatus, EntityType

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Shared
    "Address",
    "AttachedDocument",
    "CamelModel",
    "Contact",
    "Dimensions",
    # Users & Tasks
    "ForgotPasswordRequest",
    "LoginRequest",
    "PasswordChangeRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "RoleChangeRequest",
    "UserCreate",
    "UserRole",
    "UserUpdate",
    "TaskCreate",
    "TaskPriority",
    "TaskStatus",
    "TaskUpdate",
    # Customers & Suppliers
    "CustomerCreate",
    "CustomerSize",
    "CustomerStatus",
    "CustomerUpdate",
    "SupplierCreate",
    "SupplierStatus",
    "SupplierUpdate",
    # Inventory
    "AdjustmentType",
    "AlertAssign",
    "AlertCreate",
    "AlertPriority",
    "AlertResolve",
    "AlertStatus",
    "AlertType",
    "AlertUpdate",
    "ImageAttach",
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "StockAdjustment",
    "Variation",
    # Projects & Milestones
    "KeyResult",
    "MilestoneCreate",
    "MilestonePriority",
    "MilestoneStatus",
    "MilestoneUpdate",
    "ProgressUpdate",
    "ProjectCreate",
    "ProjectPhase",
    "ProjectStatus",
    "ProjectUpdate",
    "Stakeholder",
    # Shipments & Purchase Orders
    "PurchaseOrderCreate",
    "PurchaseOrderItem",
    "PurchaseOrderStatus",
    "PurchaseOrderStatusChange",
    "PurchaseOrderUpdate",
    "ShipmentCreate",
    "ShipmentItem",
    "ShipmentStatus",
    "ShipmentType",
    "ShipmentUpdate",
    # Activity & System Status
    "ActivityAction",
    "ActivityStatus",
    "ComponentStatus",
    "EntityType",
]
