# =============================================================================
# core/models/activity.py - Activity Log & System Status Enums
# =============================================================================
# Activities are the append-only audit trail written as a side effect of
# mutations. System components back the dashboard's status panel.
# =============================================================================

from enum import Enum


class EntityType(str, Enum):
    USER = "user"
    TASK = "task"
    PROJECT = "project"
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    INVENTORY = "inventory"
    INVENTORY_ALERT = "inventory-alert"
    SHIPMENT = "shipment"
    MILESTONE = "milestone"
    PURCHASE_ORDER = "purchase-order"
    SYSTEM = "system"


class ActivityAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
    STATUS_CHANGE = "status-change"
    ASSIGN = "assign"
    RESOLVE = "resolve"
    APPROVE = "approve"


class ActivityStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    PENDING = "pending"


class ComponentStatus(str, Enum):
    """Health of one system component."""
    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    OUTAGE = "outage"
    MAINTENANCE = "maintenance"
