# =============================================================================
# core/models/inventory.py - Inventory & Alert Schemas
# =============================================================================
# These models define the API contract for inventory operations:
# - InventoryItemCreate / InventoryItemUpdate: item CRUD
# - StockAdjustment: PUT /inventory/{id}/stock
# - Alert schemas for /inventory-alerts
#
# Stock alerts are raised by InventoryService when a write takes the
# quantity down to (or below) the item's reorder point.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import Field

from .base import CamelModel, Dimensions


class AdjustmentType(str, Enum):
    """How `quantity` is applied in a stock adjustment."""
    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"


class AlertType(str, Enum):
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"
    OVERSTOCK = "overstock"
    EXPIRING = "expiring"
    PRICE_CHANGE = "price-change"


class AlertPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class Variation(CamelModel):
    name: str
    values: list[str] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Inventory items
# -----------------------------------------------------------------------------

class InventoryItemCreate(CamelModel):
    """
    Schema for creating an inventory item.

    Required: sku, name, category, price, costPrice, supplier.
    """
    sku: str | None = Field(default=None, max_length=64)
    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    category: str | None = None
    price: float | None = Field(default=None, ge=0)
    cost_price: float | None = Field(default=None, ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    reorder_point: int = Field(default=5, ge=0)
    reorder_quantity: int = Field(default=10, ge=0)
    supplier: str | None = None
    location: str | None = None
    dimensions: Dimensions | None = None
    barcode: str | None = None
    images: list[str] = Field(default_factory=list)
    is_active: bool = True
    tags: list[str] = Field(default_factory=list)
    variations: list[Variation] = Field(default_factory=list)


class InventoryItemUpdate(CamelModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset(
        {"description", "location", "dimensions", "barcode"}
    )

    sku: str | None = Field(default=None, min_length=1, max_length=64)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = None
    price: float | None = Field(default=None, ge=0)
    cost_price: float | None = Field(default=None, ge=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    reorder_point: int | None = Field(default=None, ge=0)
    reorder_quantity: int | None = Field(default=None, ge=0)
    supplier: str | None = None
    location: str | None = None
    dimensions: Dimensions | None = None
    barcode: str | None = None
    images: list[str] | None = None
    is_active: bool | None = None
    tags: list[str] | None = None
    variations: list[Variation] | None = None


class StockAdjustment(CamelModel):
    """
    Body of PUT /inventory/{id}/stock.

    Example:
        {"quantity": 3, "adjustmentType": "subtract", "reason": "Damaged"}
    """
    quantity: int | None = None
    adjustment_type: str | None = None
    reason: str | None = None


# -----------------------------------------------------------------------------
# Inventory alerts
# -----------------------------------------------------------------------------

class AlertCreate(CamelModel):
    item: str | None = None
    item_name: str | None = None
    item_sku: str | None = None
    alert_type: AlertType | None = None
    description: str | None = None
    priority: AlertPriority = AlertPriority.MEDIUM
    assigned_to: str | None = None
    recommended_action: str | None = None
    current_quantity: int | None = Field(default=None, ge=0)
    threshold_quantity: int | None = Field(default=None, ge=0)
    expiry_date: datetime | None = None


class AlertUpdate(CamelModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset({"assigned_to", "expiry_date"})

    alert_type: AlertType | None = None
    description: str | None = None
    priority: AlertPriority | None = None
    status: AlertStatus | None = None
    assigned_to: str | None = None
    recommended_action: str | None = None
    resolution_notes: str | None = None
    current_quantity: int | None = Field(default=None, ge=0)
    threshold_quantity: int | None = Field(default=None, ge=0)
    expiry_date: datetime | None = None


class AlertAssign(CamelModel):
    user_id: str | None = None


class AlertResolve(CamelModel):
    resolution_notes: str | None = None
    purchase_order_created: bool = False
    purchase_order: str | None = None


# -----------------------------------------------------------------------------
# Images
# -----------------------------------------------------------------------------

class ImageAttach(CamelModel):
    """
    Body of POST /upload/inventory/{id}/images.

    `primaryImage`, when given, is moved to the front of the item's images.
    """
    images: list[str] = Field(default_factory=list)
    primary_image: str | None = None
