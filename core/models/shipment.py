# =============================================================================
# core/models/shipment.py - Shipment & Purchase Order Schemas
# =============================================================================
# Shipments move goods in (from suppliers) or out (to customers).
# Purchase orders request goods from a supplier; receiving one restocks
# the ordered inventory items.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import Field

from .base import Address, CamelModel, Dimensions


class ShipmentType(str, Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class ShipmentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"
    EXCEPTION = "exception"


class PurchaseOrderStatus(str, Enum):
    """
    Purchase order lifecycle.

    Flow: draft -> submitted -> approved -> ordered -> received
    Any non-received order may be cancelled.
    """
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    ORDERED = "ordered"
    RECEIVED = "received"
    CANCELLED = "cancelled"


# -----------------------------------------------------------------------------
# Shipments
# -----------------------------------------------------------------------------

class ShipmentItem(CamelModel):
    product: str | None = None
    sku: str | None = None
    name: str
    quantity: int = Field(..., ge=1)


class ShipmentCreate(CamelModel):
    """
    Schema for creating a shipment.

    Required: shipmentNumber, type, courier, origin, destination.
    """
    shipment_number: str | None = Field(default=None, max_length=64)
    type: ShipmentType | None = None
    courier: str | None = None
    tracking_number: str | None = None
    status: ShipmentStatus = ShipmentStatus.PENDING
    origin: Address | None = None
    destination: Address | None = None
    items: list[ShipmentItem] = Field(default_factory=list)
    purchase_order: str | None = None
    customer: str | None = None
    estimated_delivery_date: datetime | None = None
    shipped_date: datetime | None = None
    weight: float | None = Field(default=None, ge=0)
    weight_unit: str = "kg"
    dimensions: Dimensions | None = None
    signature_required: bool = False
    notes: str | None = None


class ShipmentUpdate(CamelModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset(
        {"tracking_number", "estimated_delivery_date", "notes"}
    )

    shipment_number: str | None = Field(default=None, min_length=1, max_length=64)
    type: ShipmentType | None = None
    courier: str | None = None
    tracking_number: str | None = None
    status: ShipmentStatus | None = None
    origin: Address | None = None
    destination: Address | None = None
    items: list[ShipmentItem] | None = None
    purchase_order: str | None = None
    customer: str | None = None
    estimated_delivery_date: datetime | None = None
    shipped_date: datetime | None = None
    actual_delivery_date: datetime | None = None
    weight: float | None = Field(default=None, ge=0)
    weight_unit: str | None = None
    dimensions: Dimensions | None = None
    signature_required: bool | None = None
    notes: str | None = None
    # Tracking event details recorded alongside a status change
    location: str | None = None
    status_note: str | None = None


# -----------------------------------------------------------------------------
# Purchase orders
# -----------------------------------------------------------------------------

class PurchaseOrderItem(CamelModel):
    item: str | None = None
    sku: str | None = None
    name: str
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)


class PurchaseOrderCreate(CamelModel):
    """
    Schema for creating a purchase order.

    Required: supplier, items. `orderNumber` is generated when omitted;
    totals are always computed from the line items. New orders always start
    as draft; later states go through the status endpoint.
    """
    order_number: str | None = Field(default=None, max_length=64)
    supplier: str | None = None
    items: list[PurchaseOrderItem] = Field(default_factory=list)
    order_date: datetime | None = None
    expected_delivery_date: datetime | None = None
    tax: float = Field(default=0, ge=0)
    shipping_cost: float = Field(default=0, ge=0)
    notes: str | None = None


class PurchaseOrderUpdate(CamelModel):
    order_number: str | None = Field(default=None, min_length=1, max_length=64)
    items: list[PurchaseOrderItem] | None = None
    order_date: datetime | None = None
    expected_delivery_date: datetime | None = None
    tax: float | None = Field(default=None, ge=0)
    shipping_cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class PurchaseOrderStatusChange(CamelModel):
    status: PurchaseOrderStatus
