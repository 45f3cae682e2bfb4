# =============================================================================
# core/services/purchase_order_service.py - Purchase Order Business Logic
# =============================================================================
# Purchase orders request stock from a supplier.
#
# Lifecycle:
#   draft -> submitted -> approved -> ordered -> received
#   Anything but a received order may be edited or cancelled.
#
# Receiving an order adds each line's quantity to its inventory item.
# =============================================================================

import logging
import random
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, resolve_sort, utc_now, utc_now_iso
from core.models.activity import ActivityAction, EntityType
from core.models.inventory import AdjustmentType, StockAdjustment
from core.models.shipment import (
    PurchaseOrderCreate,
    PurchaseOrderStatus,
    PurchaseOrderStatusChange,
    PurchaseOrderUpdate,
)
from core.services.activity_service import ActivityService
from core.services.inventory_service import InventoryService
from core.services.supplier_service import SupplierService
from app.auth.models import AuthUser
from app.exceptions import ApiError, InvalidIdError, NotFoundError, require_fields

logger = logging.getLogger(__name__)

TABLE = "purchase_orders"
SORT_FIELDS = {"orderNumber", "status", "orderDate", "expectedDeliveryDate", "totalAmount", "createdAt", "updatedAt"}

DELETABLE_STATUSES = {PurchaseOrderStatus.DRAFT.value, PurchaseOrderStatus.CANCELLED.value}
RECEIVED_LOCKED = "Received purchase orders cannot be modified"


def generate_order_number() -> str:
    """
    Order number in the form PO-YYYYMMDD-XXXX.

    Example:
        generate_order_number()  # "PO-20250307-0421"
    """
    return f"PO-{utc_now():%Y%m%d}-{random.randint(0, 9999):04d}"


def compute_totals(items: list[dict[str, Any]], tax: float, shipping_cost: float) -> dict[str, float]:
    subtotal = sum(line["quantity"] * line["unitPrice"] for line in items)
    return {
        "subtotal": round(subtotal, 2),
        "totalAmount": round(subtotal + (tax or 0) + (shipping_cost or 0), 2),
    }


def _duplicate_number(number: str) -> ApiError:
    return ApiError(f'Purchase order with number "{number}" already exists', status_code=400)


class PurchaseOrderService:
    """Service for purchase order operations."""

    @staticmethod
    def list_orders(
        page: int,
        limit: int,
        search: str | None = None,
        status: str | None = None,
        supplier: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if search:
            clause = SupabaseClient.search_clause(search, ["orderNumber"])
            if clause:
                query = query.or_(clause)
        if status:
            query = query.eq("status", status)
        if supplier:
            query = query.eq("supplier", supplier)
        if from_date:
            query = query.gte("orderDate", from_date)
        if to_date:
            query = query.lte("orderDate", to_date)

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "createdAt", "desc")
        return SupabaseClient.fetch_page(query, column, descending, page, limit)

    @staticmethod
    def get_order(order_id: str) -> dict[str, Any]:
        if not is_valid_id(order_id):
            raise InvalidIdError("purchase order")

        order = SupabaseClient.fetch_document(TABLE, order_id)
        if not order:
            raise NotFoundError("Purchase order")
        return order

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_order(payload: PurchaseOrderCreate, user: AuthUser) -> dict[str, Any]:
        """
        Create a purchase order for an existing supplier.

        Raises:
            MissingFieldsError: Without a supplier or line items
            NotFoundError: If the supplier doesn't exist
            ApiError: 400 for a duplicate order number
        """
        data = payload.to_document()
        require_fields(data, {"supplier": "Supplier is required", "items": "At least one item is required"})

        SupplierService.get_supplier(data["supplier"])

        if data.get("orderNumber"):
            if SupabaseClient.find_one(TABLE, orderNumber=data["orderNumber"]):
                raise _duplicate_number(data["orderNumber"])
        else:
            data["orderNumber"] = generate_order_number()
            while SupabaseClient.find_one(TABLE, orderNumber=data["orderNumber"]):
                data["orderNumber"] = generate_order_number()

        data["status"] = PurchaseOrderStatus.DRAFT.value
        data.setdefault("orderDate", utc_now_iso())
        data.update(compute_totals(data["items"], data["tax"], data["shippingCost"]))
        data["createdBy"] = user.id

        order = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created purchase order: {order['id']} ({order['orderNumber']})")

        ActivityService.log_activity(
            description=f'Purchase order "{order["orderNumber"]}" created',
            entity_type=EntityType.PURCHASE_ORDER,
            entity_id=order["id"],
            action=ActivityAction.CREATE,
            user_id=user.id,
            metadata={"supplierId": order["supplier"], "totalAmount": order["totalAmount"]},
        )
        return order

    @staticmethod
    def update_order(order_id: str, payload: PurchaseOrderUpdate, user: AuthUser) -> dict[str, Any]:
        order = PurchaseOrderService.get_order(order_id)
        if order.get("status") == PurchaseOrderStatus.RECEIVED.value:
            raise ApiError(RECEIVED_LOCKED, status_code=400)

        changes = payload.to_document(partial=True)

        new_number = changes.get("orderNumber")
        if new_number and new_number != order.get("orderNumber"):
            if SupabaseClient.find_one(TABLE, orderNumber=new_number):
                raise _duplicate_number(new_number)

        if {"items", "tax", "shippingCost"} & changes.keys():
            merged = {**order, **changes}
            changes.update(compute_totals(merged.get("items") or [], merged.get("tax"), merged.get("shippingCost")))

        updated = SupabaseClient.update_document(TABLE, order_id, changes)
        if not updated:
            raise NotFoundError("Purchase order")

        ActivityService.log_activity(
            description=f'Purchase order "{updated["orderNumber"]}" updated',
            entity_type=EntityType.PURCHASE_ORDER,
            entity_id=order_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
        )
        return updated

    @staticmethod
    def delete_order(order_id: str, user: AuthUser) -> None:
        order = PurchaseOrderService.get_order(order_id)
        if order.get("status") not in DELETABLE_STATUSES:
            raise ApiError("Only draft or cancelled purchase orders can be deleted", status_code=400)

        SupabaseClient.delete_document(TABLE, order_id)
        logger.info(f"Deleted purchase order: {order_id}")

        ActivityService.log_activity(
            description=f'Purchase order "{order.get("orderNumber")}" deleted',
            entity_type=EntityType.PURCHASE_ORDER,
            entity_id=order_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
        )

    @staticmethod
    def change_status(order_id: str, payload: PurchaseOrderStatusChange, user: AuthUser) -> dict[str, Any]:
        """
        Move an order through its lifecycle.

        approved stamps `approvedBy`; received stamps `receivedDate` and
        restocks every line item.
        """
        order = PurchaseOrderService.get_order(order_id)
        old_status = order.get("status")
        if old_status == PurchaseOrderStatus.RECEIVED.value:
            raise ApiError(RECEIVED_LOCKED, status_code=400)

        new_status = payload.status.value
        changes: dict[str, Any] = {"status": new_status}
        if new_status == PurchaseOrderStatus.APPROVED.value:
            changes["approvedBy"] = user.id
        if new_status == PurchaseOrderStatus.RECEIVED.value:
            changes["receivedDate"] = utc_now_iso()

        updated = SupabaseClient.update_document(TABLE, order_id, changes)
        if not updated:
            raise NotFoundError("Purchase order")

        if new_status == PurchaseOrderStatus.RECEIVED.value:
            PurchaseOrderService._restock(updated, user)

        ActivityService.log_activity(
            description=(
                f'Purchase order "{updated["orderNumber"]}" status changed '
                f"from {old_status} to {new_status}"
            ),
            entity_type=EntityType.PURCHASE_ORDER,
            entity_id=order_id,
            action=ActivityAction.STATUS_CHANGE,
            user_id=user.id,
            metadata={"oldStatus": old_status, "newStatus": new_status},
        )
        return updated

    @staticmethod
    def _restock(order: dict[str, Any], user: AuthUser) -> None:
        """Add each received line to its inventory item's stock."""
        for line in order.get("items") or []:
            item_id = line.get("item")
            if not is_valid_id(item_id) or not SupabaseClient.fetch_document("inventory", item_id):
                logger.warning(
                    f"Purchase order {order['orderNumber']}: line {line.get('name')!r} "
                    f"has no inventory item, skipping restock"
                )
                continue

            InventoryService.adjust_stock(
                item_id,
                StockAdjustment(
                    quantity=line["quantity"],
                    adjustment_type=AdjustmentType.ADD.value,
                    reason=f"Received purchase order {order['orderNumber']}",
                ),
                user,
            )
