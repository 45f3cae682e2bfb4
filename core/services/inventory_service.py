# =============================================================================
# core/services/inventory_service.py - Inventory Business Logic
# =============================================================================
# Handles inventory item CRUD, stock adjustments and stock statistics.
#
# Stock alerts:
#   Whenever a write lowers an item's quantity to or below its reorder
#   point, one new inventory alert is created ("out-of-stock" at zero,
#   "low-stock" otherwise). Existing active alerts for the item are not
#   consulted, so repeated drops raise repeated alerts.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, resolve_sort
from core.models.activity import ActivityAction, EntityType
from core.models.inventory import (
    AdjustmentType,
    AlertPriority,
    AlertType,
    InventoryItemCreate,
    InventoryItemUpdate,
    StockAdjustment,
)
from core.services.activity_service import ActivityService
from core.services.alert_service import AlertService
from core.services.storage_service import StorageService
from app.auth.models import AuthUser
from app.exceptions import ApiError, InvalidIdError, NotFoundError, require_fields

logger = logging.getLogger(__name__)

TABLE = "inventory"
SORT_FIELDS = {"name", "sku", "category", "price", "costPrice", "stockQuantity", "createdAt", "updatedAt"}

REQUIRED_FIELDS = {
    "sku": "SKU is required",
    "name": "Name is required",
    "category": "Category is required",
    "price": "Price is required",
    "costPrice": "Cost price is required",
    "supplier": "Supplier is required",
}

# Fields clients may never overwrite on update
PROTECTED_FIELDS = ("id", "createdBy", "createdAt")


# =============================================================================
# Stock Rules
# =============================================================================

def is_low_stock(item: dict[str, Any]) -> bool:
    """True when the item is at or below its reorder point."""
    return (item.get("stockQuantity") or 0) <= (item.get("reorderPoint") or 0)


def should_raise_alert(
    previous_quantity: int | None,
    new_quantity: int,
    reorder_point: int,
) -> bool:
    """
    Decide whether a stock write raises an alert.

    Fires when the new quantity is at or below the reorder point and the
    write lowered the stock. A new item has no previous quantity.

    Example:
        should_raise_alert(10, 7, 10)   # True  - dropped, 7 <= 10
        should_raise_alert(7, 9, 10)    # False - stock went up
        should_raise_alert(None, 0, 5)  # True  - created out of stock
    """
    if new_quantity > reorder_point:
        return False
    return previous_quantity is None or new_quantity < previous_quantity


def build_stock_alert(item: dict[str, Any]) -> dict[str, Any]:
    """Alert document describing the item's current stock level."""
    quantity = item.get("stockQuantity") or 0
    out_of_stock = quantity == 0

    if out_of_stock:
        description = f"Item {item['name']} ({item['sku']}) is out of stock."
    else:
        description = f"Item {item['name']} ({item['sku']}) has low stock ({quantity} remaining)."

    return {
        "item": item["id"],
        "itemName": item["name"],
        "itemSku": item["sku"],
        "alertType": (AlertType.OUT_OF_STOCK if out_of_stock else AlertType.LOW_STOCK).value,
        "priority": (AlertPriority.HIGH if out_of_stock else AlertPriority.MEDIUM).value,
        "description": description,
        "currentQuantity": quantity,
        "thresholdQuantity": item.get("reorderPoint") or 0,
        "recommendedAction": f"Order {item.get('reorderQuantity') or 0} units from supplier.",
    }


class InventoryService:
    """Service for inventory item operations."""

    @staticmethod
    def _apply_stock_rule(
        item: dict[str, Any],
        previous_quantity: int | None,
        user_id: str | None,
    ) -> dict[str, Any] | None:
        if not should_raise_alert(
            previous_quantity,
            item.get("stockQuantity") or 0,
            item.get("reorderPoint") or 0,
        ):
            return None

        alert = AlertService.create_system_alert(build_stock_alert(item), user_id)
        logger.info(f"Raised {alert['alertType']} alert {alert['id']} for item {item['id']}")
        return alert

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @staticmethod
    def list_items(
        page: int,
        limit: int,
        search: str | None = None,
        category: str | None = None,
        supplier: str | None = None,
        low_stock: bool = False,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List inventory items with filters, sorting and pagination.

        `low_stock` compares two columns of the same row, which PostgREST
        can't express, so that filter runs here after the query.
        """
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if search:
            clause = SupabaseClient.search_clause(search, ["name", "sku", "description"])
            if clause:
                query = query.or_(clause)
        if category:
            query = query.eq("category", category)
        if supplier:
            query = query.eq("supplier", supplier)

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "name")

        if not low_stock:
            return SupabaseClient.fetch_page(query, column, descending, page, limit)

        response = query.order(column, desc=descending).execute()
        matches = [item for item in response.data or [] if is_low_stock(item)]
        start = (page - 1) * limit
        return matches[start:start + limit], len(matches)

    @staticmethod
    def get_item(item_id: str) -> dict[str, Any]:
        """
        Get an inventory item by ID.

        Raises:
            InvalidIdError: If the ID is malformed
            NotFoundError: If the item doesn't exist
        """
        if not is_valid_id(item_id):
            raise InvalidIdError("inventory item")

        item = SupabaseClient.fetch_document(TABLE, item_id)
        if not item:
            raise NotFoundError("Inventory item")
        return item

    @staticmethod
    def get_low_stock_items(limit: int = 10) -> list[dict[str, Any]]:
        """Items at or below their reorder point, lowest stock first."""
        client = SupabaseClient.get_client()
        response = (
            client.table(TABLE)
            .select("*")
            .order("stockQuantity", desc=False)
            .execute()
        )
        return [item for item in response.data or [] if is_low_stock(item)][:limit]

    @staticmethod
    def get_stats() -> dict[str, Any]:
        """Counts, stock value and per-category breakdown."""
        items = SupabaseClient.fetch_all(TABLE)
        active = [item for item in items if item.get("isActive", True)]

        low_stock = 0
        out_of_stock = 0
        cost_value = 0.0
        retail_value = 0.0
        categories: dict[str, dict[str, Any]] = {}

        for item in active:
            quantity = item.get("stockQuantity") or 0
            if quantity == 0:
                out_of_stock += 1
            elif quantity <= (item.get("reorderPoint") or 0):
                low_stock += 1

            cost_value += quantity * (item.get("costPrice") or 0)
            retail = quantity * (item.get("price") or 0)
            retail_value += retail

            bucket = categories.setdefault(
                item.get("category") or "Uncategorized",
                {"category": item.get("category") or "Uncategorized", "count": 0, "value": 0.0},
            )
            bucket["count"] += 1
            bucket["value"] += retail

        return {
            "totalItems": len(items),
            "activeItems": len(active),
            "lowStockItems": low_stock,
            "outOfStockItems": out_of_stock,
            "inventoryValue": {
                "cost": round(cost_value, 2),
                "retail": round(retail_value, 2),
                "potentialProfit": round(retail_value - cost_value, 2),
            },
            "categoryBreakdown": sorted(categories.values(), key=lambda c: c["count"], reverse=True),
        }

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_item(payload: InventoryItemCreate, user: AuthUser) -> dict[str, Any]:
        """
        Create an inventory item.

        Raises:
            MissingFieldsError: If a required field is absent
            ApiError: 400 if the SKU is already in use
        """
        data = payload.to_document()
        require_fields(data, REQUIRED_FIELDS)

        if SupabaseClient.find_one(TABLE, sku=data["sku"]):
            raise ApiError(f'Inventory item with SKU "{data["sku"]}" already exists', status_code=400)

        data["createdBy"] = user.id
        item = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created inventory item: {item['id']} ({item['sku']})")

        InventoryService._apply_stock_rule(item, None, user.id)

        ActivityService.log_activity(
            description=f'Inventory item "{item["name"]}" ({item["sku"]}) created',
            entity_type=EntityType.INVENTORY,
            entity_id=item["id"],
            action=ActivityAction.CREATE,
            user_id=user.id,
            metadata={"itemId": item["id"]},
        )
        return item

    @staticmethod
    def update_item(item_id: str, payload: InventoryItemUpdate, user: AuthUser) -> dict[str, Any]:
        item = InventoryService.get_item(item_id)

        changes = payload.to_document(partial=True)
        for field in PROTECTED_FIELDS:
            changes.pop(field, None)

        new_sku = changes.get("sku")
        if new_sku and new_sku != item.get("sku"):
            if SupabaseClient.find_one(TABLE, sku=new_sku):
                raise ApiError(f'Inventory item with SKU "{new_sku}" already exists', status_code=400)

        updated = SupabaseClient.update_document(TABLE, item_id, changes)
        if not updated:
            raise NotFoundError("Inventory item")

        if "stockQuantity" in changes:
            InventoryService._apply_stock_rule(updated, item.get("stockQuantity"), user.id)

        ActivityService.log_activity(
            description=f'Inventory item "{updated["name"]}" ({updated["sku"]}) updated',
            entity_type=EntityType.INVENTORY,
            entity_id=item_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
            metadata={"itemId": item_id, "fields": sorted(changes)},
        )
        return updated

    @staticmethod
    def delete_item(item_id: str, user: AuthUser) -> None:
        """Delete an item together with its alerts."""
        item = InventoryService.get_item(item_id)

        AlertService.delete_alerts_for_item(item_id)
        SupabaseClient.delete_document(TABLE, item_id)
        logger.info(f"Deleted inventory item: {item_id}")

        ActivityService.log_activity(
            description=f'Inventory item "{item.get("name")}" ({item.get("sku")}) deleted',
            entity_type=EntityType.INVENTORY,
            entity_id=item_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
            metadata={"itemId": item_id},
        )

    @staticmethod
    def adjust_stock(item_id: str, payload: StockAdjustment, user: AuthUser | None) -> dict[str, Any]:
        """
        Set, add to, or subtract from an item's stock.

        Returns:
            Adjustment summary with previous and new quantities

        Raises:
            ApiError: 400 for a missing or negative quantity, an unknown
                adjustment type, or subtracting more than is in stock
        """
        if payload.quantity is None:
            raise ApiError("Quantity is required", status_code=400)

        valid_types = {t.value for t in AdjustmentType}
        if payload.adjustment_type not in valid_types:
            raise ApiError("Valid adjustment type is required (set, add, or subtract)", status_code=400)

        if payload.quantity < 0:
            raise ApiError("Quantity must be a non-negative number", status_code=400)

        item = InventoryService.get_item(item_id)
        previous = item.get("stockQuantity") or 0

        if payload.adjustment_type == AdjustmentType.SET.value:
            new_quantity = payload.quantity
        elif payload.adjustment_type == AdjustmentType.ADD.value:
            new_quantity = previous + payload.quantity
        else:
            if payload.quantity > previous:
                raise ApiError("Cannot subtract more than current stock", status_code=400)
            new_quantity = previous - payload.quantity

        updated = SupabaseClient.update_document(TABLE, item_id, {"stockQuantity": new_quantity})
        if not updated:
            raise NotFoundError("Inventory item")

        user_id = user.id if user else None
        InventoryService._apply_stock_rule(updated, previous, user_id)

        ActivityService.log_activity(
            description=(
                f'Stock for "{updated["name"]}" ({updated["sku"]}) '
                f"adjusted from {previous} to {new_quantity}"
            ),
            entity_type=EntityType.INVENTORY,
            entity_id=item_id,
            action=ActivityAction.UPDATE,
            user_id=user_id,
            metadata={
                "itemId": item_id,
                "previousQuantity": previous,
                "newQuantity": new_quantity,
                "adjustmentType": payload.adjustment_type,
                "reason": payload.reason,
            },
        )

        return {
            "itemId": item_id,
            "sku": updated["sku"],
            "name": updated["name"],
            "previousQuantity": previous,
            "newQuantity": new_quantity,
            "adjustmentType": payload.adjustment_type,
            "reason": payload.reason,
        }

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    @staticmethod
    def add_images(
        item_id: str,
        images: list[str],
        primary_image: str | None,
        user: AuthUser,
    ) -> dict[str, Any]:
        """
        Append uploaded image URLs to an item.

        Duplicates are dropped; `primary_image` moves to the front.
        """
        if not images:
            raise ApiError("Images array is required", status_code=400)

        item = InventoryService.get_item(item_id)

        merged: list[str] = []
        for url in [*(item.get("images") or []), *images]:
            if url not in merged:
                merged.append(url)
        if primary_image:
            merged = [primary_image, *(url for url in merged if url != primary_image)]

        updated = SupabaseClient.update_document(TABLE, item_id, {"images": merged})
        if not updated:
            raise NotFoundError("Inventory item")

        ActivityService.log_activity(
            description=f'{len(images)} image(s) added to "{item.get("name")}"',
            entity_type=EntityType.INVENTORY,
            entity_id=item_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
        )
        return updated

    @staticmethod
    def remove_image(item_id: str, image_url: str | None, user: AuthUser) -> None:
        """
        Remove an image from an item and delete it from storage.

        Raises:
            ApiError: 400 without a URL, 404 if the item doesn't have it
            StorageError: If the storage delete fails
        """
        if not image_url:
            raise ApiError("Image URL is required", status_code=400)

        item = InventoryService.get_item(item_id)
        images = item.get("images") or []
        if image_url not in images:
            raise ApiError("Image not found", status_code=404)

        path = StorageService.path_from_url(image_url)
        if path:
            StorageService.delete_file(path)

        SupabaseClient.update_document(TABLE, item_id, {"images": [url for url in images if url != image_url]})

        ActivityService.log_activity(
            description=f'Image removed from "{item.get("name")}"',
            entity_type=EntityType.INVENTORY,
            entity_id=item_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
        )
