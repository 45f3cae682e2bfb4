# =============================================================================
# app/routers/inventory.py - Inventory Endpoints
# =============================================================================
# Item CRUD plus stock adjustment. Any write that drops stock to the
# reorder point raises an inventory alert (see InventoryService).
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.inventory import InventoryItemCreate, InventoryItemUpdate, StockAdjustment
from core.services.inventory_service import InventoryService
from lib.utils import list_envelope

router = APIRouter()


# -----------------------------------------------------------------------------
# Aggregates (declared before /{item_id})
# -----------------------------------------------------------------------------

@router.get("/stats")
async def inventory_stats(user: CurrentUser):
    return {"success": True, "data": InventoryService.get_stats()}


@router.get("/low-stock")
async def low_stock_items(
    user: CurrentUser,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
):
    """Items at or below their reorder point, lowest stock first."""
    items = InventoryService.get_low_stock_items(limit)
    return {"success": True, "count": len(items), "data": items}


# -----------------------------------------------------------------------------
# CRUD
# -----------------------------------------------------------------------------

@router.get("")
async def list_items(
    user: CurrentUser,
    params: ListParamsDep,
    search: Annotated[str | None, Query(description="Matches name, SKU or description")] = None,
    category: Annotated[str | None, Query()] = None,
    supplier: Annotated[str | None, Query()] = None,
    low_stock: Annotated[bool, Query(alias="lowStock")] = False,
):
    items, total = InventoryService.list_items(
        page=params.page,
        limit=params.limit,
        search=search,
        category=category,
        supplier=supplier,
        low_stock=low_stock,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(items, total, params.page, params.limit)


@router.get("/{item_id}")
async def get_item(item_id: str, user: CurrentUser):
    return {"success": True, "data": InventoryService.get_item(item_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(request: InventoryItemCreate, user: CurrentUser):
    return {"success": True, "data": InventoryService.create_item(request, user)}


@router.put("/{item_id}")
async def update_item(item_id: str, request: InventoryItemUpdate, user: CurrentUser):
    return {"success": True, "data": InventoryService.update_item(item_id, request, user)}


@router.delete("/{item_id}")
async def delete_item(item_id: str, user: CurrentUser):
    InventoryService.delete_item(item_id, user)
    return {"success": True, "message": "Inventory item deleted successfully"}


@router.put("/{item_id}/stock")
async def adjust_stock(item_id: str, request: StockAdjustment, user: CurrentUser):
    """
    Adjust stock.

    Body: {"quantity": 3, "adjustmentType": "set" | "add" | "subtract", "reason": "..."}
    """
    return {"success": True, "data": InventoryService.adjust_stock(item_id, request, user)}
