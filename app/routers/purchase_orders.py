# =============================================================================
# app/routers/purchase_orders.py - Purchase Order Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.shipment import PurchaseOrderCreate, PurchaseOrderStatusChange, PurchaseOrderUpdate
from core.services.purchase_order_service import PurchaseOrderService
from lib.utils import list_envelope

router = APIRouter()


@router.get("")
async def list_orders(
    user: CurrentUser,
    params: ListParamsDep,
    search: Annotated[str | None, Query(description="Matches order number")] = None,
    order_status: Annotated[str | None, Query(alias="status")] = None,
    supplier: Annotated[str | None, Query()] = None,
    from_date: Annotated[str | None, Query(alias="fromDate", description="Earliest order date")] = None,
    to_date: Annotated[str | None, Query(alias="toDate", description="Latest order date")] = None,
):
    orders, total = PurchaseOrderService.list_orders(
        page=params.page,
        limit=params.limit,
        search=search,
        status=order_status,
        supplier=supplier,
        from_date=from_date,
        to_date=to_date,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(orders, total, params.page, params.limit)


@router.get("/{order_id}")
async def get_order(order_id: str, user: CurrentUser):
    return {"success": True, "data": PurchaseOrderService.get_order(order_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(request: PurchaseOrderCreate, user: CurrentUser):
    """Create an order. `orderNumber` is generated when omitted; totals come from the items."""
    return {"success": True, "data": PurchaseOrderService.create_order(request, user)}


@router.put("/{order_id}")
async def update_order(order_id: str, request: PurchaseOrderUpdate, user: CurrentUser):
    return {"success": True, "data": PurchaseOrderService.update_order(order_id, request, user)}


@router.delete("/{order_id}")
async def delete_order(order_id: str, user: CurrentUser):
    PurchaseOrderService.delete_order(order_id, user)
    return {"success": True, "message": "Purchase order deleted successfully"}


@router.put("/{order_id}/status")
async def change_order_status(order_id: str, request: PurchaseOrderStatusChange, user: CurrentUser):
    """Move the order along; `received` restocks the ordered items."""
    return {"success": True, "data": PurchaseOrderService.change_status(order_id, request, user)}
