# =============================================================================
# app/routers/suppliers.py - Supplier Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.supplier import SupplierCreate, SupplierUpdate
from core.services.supplier_service import SupplierService
from lib.utils import list_envelope

router = APIRouter()


@router.get("")
async def list_suppliers(
    user: CurrentUser,
    params: ListParamsDep,
    search: Annotated[str | None, Query(description="Matches name, email or contact name")] = None,
    supplier_status: Annotated[str | None, Query(alias="status")] = None,
    category: Annotated[str | None, Query()] = None,
):
    suppliers, total = SupplierService.list_suppliers(
        page=params.page,
        limit=params.limit,
        search=search,
        status=supplier_status,
        category=category,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(suppliers, total, params.page, params.limit)


@router.get("/{supplier_id}")
async def get_supplier(supplier_id: str, user: CurrentUser):
    return {"success": True, "data": SupplierService.get_supplier(supplier_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_supplier(request: SupplierCreate, user: CurrentUser):
    return {"success": True, "data": SupplierService.create_supplier(request, user)}


@router.put("/{supplier_id}")
async def update_supplier(supplier_id: str, request: SupplierUpdate, user: CurrentUser):
    return {"success": True, "data": SupplierService.update_supplier(supplier_id, request, user)}


@router.delete("/{supplier_id}")
async def delete_supplier(supplier_id: str, user: CurrentUser):
    SupplierService.delete_supplier(supplier_id, user)
    return {"success": True, "message": "Supplier deleted successfully"}
