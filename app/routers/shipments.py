# =============================================================================
# app/routers/shipments.py - Shipment Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.base import AttachedDocument
from core.models.shipment import ShipmentCreate, ShipmentUpdate
from core.services.shipment_service import ShipmentService
from lib.utils import list_envelope

router = APIRouter()


@router.get("")
async def list_shipments(
    user: CurrentUser,
    params: ListParamsDep,
    search: Annotated[str | None, Query(description="Matches shipment number, tracking number or courier")] = None,
    shipment_status: Annotated[str | None, Query(alias="status")] = None,
    shipment_type: Annotated[str | None, Query(alias="type")] = None,
    courier: Annotated[str | None, Query()] = None,
    from_date: Annotated[str | None, Query(alias="fromDate")] = None,
    to_date: Annotated[str | None, Query(alias="toDate")] = None,
):
    shipments, total = ShipmentService.list_shipments(
        page=params.page,
        limit=params.limit,
        search=search,
        status=shipment_status,
        shipment_type=shipment_type,
        courier=courier,
        from_date=from_date,
        to_date=to_date,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(shipments, total, params.page, params.limit)


@router.get("/{shipment_id}")
async def get_shipment(shipment_id: str, user: CurrentUser):
    return {"success": True, "data": ShipmentService.get_shipment(shipment_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_shipment(request: ShipmentCreate, user: CurrentUser):
    return {"success": True, "data": ShipmentService.create_shipment(request, user)}


@router.put("/{shipment_id}")
async def update_shipment(shipment_id: str, request: ShipmentUpdate, user: CurrentUser):
    """
    Update a shipment.

    A status change appends a tracking event; send `location` and
    `statusNote` to describe it.
    """
    return {"success": True, "data": ShipmentService.update_shipment(shipment_id, request, user)}


@router.delete("/{shipment_id}")
async def delete_shipment(shipment_id: str, user: CurrentUser):
    ShipmentService.delete_shipment(shipment_id, user)
    return {"success": True, "message": "Shipment deleted successfully"}


# -----------------------------------------------------------------------------
# Documents
# -----------------------------------------------------------------------------

@router.get("/{shipment_id}/documents")
async def list_shipment_documents(shipment_id: str, user: CurrentUser):
    documents = ShipmentService.list_documents(shipment_id)
    return {"success": True, "count": len(documents), "data": documents}


@router.post("/{shipment_id}/documents", status_code=status.HTTP_201_CREATED)
async def add_shipment_document(shipment_id: str, request: AttachedDocument, user: CurrentUser):
    return {"success": True, "data": ShipmentService.add_document(shipment_id, request, user)}


@router.delete("/{shipment_id}/documents/{document_id}")
async def remove_shipment_document(shipment_id: str, document_id: str, user: CurrentUser):
    ShipmentService.remove_document(shipment_id, document_id, user)
    return {"success": True, "message": "Document removed successfully"}
