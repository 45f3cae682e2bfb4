# =============================================================================
# app/routers/inventory_alerts.py - Inventory Alert Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.inventory import AlertAssign, AlertCreate, AlertResolve, AlertUpdate
from core.services.alert_service import AlertService
from lib.utils import list_envelope

router = APIRouter()


@router.get("/stats")
async def alert_stats(user: CurrentUser):
    return {"success": True, "data": AlertService.get_stats()}


@router.get("")
async def list_alerts(
    user: CurrentUser,
    params: ListParamsDep,
    alert_status: Annotated[str | None, Query(alias="status", description="Defaults to active; 'all' for every status")] = None,
    alert_type: Annotated[str | None, Query(alias="alertType")] = None,
    priority: Annotated[str | None, Query()] = None,
    assigned_to: Annotated[
        str | None,
        Query(alias="assignedTo", description="'me', 'unassigned', 'all' or a user ID"),
    ] = None,
):
    alerts, total = AlertService.list_alerts(
        user=user,
        page=params.page,
        limit=params.limit,
        status=alert_status,
        alert_type=alert_type,
        priority=priority,
        assigned_to=assigned_to,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(alerts, total, params.page, params.limit)


@router.get("/{alert_id}")
async def get_alert(alert_id: str, user: CurrentUser):
    return {"success": True, "data": AlertService.get_alert(alert_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_alert(request: AlertCreate, user: CurrentUser):
    return {"success": True, "data": AlertService.create_alert(request, user)}


@router.put("/{alert_id}")
async def update_alert(alert_id: str, request: AlertUpdate, user: CurrentUser):
    return {"success": True, "data": AlertService.update_alert(alert_id, request, user)}


@router.delete("/{alert_id}")
async def delete_alert(alert_id: str, user: CurrentUser):
    AlertService.delete_alert(alert_id, user)
    return {"success": True, "message": "Alert deleted successfully"}


@router.put("/{alert_id}/assign")
async def assign_alert(alert_id: str, request: AlertAssign, user: CurrentUser):
    return {"success": True, "data": AlertService.assign_alert(alert_id, request, user)}


@router.put("/{alert_id}/resolve")
async def resolve_alert(alert_id: str, request: AlertResolve, user: CurrentUser):
    return {"success": True, "data": AlertService.resolve_alert(alert_id, request, user)}
