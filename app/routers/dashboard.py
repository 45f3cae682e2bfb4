# =============================================================================
# app/routers/dashboard.py - Dashboard Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.dependencies import CurrentUser
from core.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/stats")
async def dashboard_stats(user: CurrentUser):
    """Global and per-user task counts, active users and activity volume."""
    return {"success": True, "data": DashboardService.get_stats(user)}


@router.get("/activities")
async def recent_activities(
    user: CurrentUser,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    only_mine: Annotated[bool, Query(alias="onlyMine")] = False,
):
    activities = DashboardService.get_activities(user, limit=limit, only_mine=only_mine)
    return {"success": True, "count": len(activities), "data": activities}


@router.get("/tasks")
async def my_tasks(
    user: CurrentUser,
    task_status: Annotated[str | None, Query(alias="status")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 5,
):
    tasks = DashboardService.get_tasks(user, status=task_status, limit=limit)
    return {"success": True, "count": len(tasks), "data": tasks}


@router.get("/system-status")
async def system_status(user: CurrentUser):
    components = DashboardService.get_system_status()
    return {"success": True, "count": len(components), "data": components}
