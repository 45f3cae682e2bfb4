# =============================================================================
# app/routers/tasks.py - Task Endpoints
# =============================================================================
# Personal task list. Non-admins see the tasks assigned to them.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.task import TaskCreate, TaskUpdate
from core.services.task_service import TaskService
from lib.utils import list_envelope

router = APIRouter()


@router.get("")
async def list_tasks(
    user: CurrentUser,
    params: ListParamsDep,
    task_status: Annotated[str | None, Query(alias="status")] = None,
    priority: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query(description="Matches title or description")] = None,
    assigned_to: Annotated[
        str | None,
        Query(alias="assignedTo", description="Admins only: 'all' or a user ID"),
    ] = None,
):
    """
    List tasks.

    Defaults to the caller's assigned tasks, newest first.
    """
    tasks, total = TaskService.list_tasks(
        user=user,
        page=params.page,
        limit=params.limit,
        status=task_status,
        priority=priority,
        search=search,
        assigned_to=assigned_to,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(tasks, total, params.page, params.limit)


@router.get("/{task_id}")
async def get_task(task_id: str, user: CurrentUser):
    return {"success": True, "data": TaskService.get_task(task_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(request: TaskCreate, user: CurrentUser):
    return {"success": True, "data": TaskService.create_task(request, user)}


@router.put("/{task_id}")
async def update_task(task_id: str, request: TaskUpdate, user: CurrentUser):
    return {"success": True, "data": TaskService.update_task(task_id, request, user)}


@router.delete("/{task_id}")
async def delete_task(task_id: str, user: CurrentUser):
    TaskService.delete_task(task_id, user)
    return {"success": True, "message": "Task deleted successfully"}
