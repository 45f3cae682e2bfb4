# =============================================================================
# app/routers/milestones.py - Milestone Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.project import MilestoneCreate, MilestoneUpdate, ProgressUpdate
from core.services.milestone_service import MilestoneService
from lib.utils import list_envelope

router = APIRouter()


@router.get("")
async def list_milestones(
    user: CurrentUser,
    params: ListParamsDep,
    search: Annotated[str | None, Query(description="Matches title or description")] = None,
    project: Annotated[str | None, Query()] = None,
    milestone_status: Annotated[str | None, Query(alias="status")] = None,
    owner: Annotated[str | None, Query()] = None,
    priority: Annotated[str | None, Query()] = None,
    from_date: Annotated[str | None, Query(alias="fromDate", description="Earliest target date")] = None,
    to_date: Annotated[str | None, Query(alias="toDate", description="Latest target date")] = None,
    my_milestones: Annotated[
        bool,
        Query(alias="myMilestones", description="Only milestones the caller owns, reviews or created"),
    ] = False,
):
    milestones, total = MilestoneService.list_milestones(
        user=user,
        page=params.page,
        limit=params.limit,
        search=search,
        project=project,
        status=milestone_status,
        owner=owner,
        priority=priority,
        from_date=from_date,
        to_date=to_date,
        my_milestones=my_milestones,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(milestones, total, params.page, params.limit)


@router.get("/{milestone_id}")
async def get_milestone(milestone_id: str, user: CurrentUser):
    return {"success": True, "data": MilestoneService.get_milestone(milestone_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_milestone(request: MilestoneCreate, user: CurrentUser):
    return {"success": True, "data": MilestoneService.create_milestone(request, user)}


@router.put("/{milestone_id}")
async def update_milestone(milestone_id: str, request: MilestoneUpdate, user: CurrentUser):
    return {"success": True, "data": MilestoneService.update_milestone(milestone_id, request, user)}


@router.delete("/{milestone_id}")
async def delete_milestone(milestone_id: str, user: CurrentUser):
    MilestoneService.delete_milestone(milestone_id, user)
    return {"success": True, "message": "Milestone deleted successfully"}


@router.put("/{milestone_id}/approve")
async def approve_milestone(milestone_id: str, user: CurrentUser):
    data = MilestoneService.approve_milestone(milestone_id, user)
    return {"success": True, "message": "Milestone approved successfully", "data": data}


@router.put("/{milestone_id}/progress")
async def update_progress(milestone_id: str, request: ProgressUpdate, user: CurrentUser):
    """Set progress (0-100); status follows automatically."""
    return {"success": True, "data": MilestoneService.update_progress(milestone_id, request, user)}
