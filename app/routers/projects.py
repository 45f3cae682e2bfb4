# =============================================================================
# app/routers/projects.py - Project Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.base import AttachedDocument
from core.models.project import ProjectCreate, ProjectUpdate
from core.services.project_service import ProjectService
from lib.utils import list_envelope

router = APIRouter()


@router.get("/stats")
async def project_stats(user: CurrentUser):
    return {"success": True, "data": ProjectService.get_stats()}


@router.get("")
async def list_projects(
    user: CurrentUser,
    params: ListParamsDep,
    search: Annotated[str | None, Query(description="Matches name or description")] = None,
    customer: Annotated[str | None, Query()] = None,
    project_status: Annotated[str | None, Query(alias="status")] = None,
    phase: Annotated[str | None, Query()] = None,
    account_manager: Annotated[str | None, Query(alias="accountManager")] = None,
    from_date: Annotated[str | None, Query(alias="fromDate", description="Earliest startDate")] = None,
    to_date: Annotated[str | None, Query(alias="toDate", description="Latest startDate")] = None,
    involved_user: Annotated[
        str | None,
        Query(alias="involvedUser", description="Account manager, creator or stakeholder"),
    ] = None,
):
    projects, total = ProjectService.list_projects(
        page=params.page,
        limit=params.limit,
        search=search,
        customer=customer,
        status=project_status,
        phase=phase,
        account_manager=account_manager,
        from_date=from_date,
        to_date=to_date,
        involved_user=involved_user,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(projects, total, params.page, params.limit)


@router.get("/{project_id}")
async def get_project(project_id: str, user: CurrentUser):
    return {"success": True, "data": ProjectService.get_project(project_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(request: ProjectCreate, user: CurrentUser):
    return {"success": True, "data": ProjectService.create_project(request, user)}


@router.put("/{project_id}")
async def update_project(project_id: str, request: ProjectUpdate, user: CurrentUser):
    return {"success": True, "data": ProjectService.update_project(project_id, request, user)}


@router.delete("/{project_id}")
async def delete_project(project_id: str, user: CurrentUser):
    ProjectService.delete_project(project_id, user)
    return {"success": True, "message": "Project deleted successfully"}


# -----------------------------------------------------------------------------
# Documents
# -----------------------------------------------------------------------------

@router.post("/{project_id}/documents", status_code=status.HTTP_201_CREATED)
async def add_project_document(project_id: str, request: AttachedDocument, user: CurrentUser):
    """Attach an uploaded file. Body: {"title", "fileUrl", "category"?}"""
    return {"success": True, "data": ProjectService.add_document(project_id, request, user)}


@router.delete("/{project_id}/documents/{document_id}")
async def remove_project_document(project_id: str, document_id: str, user: CurrentUser):
    ProjectService.remove_document(project_id, document_id, user)
    return {"success": True, "message": "Document removed successfully"}
