# =============================================================================
# app/routers/users.py - User Management Endpoints
# =============================================================================
# Admin-only, except that users may read and update their own profile.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import AdminUser, CurrentUser, ListParamsDep
from core.models.user import PasswordChangeRequest, RoleChangeRequest, UserCreate, UserUpdate
from core.services.user_service import UserService
from lib.utils import list_envelope

router = APIRouter()


@router.get("")
async def list_users(
    admin: AdminUser,
    params: ListParamsDep,
    role: Annotated[str | None, Query(description="admin, user or guest")] = None,
    is_active: Annotated[bool | None, Query(alias="isActive")] = None,
    search: Annotated[str | None, Query(description="Matches name or email")] = None,
):
    users, total = UserService.list_users(
        page=params.page,
        limit=params.limit,
        role=role,
        is_active=is_active,
        search=search,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(users, total, params.page, params.limit)


@router.get("/{user_id}")
async def get_user(user_id: str, user: CurrentUser):
    return {"success": True, "data": UserService.get_user(user_id, user)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreate, admin: AdminUser):
    user = UserService.create_user(request, admin)
    return {"success": True, "message": "User created successfully", "data": user}


@router.put("/{user_id}")
async def update_user(user_id: str, request: UserUpdate, user: CurrentUser):
    updated = UserService.update_user(user_id, request, user)
    return {"success": True, "message": "User updated successfully", "data": updated}


@router.delete("/{user_id}")
async def delete_user(user_id: str, admin: AdminUser):
    UserService.delete_user(user_id, admin)
    return {"success": True, "message": "User deleted successfully"}


@router.put("/{user_id}/activate")
async def activate_user(user_id: str, admin: AdminUser):
    user = UserService.set_active(user_id, True, admin)
    return {"success": True, "message": "User activated successfully", "data": user}


@router.put("/{user_id}/deactivate")
async def deactivate_user(user_id: str, admin: AdminUser):
    user = UserService.set_active(user_id, False, admin)
    return {"success": True, "message": "User deactivated successfully", "data": user}


@router.put("/{user_id}/role")
async def change_role(user_id: str, request: RoleChangeRequest, admin: AdminUser):
    user = UserService.change_role(user_id, request.role, admin)
    return {"success": True, "message": f"User role updated to {request.role}", "data": user}


@router.put("/{user_id}/password")
async def reset_user_password(user_id: str, request: PasswordChangeRequest, admin: AdminUser):
    UserService.reset_password(user_id, request.password, admin)
    return {"success": True, "message": "User password reset successfully"}
