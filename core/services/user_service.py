# =============================================================================
# core/services/user_service.py - User Management
# =============================================================================
# Admin user management plus the self-service profile update.
# Password hashes never leave this layer: every returned user passes
# through `public_user`.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, resolve_sort
from core.models.activity import ActivityAction, EntityType
from core.models.user import ROLE_VALUES, UserCreate, UserRole, UserUpdate
from core.services.activity_service import ActivityService
from app.auth.models import AuthUser
from app.auth.tokens import hash_password
from app.exceptions import (
    ApiError,
    ForbiddenError,
    InvalidIdError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

TABLE = "users"
MIN_PASSWORD_LENGTH = 8
SORT_FIELDS = {"createdAt", "email", "firstName", "lastName", "role", "lastLogin"}


def public_user(user: dict[str, Any]) -> dict[str, Any]:
    """Strip the password hash from a stored user."""
    return {key: value for key, value in user.items() if key != "password"}


def check_password_length(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        message = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        raise ApiError(message, status_code=400, errors={"password": [message]})


def check_role(role: str) -> None:
    if role not in ROLE_VALUES:
        raise ApiError(
            "Invalid role",
            status_code=400,
            errors={"role": [f"Role must be one of: {', '.join(sorted(ROLE_VALUES))}"]},
        )


class UserService:
    """Service for user management operations."""

    @staticmethod
    def get_user_document(user_id: str) -> dict[str, Any]:
        """
        Get the stored user (including the password hash).

        Raises:
            InvalidIdError: If the ID is malformed
            NotFoundError: If the user doesn't exist
        """
        if not is_valid_id(user_id):
            raise InvalidIdError("user")

        user = SupabaseClient.fetch_document(TABLE, user_id)
        if not user:
            raise NotFoundError("User")
        return user

    @staticmethod
    def find_by_email(email: str) -> dict[str, Any] | None:
        return SupabaseClient.find_one(TABLE, email=email.strip().lower())

    @staticmethod
    def list_users(
        page: int,
        limit: int,
        role: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if role:
            query = query.eq("role", role)
        if is_active is not None:
            query = query.eq("isActive", is_active)
        if search:
            clause = SupabaseClient.search_clause(search, ["firstName", "lastName", "email"])
            if clause:
                query = query.or_(clause)

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "createdAt", "desc")
        users, total = SupabaseClient.fetch_page(query, column, descending, page, limit)
        return [public_user(user) for user in users], total

    @staticmethod
    def get_user(user_id: str, caller: AuthUser) -> dict[str, Any]:
        """Admins may read anyone; other users only themselves."""
        if not caller.is_admin and caller.id != user_id:
            raise ForbiddenError()
        return public_user(UserService.get_user_document(user_id))

    @staticmethod
    def create_user(payload: UserCreate, caller: AuthUser) -> dict[str, Any]:
        """
        Create a user on behalf of an admin.

        Raises:
            ApiError: 400 for missing fields, short password, bad role
                or duplicate email
        """
        missing = {
            field: [f"{label} is required"]
            for field, label, value in (
                ("email", "Email", payload.email),
                ("password", "Password", payload.password),
                ("firstName", "First name", payload.first_name),
                ("lastName", "Last name", payload.last_name),
            )
            if not value
        }
        if missing:
            raise ApiError("Missing required fields", status_code=400, errors=missing)

        check_password_length(payload.password)
        role = payload.role or UserRole.USER.value
        check_role(role)

        email = payload.email.strip().lower()
        if UserService.find_by_email(email):
            raise ApiError(
                "User with this email already exists",
                status_code=400,
                errors={"email": ["Email is already registered"]},
            )

        user = SupabaseClient.insert_document(TABLE, {
            "email": email,
            "password": hash_password(payload.password),
            "firstName": payload.first_name,
            "lastName": payload.last_name,
            "role": role,
            "isActive": True,
            "lastLogin": None,
            "createdBy": caller.id,
        })
        logger.info(f"Created user: {user['id']} ({role})")

        ActivityService.log_activity(
            description=f"User {email} created",
            entity_type=EntityType.USER,
            entity_id=user["id"],
            action=ActivityAction.CREATE,
            user_id=caller.id,
        )
        return public_user(user)

    @staticmethod
    def update_user(user_id: str, payload: UserUpdate, caller: AuthUser) -> dict[str, Any]:
        """
        Update a profile.

        Non-admins may update only themselves and may not change role.
        """
        if not caller.is_admin and caller.id != user_id:
            raise ForbiddenError()

        changes = payload.to_document(partial=True)

        if "role" in changes and not caller.is_admin:
            raise ForbiddenError("Not authorized to change role")
        if changes.get("role") is not None:
            check_role(changes["role"])

        user = UserService.get_user_document(user_id)

        if changes.get("password"):
            check_password_length(changes["password"])
            changes["password"] = hash_password(changes["password"])
        else:
            changes.pop("password", None)

        if changes.get("email"):
            email = changes["email"].strip().lower()
            existing = UserService.find_by_email(email)
            if existing and existing["id"] != user["id"]:
                raise ApiError(
                    "User with this email already exists",
                    status_code=400,
                    errors={"email": ["Email is already registered"]},
                )
            changes["email"] = email

        updated = SupabaseClient.update_document(TABLE, user_id, changes)
        if not updated:
            raise NotFoundError("User")

        ActivityService.log_activity(
            description=f"User {updated.get('email')} updated",
            entity_type=EntityType.USER,
            entity_id=user_id,
            action=ActivityAction.UPDATE,
            user_id=caller.id,
        )
        return public_user(updated)

    @staticmethod
    def delete_user(user_id: str, caller: AuthUser) -> None:
        if caller.id == user_id:
            raise ApiError("Cannot delete your own account", status_code=400)

        user = UserService.get_user_document(user_id)
        SupabaseClient.delete_document(TABLE, user_id)
        logger.info(f"Deleted user: {user_id}")

        ActivityService.log_activity(
            description=f"User {user.get('email')} deleted",
            entity_type=EntityType.USER,
            entity_id=user_id,
            action=ActivityAction.DELETE,
            user_id=caller.id,
        )

    @staticmethod
    def set_active(user_id: str, active: bool, caller: AuthUser) -> dict[str, Any]:
        """Activate or deactivate an account. Admins can't deactivate themselves."""
        if not active and caller.id == user_id:
            raise ApiError("Cannot deactivate your own account", status_code=400)

        UserService.get_user_document(user_id)
        updated = SupabaseClient.update_document(TABLE, user_id, {"isActive": active})
        if not updated:
            raise NotFoundError("User")

        ActivityService.log_activity(
            description=f"User {updated.get('email')} {'activated' if active else 'deactivated'}",
            entity_type=EntityType.USER,
            entity_id=user_id,
            action=ActivityAction.UPDATE,
            user_id=caller.id,
            metadata={"isActive": active},
        )
        return public_user(updated)

    @staticmethod
    def change_role(user_id: str, role: str | None, caller: AuthUser) -> dict[str, Any]:
        if not role:
            raise ApiError("Invalid role", status_code=400, errors={"role": ["Role is required"]})
        check_role(role)

        if caller.id == user_id and role != UserRole.ADMIN.value:
            raise ApiError("Cannot demote your own admin role", status_code=400)

        user = UserService.get_user_document(user_id)
        updated = SupabaseClient.update_document(TABLE, user_id, {"role": role})
        if not updated:
            raise NotFoundError("User")

        ActivityService.log_activity(
            description=f"User {updated.get('email')} role changed from {user.get('role')} to {role}",
            entity_type=EntityType.USER,
            entity_id=user_id,
            action=ActivityAction.UPDATE,
            user_id=caller.id,
            metadata={"oldRole": user.get("role"), "newRole": role},
        )
        return public_user(updated)

    @staticmethod
    def reset_password(user_id: str, password: str | None, caller: AuthUser) -> None:
        """Admin password reset for another account."""
        if not password:
            raise ApiError(
                "Password is required",
                status_code=400,
                errors={"password": ["Password is required"]},
            )
        check_password_length(password)

        UserService.get_user_document(user_id)
        SupabaseClient.update_document(TABLE, user_id, {"password": hash_password(password)})

        ActivityService.log_activity(
            description="User password reset by administrator",
            entity_type=EntityType.USER,
            entity_id=user_id,
            action=ActivityAction.UPDATE,
            user_id=caller.id,
        )
