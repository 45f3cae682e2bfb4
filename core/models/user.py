# =============================================================================
# core/models/user.py - User & Auth Schemas
# =============================================================================
# Request bodies for registration, login, password reset and the
# admin user-management endpoints.
#
# Fields are optional where the service reports its own message for a
# missing value (e.g. "Please provide email and password").
# =============================================================================

from enum import Enum

from pydantic import Field

from .base import CamelModel


class UserRole(str, Enum):
    """Roles a user can hold. Admins bypass ownership checks."""
    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


ROLE_VALUES = {role.value for role in UserRole}


class RegisterRequest(CamelModel):
    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class ForgotPasswordRequest(CamelModel):
    email: str | None = None


class ResetPasswordRequest(CamelModel):
    token: str | None = None
    password: str | None = None


class UserCreate(CamelModel):
    """Admin-created user. Role defaults to `user`."""
    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None


class UserUpdate(CamelModel):
    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None
    avatar: str | None = None


class RoleChangeRequest(CamelModel):
    role: str | None = Field(default=None, description="admin, user or guest")


class PasswordChangeRequest(CamelModel):
    password: str | None = None
