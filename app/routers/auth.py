# =============================================================================
# app/routers/auth.py - Authentication Endpoints
# =============================================================================
# Registration, login, logout and password reset. Only /me and /logout
# require a bearer token.
# =============================================================================

from fastapi import APIRouter, status

from app.dependencies import CurrentUser
from core.models.user import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from core.services.activity_service import ActivityService
from core.services.auth_service import AuthService
from core.services.user_service import UserService, public_user

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """
    Create an account with the `user` role.

    The password is hashed and never returned.
    """
    user = AuthService.register(request)
    return {"success": True, "data": user}


@router.post("/login")
async def login(request: LoginRequest):
    """
    Exchange email and password for a bearer token.

    Send the token as `Authorization: Bearer <token>` on later requests.
    """
    result = AuthService.login(request)
    return {"success": True, **result}


@router.get("/me")
async def get_me(user: CurrentUser):
    """Get the current authenticated user's profile."""
    return {"success": True, "data": public_user(UserService.get_user_document(user.id))}


@router.post("/forgot-password")
async def forgot_password(request: ForgotPasswordRequest):
    result = AuthService.forgot_password(request)
    return {"success": True, **result}


@router.post("/reset-password")
async def reset_password(request: ResetPasswordRequest):
    AuthService.reset_password(request)
    return {"success": True, "message": "Password reset successful"}


@router.post("/logout")
async def logout(user: CurrentUser):
    """Record the logout. Tokens are stateless, so the client discards its own."""
    ActivityService.log_user_logout(user.id)
    return {"success": True, "message": "Logged out successfully"}
