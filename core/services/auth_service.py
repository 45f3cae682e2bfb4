# =============================================================================
# core/services/auth_service.py - Registration, Login & Password Reset
# =============================================================================

import logging
from typing import Any

from jose import JWTError
from pydantic import ValidationError

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, utc_now_iso
from core.models.activity import ActivityAction, EntityType
from core.models.user import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserRole,
)
from core.services.activity_service import ActivityService
from core.services.user_service import (
    TABLE,
    UserService,
    check_password_length,
    public_user,
)
from app.auth.tokens import (
    create_access_token,
    create_reset_token,
    decode_reset_token,
    hash_password,
    verify_password,
)
from app.config import settings
from app.exceptions import ApiError, MissingFieldsError

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = (
    "If your email exists in our system, you will receive password reset "
    "instructions shortly."
)


class AuthService:
    """Service for authentication flows."""

    @staticmethod
    def register(payload: RegisterRequest) -> dict[str, Any]:
        """
        Register a new account with the `user` role.

        Raises:
            ApiError: 400 for missing fields, short password or a
                duplicate email
        """
        missing = {
            field: f"{label} is required"
            for field, label, value in (
                ("email", "Email", payload.email),
                ("password", "Password", payload.password),
                ("firstName", "First name", payload.first_name),
                ("lastName", "Last name", payload.last_name),
            )
            if not value
        }
        if missing:
            raise MissingFieldsError(missing)

        check_password_length(payload.password)

        email = payload.email.strip().lower()
        if UserService.find_by_email(email):
            raise ApiError(
                "User already exists",
                status_code=400,
                errors={"email": ["Email is already registered"]},
            )

        user = SupabaseClient.insert_document(TABLE, {
            "email": email,
            "password": hash_password(payload.password),
            "firstName": payload.first_name,
            "lastName": payload.last_name,
            "role": UserRole.USER.value,
            "isActive": True,
            "lastLogin": None,
        })
        logger.info(f"Registered user: {user['id']}")
        return public_user(user)

    @staticmethod
    def login(payload: LoginRequest) -> dict[str, Any]:
        """
        Verify credentials and issue an access token.

        Returns:
            Dict with `token` and `user`

        Raises:
            MissingFieldsError: If email or password is absent
            ApiError: 401 for unknown email, wrong password or a
                deactivated account
        """
        missing = {}
        if not payload.email:
            missing["email"] = "Email is required"
        if not payload.password:
            missing["password"] = "Password is required"
        if missing:
            raise MissingFieldsError(missing, message="Please provide email and password")

        user = UserService.find_by_email(payload.email)

        if not user or not verify_password(payload.password, user.get("password")):
            raise ApiError("Invalid credentials", status_code=401)

        if not user.get("isActive", True):
            raise ApiError("Invalid credentials", status_code=401)

        user = SupabaseClient.update_document(TABLE, user["id"], {"lastLogin": utc_now_iso()}) or user
        token = create_access_token(user["id"])

        ActivityService.log_user_login(user["id"])
        logger.info(f"User logged in: {user['id']}")

        return {"token": token, "user": public_user(user)}

    @staticmethod
    def forgot_password(payload: ForgotPasswordRequest) -> dict[str, Any]:
        """
        Start a password reset.

        The response is the same whether or not the email is known.
        Outside production the reset token is returned directly, since
        no mail is sent.
        """
        if not payload.email:
            raise MissingFieldsError({"email": "Email is required"}, message="Please provide email")

        result: dict[str, Any] = {"message": FORGOT_PASSWORD_MESSAGE}

        user = UserService.find_by_email(payload.email)
        if not user:
            return result

        reset_token = create_reset_token(user["id"])
        logger.info(f"Password reset requested for user: {user['id']}")

        if not settings.is_production:
            result["resetToken"] = reset_token
        return result

    @staticmethod
    def reset_password(payload: ResetPasswordRequest) -> None:
        """
        Complete a password reset with a reset token.

        Raises:
            ApiError: 400 for missing fields, short password, or a bad,
                expired or orphaned token
        """
        missing = {}
        if not payload.token:
            missing["token"] = "Token is required"
        if not payload.password:
            missing["password"] = "Password is required"
        if missing:
            raise MissingFieldsError(missing, message="Please provide token and password")

        check_password_length(payload.password)

        try:
            token = decode_reset_token(payload.token)
        except (JWTError, ValidationError) as e:
            logger.warning(f"Rejected password reset token: {e}")
            raise ApiError("Invalid or expired token", status_code=400)

        user = SupabaseClient.fetch_document(TABLE, token.sub) if is_valid_id(token.sub) else None
        if not user:
            raise ApiError("Invalid or expired token", status_code=400)

        SupabaseClient.update_document(TABLE, user["id"], {"password": hash_password(payload.password)})

        ActivityService.log_activity(
            description="Password reset successful",
            entity_type=EntityType.USER,
            entity_id=user["id"],
            action=ActivityAction.UPDATE,
            user_id=user["id"],
        )
