# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and role checks.
#
# Usage:
#   from app.auth import get_current_user, require_admin, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, ExpiredSignatureError
from pydantic import ValidationError

from app.auth.models import AuthUser
from app.auth.tokens import decode_access_token
from app.exceptions import ForbiddenError
from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. auto_error is off so a missing header gets
# the same 401 envelope as a bad token.
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate the user from the bearer token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the JWT signature and expiry
    3. Loads the user row and checks the account is active
    4. Returns an AuthUser with id, email and role

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired,
            or the account no longer exists or is deactivated
    """
    if credentials is None:
        raise _unauthorized("Not authorized, no token")

    try:
        payload = decode_access_token(credentials.credentials)

    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")

    except (JWTError, ValidationError) as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized("Not authorized, token failed")

    if not is_valid_id(payload.sub):
        logger.warning(f"Invalid user ID in token: {payload.sub}")
        raise _unauthorized("Not authorized, token failed")

    user = SupabaseClient.fetch_document("users", payload.sub)

    if not user:
        raise _unauthorized("User not found")

    if not user.get("isActive", True):
        raise _unauthorized("User account is deactivated")

    logger.debug(f"Authenticated user: {payload.sub}")
    return AuthUser.from_document(user)


async def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Allow only admins through.

    Raises:
        ForbiddenError: 403 for non-admin callers
    """
    if not user.is_admin:
        raise ForbiddenError()
    return user
