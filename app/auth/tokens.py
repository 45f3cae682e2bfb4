# =============================================================================
# app/auth/tokens.py - Password Hashing & Token Issuance
# =============================================================================
# - Passwords are hashed with bcrypt
# - Access tokens and password reset tokens are HS256 JWTs signed with
#   different secrets and told apart by their `type` claim
#
# Usage:
#   from app.auth.tokens import hash_password, create_access_token
#   token = create_access_token(user["id"])
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import jwt, JWTError

from app.config import settings
from app.auth.models import TokenPayload

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
RESET_TOKEN_TYPE = "reset"


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check a password against its stored bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


# =============================================================================
# Tokens
# =============================================================================

def _encode(user_id: str, token_type: str, secret: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str, token_type: str, secret: str) -> TokenPayload:
    """
    Verify a token's signature, expiry and type.

    Raises:
        JWTError: If the token is invalid, expired, or of the wrong type
    """
    payload = TokenPayload(**jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM]))
    if payload.type != token_type:
        raise JWTError(f"Expected a {token_type} token")
    return payload


def create_access_token(user_id: str) -> str:
    return _encode(
        user_id,
        ACCESS_TOKEN_TYPE,
        settings.SECRET_KEY,
        timedelta(days=settings.JWT_EXPIRE_DAYS),
    )


def decode_access_token(token: str) -> TokenPayload:
    return _decode(token, ACCESS_TOKEN_TYPE, settings.SECRET_KEY)


def create_reset_token(user_id: str) -> str:
    return _encode(
        user_id,
        RESET_TOKEN_TYPE,
        settings.RESET_TOKEN_SECRET,
        timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
    )


def decode_reset_token(token: str) -> TokenPayload:
    return _decode(token, RESET_TOKEN_TYPE, settings.RESET_TOKEN_SECRET)
