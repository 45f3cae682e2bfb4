# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated user resolved from a bearer token.

    Built from the users table row the token's `sub` points at, so the
    role reflects the current database state rather than the token.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    role: str = "user"
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_document(cls, user: dict[str, Any]) -> "AuthUser":
        return cls(
            id=str(user["id"]),
            email=user.get("email"),
            role=user.get("role") or "user",
            first_name=user.get("firstName"),
            last_name=user.get("lastName"),
        )


class TokenPayload(BaseModel):
    """
    Decoded access token payload.

    Standard JWT claims plus a `type` claim separating access tokens
    from password reset tokens.
    """
    sub: str  # User ID
    type: str  # "access" or "reset"
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
