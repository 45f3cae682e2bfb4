# =============================================================================
# app/exceptions.py - Custom Exceptions & Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Every failure leaves the API in the same envelope the success paths use:
#   {"success": false, "message": "...", "errors": {"field": ["..."]}}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Base exception for the API.

    Carries the HTTP status code and an optional map of field name to
    error messages, serialized by `api_error_handler`.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        errors: dict[str, list[str]] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "success": False,
            "message": self.message,
        }
        if self.errors:
            result["errors"] = self.errors
        return result


# =============================================================================
# Common Errors
# =============================================================================

class NotFoundError(ApiError):
    """Raised when a document ID doesn't exist."""

    def __init__(self, entity: str):
        super().__init__(message=f"{entity} not found", status_code=404)


class InvalidIdError(ApiError):
    """Raised when a path ID is not a well-formed identifier."""

    def __init__(self, entity: str):
        super().__init__(message=f"Invalid {entity} ID", status_code=400)


class ForbiddenError(ApiError):
    """Raised when the caller is authenticated but not allowed to act."""

    def __init__(self, message: str = "Not authorized to access this resource"):
        super().__init__(message=message, status_code=403)


class StorageError(ApiError):
    """Raised when a storage bucket operation fails."""

    def __init__(self, action: str, detail: str):
        super().__init__(message=f"Failed to {action}", status_code=500)
        self.detail = detail


class MissingFieldsError(ApiError):
    """Raised when required body fields are absent."""

    def __init__(
        self,
        missing: dict[str, str],
        message: str = "Please provide all required fields",
    ):
        super().__init__(
            message=message,
            status_code=400,
            errors={field: [text] for field, text in missing.items()},
        )


def require_fields(
    payload: dict[str, Any],
    fields: dict[str, str],
    message: str = "Please provide all required fields",
) -> None:
    """
    Raise MissingFieldsError for every field that is absent or empty.

    Args:
        payload: Request body as a dict
        fields: Mapping of field name to the error shown when it's missing
        message: Top-level message for the error envelope
    """
    missing = {
        name: text
        for name, text in fields.items()
        if payload.get(name) is None or payload.get(name) == "" or payload.get(name) == []
    }
    if missing:
        raise MissingFieldsError(missing, message=message)


# =============================================================================
# Exception Handlers
# =============================================================================

async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Convert ApiError to the JSON error envelope."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """
    Wrap framework HTTP errors (auth failures, unknown routes) in the envelope.

    Keeps headers such as WWW-Authenticate intact.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Body and query validation failures become 400s keyed by the
    camelCase field name, matching the errors raised by services.
    """
    errors: dict[str, list[str]] = {}
    only_missing = True

    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "body"
        if error.get("type") == "missing":
            text = f"{location[-1] if location else 'Field'} is required"
        else:
            only_missing = False
            text = error.get("msg", "Invalid value")
        errors.setdefault(field, []).append(text)

    message = "Please provide all required fields" if only_missing else "Validation failed"
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message, "errors": errors},
    )
