# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - Document IDs
# - Timestamps and date parsing
# - Pagination arithmetic
# =============================================================================

import math
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4


# =============================================================================
# ID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        task_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        task_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def new_id() -> str:
    """Generate a new document ID."""
    return str(uuid4())


def is_valid_id(value: Any) -> bool:
    """Check whether a value is a well-formed document ID."""
    if isinstance(value, UUID):
        return True
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True


# =============================================================================
# Time Utilities
# =============================================================================

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current time as the ISO-8601 string stored on documents."""
    return utc_now().isoformat()


def days_from_now(days: int) -> str:
    """ISO-8601 timestamp `days` away from now (negative for the past)."""
    return (utc_now() + timedelta(days=days)).isoformat()


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse a stored timestamp into an aware UTC datetime.

    Accepts datetimes, ISO-8601 strings (with or without "Z" or an offset)
    and plain dates. Naive values are treated as UTC.

    Returns:
        datetime, or None for empty or unparseable values
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# =============================================================================
# Pagination
# =============================================================================

def page_range(page: int, limit: int) -> tuple[int, int]:
    """
    Convert page/limit into the inclusive row range used by `.range()`.

    Example:
        page_range(2, 5)  # (5, 9)
    """
    offset = (page - 1) * limit
    return offset, offset + limit - 1


def resolve_sort(
    sort_by: str | None,
    sort_order: str | None,
    allowed: set[str],
    default: str,
    default_order: str = "asc",
) -> tuple[str, bool]:
    """
    Pick a sort column from an allow-list and the sort direction.

    Unknown columns fall back to `default`.

    Returns:
        Tuple of (column, descending)
    """
    column = sort_by if sort_by in allowed else default
    order = (sort_order or default_order).lower()
    return column, order == "desc"


def pagination_meta(page: int, limit: int, total: int) -> dict[str, int]:
    """Pagination block for list envelopes."""
    return {
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


def list_envelope(
    data: list[dict[str, Any]],
    total: int,
    page: int,
    limit: int,
) -> dict[str, Any]:
    """Build the standard paginated response envelope."""
    return {
        "success": True,
        "count": len(data),
        "total": total,
        "pagination": pagination_meta(page, limit, total),
        "data": data,
    }
