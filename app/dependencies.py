# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection shared by the resource routers.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Query

from app.auth import AuthUser, get_current_user, require_admin
from app.config import settings


# Type aliases for dependency injection
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
AdminUser = Annotated[AuthUser, Depends(require_admin)]


class ListParams:
    """
    Paging and sorting query parameters common to every list endpoint.

    `limit` is clamped to MAX_PAGE_SIZE rather than rejected.
    """

    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="Page number")] = 1,
        limit: Annotated[int, Query(ge=1, description="Items per page")] = settings.DEFAULT_PAGE_SIZE,
        sort_by: Annotated[str | None, Query(alias="sortBy", description="Field to sort by")] = None,
        sort_order: Annotated[
            str | None,
            Query(alias="sortOrder", pattern="^(asc|desc)$", description="asc or desc"),
        ] = None,
    ):
        self.page = page
        self.limit = min(limit, settings.MAX_PAGE_SIZE)
        self.sort_by = sort_by
        self.sort_order = sort_order


ListParamsDep = Annotated[ListParams, Depends()]
