# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for request validation and enums
# - services/: One service class per entity, talking to Supabase
#
# Code in this package should NOT import from FastAPI routers.
# Routers stay thin and call into services.
# =============================================================================
