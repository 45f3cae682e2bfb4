# =============================================================================
# core/services/supplier_service.py - Supplier Business Logic
# =============================================================================
# Supplier CRUD. Names are unique; a supplier still referenced by
# inventory items or purchase orders cannot be deleted.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, resolve_sort
from core.models.activity import ActivityAction, EntityType
from core.models.supplier import SupplierCreate, SupplierUpdate
from core.services.activity_service import ActivityService
from app.auth.models import AuthUser
from app.exceptions import ApiError, InvalidIdError, NotFoundError, require_fields

logger = logging.getLogger(__name__)

TABLE = "suppliers"
SORT_FIELDS = {"name", "status", "rating", "createdAt"}


def _duplicate_name(name: str) -> ApiError:
    return ApiError(f'Supplier with name "{name}" already exists', status_code=400)


class SupplierService:
    """Service for supplier management operations."""

    @staticmethod
    def list_suppliers(
        page: int,
        limit: int,
        search: str | None = None,
        status: str | None = None,
        category: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if search:
            clause = SupabaseClient.search_clause(search, ["name", "email", "contactPerson->>name"])
            if clause:
                query = query.or_(clause)
        if status:
            query = query.eq("status", status)
        if category:
            query = query.contains("categories", [category])

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "name")
        return SupabaseClient.fetch_page(query, column, descending, page, limit)

    @staticmethod
    def get_supplier(supplier_id: str) -> dict[str, Any]:
        if not is_valid_id(supplier_id):
            raise InvalidIdError("supplier")

        supplier = SupabaseClient.fetch_document(TABLE, supplier_id)
        if not supplier:
            raise NotFoundError("Supplier")
        return supplier

    @staticmethod
    def create_supplier(payload: SupplierCreate, user: AuthUser) -> dict[str, Any]:
        data = payload.to_document()
        require_fields(data, {"name": "Supplier name is required", "email": "Email is required"})

        if SupabaseClient.find_one(TABLE, name=data["name"]):
            raise _duplicate_name(data["name"])

        data["createdBy"] = user.id
        supplier = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created supplier: {supplier['id']}")

        ActivityService.log_activity(
            description=f'Supplier "{supplier["name"]}" created',
            entity_type=EntityType.SUPPLIER,
            entity_id=supplier["id"],
            action=ActivityAction.CREATE,
            user_id=user.id,
        )
        return supplier

    @staticmethod
    def update_supplier(supplier_id: str, payload: SupplierUpdate, user: AuthUser) -> dict[str, Any]:
        supplier = SupplierService.get_supplier(supplier_id)
        changes = payload.to_document(partial=True)

        new_name = changes.get("name")
        if new_name and new_name != supplier.get("name"):
            if SupabaseClient.find_one(TABLE, name=new_name):
                raise _duplicate_name(new_name)

        updated = SupabaseClient.update_document(TABLE, supplier_id, changes)
        if not updated:
            raise NotFoundError("Supplier")

        ActivityService.log_activity(
            description=f'Supplier "{updated["name"]}" updated',
            entity_type=EntityType.SUPPLIER,
            entity_id=supplier_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
        )
        return updated

    @staticmethod
    def delete_supplier(supplier_id: str, user: AuthUser) -> None:
        """
        Delete a supplier.

        Raises:
            ApiError: 400 if inventory items or purchase orders still
                reference the supplier
        """
        supplier = SupplierService.get_supplier(supplier_id)

        items = SupabaseClient.count_documents("inventory", supplier=supplier_id)
        if items > 0:
            raise ApiError(
                f"Cannot delete supplier: {items} inventory item(s) reference this supplier",
                status_code=400,
            )

        orders = SupabaseClient.count_documents("purchase_orders", supplier=supplier_id)
        if orders > 0:
            raise ApiError(
                f"Cannot delete supplier: {orders} purchase order(s) reference this supplier",
                status_code=400,
            )

        SupabaseClient.delete_document(TABLE, supplier_id)
        logger.info(f"Deleted supplier: {supplier_id}")

        ActivityService.log_activity(
            description=f'Supplier "{supplier.get("name")}" deleted',
            entity_type=EntityType.SUPPLIER,
            entity_id=supplier_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
        )
