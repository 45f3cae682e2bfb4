# =============================================================================
# core/services/alert_service.py - Inventory Alert Business Logic
# =============================================================================
# Alerts are raised automatically by InventoryService on stock drops, or
# created manually. They are assigned to a user and eventually resolved
# or dismissed.
# =============================================================================

import logging
from collections import Counter
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, resolve_sort, utc_now_iso
from core.models.activity import ActivityAction, EntityType
from core.models.inventory import AlertAssign, AlertCreate, AlertResolve, AlertStatus, AlertUpdate
from core.services.activity_service import ActivityService
from app.auth.models import AuthUser
from app.exceptions import ApiError, InvalidIdError, NotFoundError, require_fields

logger = logging.getLogger(__name__)

TABLE = "inventory_alerts"
SORT_FIELDS = {"createdAt", "updatedAt", "priority", "alertType", "status", "itemName"}

REQUIRED_FIELDS = {
    "item": "Item is required",
    "itemName": "Item name is required",
    "itemSku": "Item SKU is required",
    "alertType": "Alert type is required",
    "description": "Description is required",
}


def _resolution_stamp(user_id: str) -> dict[str, Any]:
    return {"resolvedBy": user_id, "resolvedAt": utc_now_iso()}


class AlertService:
    """Service for inventory alert operations."""

    @staticmethod
    def list_alerts(
        user: AuthUser,
        page: int,
        limit: int,
        status: str | None = None,
        alert_type: str | None = None,
        priority: str | None = None,
        assigned_to: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List alerts, active ones unless `status` says otherwise.

        `assigned_to` accepts "me", "unassigned", "all" or a user ID.
        """
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        status = status or AlertStatus.ACTIVE.value
        if status != "all":
            query = query.eq("status", status)
        if alert_type:
            query = query.eq("alertType", alert_type)
        if priority:
            query = query.eq("priority", priority)

        if assigned_to == "me":
            query = query.eq("assignedTo", user.id)
        elif assigned_to == "unassigned":
            query = query.is_("assignedTo", "null")
        elif assigned_to and assigned_to != "all":
            query = query.eq("assignedTo", assigned_to)

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "createdAt", "desc")
        return SupabaseClient.fetch_page(query, column, descending, page, limit)

    @staticmethod
    def get_alert(alert_id: str) -> dict[str, Any]:
        if not is_valid_id(alert_id):
            raise ApiError("Invalid alert ID", status_code=400)

        alert = SupabaseClient.fetch_document(TABLE, alert_id)
        if not alert:
            raise ApiError("Alert not found", status_code=404)
        return alert

    @staticmethod
    def get_stats() -> dict[str, Any]:
        alerts = SupabaseClient.fetch_all(TABLE)
        active = [a for a in alerts if a.get("status") == AlertStatus.ACTIVE.value]

        return {
            "totalAlerts": len(alerts),
            "activeAlerts": len(active),
            "resolvedAlerts": sum(1 for a in alerts if a.get("status") == AlertStatus.RESOLVED.value),
            "alertsByType": dict(Counter(a.get("alertType") for a in active)),
            "alertsByPriority": dict(Counter(a.get("priority") for a in active)),
        }

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_system_alert(data: dict[str, Any], user_id: str | None = None) -> dict[str, Any]:
        """Store an alert raised by a stock change."""
        document = {"status": AlertStatus.ACTIVE.value, **data}
        if user_id:
            document["createdBy"] = user_id
        return SupabaseClient.insert_document(TABLE, document)

    @staticmethod
    def create_alert(payload: AlertCreate, user: AuthUser) -> dict[str, Any]:
        data = payload.to_document()
        require_fields(data, REQUIRED_FIELDS)

        data["status"] = AlertStatus.ACTIVE.value
        data["createdBy"] = user.id
        alert = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created inventory alert: {alert['id']}")

        ActivityService.log_activity(
            description=f'Alert created for "{alert["itemName"]}" ({alert["itemSku"]})',
            entity_type=EntityType.INVENTORY_ALERT,
            entity_id=alert["id"],
            action=ActivityAction.CREATE,
            user_id=user.id,
            metadata={"alertType": alert["alertType"], "itemId": alert["item"]},
        )
        return alert

    @staticmethod
    def update_alert(alert_id: str, payload: AlertUpdate, user: AuthUser) -> dict[str, Any]:
        alert = AlertService.get_alert(alert_id)
        changes = payload.to_document(partial=True)

        if (
            changes.get("status") == AlertStatus.RESOLVED.value
            and alert.get("status") != AlertStatus.RESOLVED.value
        ):
            changes.update(_resolution_stamp(user.id))

        updated = SupabaseClient.update_document(TABLE, alert_id, changes)
        if not updated:
            raise ApiError("Alert not found", status_code=404)

        ActivityService.log_activity(
            description=f'Alert for "{updated.get("itemName")}" updated',
            entity_type=EntityType.INVENTORY_ALERT,
            entity_id=alert_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
        )
        return updated

    @staticmethod
    def delete_alert(alert_id: str, user: AuthUser) -> None:
        alert = AlertService.get_alert(alert_id)
        SupabaseClient.delete_document(TABLE, alert_id)

        ActivityService.log_activity(
            description=f'Alert for "{alert.get("itemName")}" deleted',
            entity_type=EntityType.INVENTORY_ALERT,
            entity_id=alert_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
        )

    @staticmethod
    def delete_alerts_for_item(item_id: str) -> None:
        SupabaseClient.delete_where(TABLE, "item", item_id)
        logger.debug(f"Deleted alerts for item: {item_id}")

    @staticmethod
    def assign_alert(alert_id: str, payload: AlertAssign, user: AuthUser) -> dict[str, Any]:
        """
        Assign an alert to a user.

        Raises:
            ApiError: 400 without a user ID, 404 for an unknown assignee
        """
        if not payload.user_id:
            raise ApiError("User ID is required", status_code=400)

        alert = AlertService.get_alert(alert_id)

        if not is_valid_id(payload.user_id):
            raise InvalidIdError("user")
        if not SupabaseClient.fetch_document("users", payload.user_id):
            raise NotFoundError("User")

        updated = SupabaseClient.update_document(TABLE, alert_id, {"assignedTo": payload.user_id})
        if not updated:
            raise ApiError("Alert not found", status_code=404)

        ActivityService.log_activity(
            description=f'Alert for "{alert.get("itemName")}" assigned',
            entity_type=EntityType.INVENTORY_ALERT,
            entity_id=alert_id,
            action=ActivityAction.ASSIGN,
            user_id=user.id,
            metadata={"assignedTo": payload.user_id},
        )
        return updated

    @staticmethod
    def resolve_alert(alert_id: str, payload: AlertResolve, user: AuthUser) -> dict[str, Any]:
        alert = AlertService.get_alert(alert_id)

        changes = {
            "status": AlertStatus.RESOLVED.value,
            "resolutionNotes": payload.resolution_notes,
            "purchaseOrderCreated": payload.purchase_order_created,
            **_resolution_stamp(user.id),
        }
        if payload.purchase_order:
            changes["purchaseOrder"] = payload.purchase_order

        updated = SupabaseClient.update_document(TABLE, alert_id, changes)
        if not updated:
            raise ApiError("Alert not found", status_code=404)

        logger.info(f"Resolved inventory alert: {alert_id}")
        ActivityService.log_activity(
            description=f'Alert for "{alert.get("itemName")}" resolved',
            entity_type=EntityType.INVENTORY_ALERT,
            entity_id=alert_id,
            action=ActivityAction.RESOLVE,
            user_id=user.id,
            metadata={"purchaseOrderCreated": payload.purchase_order_created},
        )
        return updated
