# =============================================================================
# core/services/shipment_service.py - Shipment Business Logic
# =============================================================================
# Shipment CRUD with a tracking history and attached documents.
#
# Every status change appends a tracking event:
#   {"status": "in-transit", "timestamp": "...", "location": "...", "description": "..."}
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, new_id, resolve_sort, utc_now_iso
from core.models.activity import ActivityAction, EntityType
from core.models.base import AttachedDocument
from core.models.shipment import ShipmentCreate, ShipmentStatus, ShipmentUpdate
from core.services.activity_service import ActivityService
from core.services.storage_service import StorageService
from app.auth.models import AuthUser
from app.exceptions import ApiError, InvalidIdError, NotFoundError, StorageError, require_fields

logger = logging.getLogger(__name__)

TABLE = "shipments"
SORT_FIELDS = {
    "shipmentNumber", "status", "type", "courier", "createdAt", "updatedAt",
    "shippedDate", "estimatedDeliveryDate", "actualDeliveryDate",
}

REQUIRED_FIELDS = {
    "shipmentNumber": "Shipment number is required",
    "type": "Shipment type is required",
    "courier": "Courier is required",
    "origin": "Origin address is required",
    "destination": "Destination address is required",
}


def _duplicate_number(number: str) -> ApiError:
    return ApiError(f'Shipment with number "{number}" already exists', status_code=400)


def tracking_event(
    status: str,
    location: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    event: dict[str, Any] = {"status": status, "timestamp": utc_now_iso()}
    if location:
        event["location"] = location
    if description:
        event["description"] = description
    return event


class ShipmentService:
    """Service for shipment operations."""

    @staticmethod
    def list_shipments(
        page: int,
        limit: int,
        search: str | None = None,
        status: str | None = None,
        shipment_type: str | None = None,
        courier: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if search:
            clause = SupabaseClient.search_clause(search, ["shipmentNumber", "trackingNumber", "courier"])
            if clause:
                query = query.or_(clause)
        if status:
            query = query.eq("status", status)
        if shipment_type:
            query = query.eq("type", shipment_type)
        if courier:
            query = query.eq("courier", courier)
        if from_date:
            query = query.gte("createdAt", from_date)
        if to_date:
            query = query.lte("createdAt", to_date)

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "createdAt", "desc")
        return SupabaseClient.fetch_page(query, column, descending, page, limit)

    @staticmethod
    def get_shipment(shipment_id: str) -> dict[str, Any]:
        if not is_valid_id(shipment_id):
            raise InvalidIdError("shipment")

        shipment = SupabaseClient.fetch_document(TABLE, shipment_id)
        if not shipment:
            raise NotFoundError("Shipment")
        return shipment

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_shipment(payload: ShipmentCreate, user: AuthUser) -> dict[str, Any]:
        data = payload.to_document()
        require_fields(data, REQUIRED_FIELDS)

        if SupabaseClient.find_one(TABLE, shipmentNumber=data["shipmentNumber"]):
            raise _duplicate_number(data["shipmentNumber"])

        data["documents"] = []
        data["trackingHistory"] = [tracking_event(data["status"], description="Shipment created")]
        data["createdBy"] = user.id

        shipment = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created shipment: {shipment['id']} ({shipment['shipmentNumber']})")

        ActivityService.log_activity(
            description=f'Shipment "{shipment["shipmentNumber"]}" created',
            entity_type=EntityType.SHIPMENT,
            entity_id=shipment["id"],
            action=ActivityAction.CREATE,
            user_id=user.id,
            metadata={"type": shipment["type"], "courier": shipment["courier"]},
        )
        return shipment

    @staticmethod
    def update_shipment(shipment_id: str, payload: ShipmentUpdate, user: AuthUser) -> dict[str, Any]:
        """
        Update a shipment; a status change also records a tracking event.

        `location` and `statusNote` in the body only describe that event.
        """
        shipment = ShipmentService.get_shipment(shipment_id)

        changes = payload.to_document(partial=True)
        location = changes.pop("location", None)
        status_note = changes.pop("statusNote", None)

        new_number = changes.get("shipmentNumber")
        if new_number and new_number != shipment.get("shipmentNumber"):
            if SupabaseClient.find_one(TABLE, shipmentNumber=new_number):
                raise _duplicate_number(new_number)

        old_status = shipment.get("status")
        new_status = changes.get("status")
        status_changed = bool(new_status) and new_status != old_status

        if status_changed:
            history = list(shipment.get("trackingHistory") or [])
            history.append(tracking_event(new_status, location, status_note))
            changes["trackingHistory"] = history

            if new_status == ShipmentStatus.IN_TRANSIT.value and not shipment.get("shippedDate"):
                changes.setdefault("shippedDate", utc_now_iso())
            if new_status == ShipmentStatus.DELIVERED.value:
                changes.setdefault("actualDeliveryDate", utc_now_iso())

        updated = SupabaseClient.update_document(TABLE, shipment_id, changes)
        if not updated:
            raise NotFoundError("Shipment")

        if status_changed:
            ActivityService.log_activity(
                description=(
                    f'Shipment "{updated["shipmentNumber"]}" status changed '
                    f"from {old_status} to {new_status}"
                ),
                entity_type=EntityType.SHIPMENT,
                entity_id=shipment_id,
                action=ActivityAction.STATUS_CHANGE,
                user_id=user.id,
                metadata={"oldStatus": old_status, "newStatus": new_status},
            )
        else:
            ActivityService.log_activity(
                description=f'Shipment "{updated["shipmentNumber"]}" updated',
                entity_type=EntityType.SHIPMENT,
                entity_id=shipment_id,
                action=ActivityAction.UPDATE,
                user_id=user.id,
            )
        return updated

    @staticmethod
    def delete_shipment(shipment_id: str, user: AuthUser) -> None:
        shipment = ShipmentService.get_shipment(shipment_id)
        SupabaseClient.delete_document(TABLE, shipment_id)
        logger.info(f"Deleted shipment: {shipment_id}")

        ActivityService.log_activity(
            description=f'Shipment "{shipment.get("shipmentNumber")}" deleted',
            entity_type=EntityType.SHIPMENT,
            entity_id=shipment_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
        )

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    @staticmethod
    def list_documents(shipment_id: str) -> list[dict[str, Any]]:
        return ShipmentService.get_shipment(shipment_id).get("documents") or []

    @staticmethod
    def add_document(shipment_id: str, payload: AttachedDocument, user: AuthUser) -> dict[str, Any]:
        if not (payload.title and payload.file_url and payload.file_type):
            raise ApiError("Title, file URL, and file type are required fields", status_code=400)

        shipment = ShipmentService.get_shipment(shipment_id)

        document = {
            "id": new_id(),
            "title": payload.title,
            "fileUrl": payload.file_url,
            "fileType": payload.file_type,
            "category": payload.category or "other",
            "uploadedBy": user.id,
            "uploadedAt": utc_now_iso(),
        }
        documents = [*(shipment.get("documents") or []), document]
        SupabaseClient.update_document(TABLE, shipment_id, {"documents": documents})

        ActivityService.log_activity(
            description=f'Document "{document["title"]}" added to shipment "{shipment.get("shipmentNumber")}"',
            entity_type=EntityType.SHIPMENT,
            entity_id=shipment_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
            metadata={"documentId": document["id"]},
        )
        return document

    @staticmethod
    def remove_document(shipment_id: str, document_id: str, user: AuthUser) -> None:
        """
        Detach a document and delete its file from storage.

        A storage failure is logged; the document is still detached.
        """
        shipment = ShipmentService.get_shipment(shipment_id)
        documents = shipment.get("documents") or []
        if not documents:
            raise ApiError("No documents found for this shipment", status_code=404)

        document = next((doc for doc in documents if doc.get("id") == document_id), None)
        if document is None:
            raise ApiError("Document not found in this shipment", status_code=404)

        path = StorageService.path_from_url(document.get("fileUrl", ""))
        if path:
            try:
                StorageService.delete_file(path)
            except StorageError as e:
                logger.warning(f"Keeping orphaned file {path} for shipment {shipment_id}: {e.detail}")

        remaining = [doc for doc in documents if doc.get("id") != document_id]
        SupabaseClient.update_document(TABLE, shipment_id, {"documents": remaining})

        ActivityService.log_activity(
            description=f'Document "{document.get("title")}" removed from shipment "{shipment.get("shipmentNumber")}"',
            entity_type=EntityType.SHIPMENT,
            entity_id=shipment_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
            metadata={"documentId": document_id},
        )
