# =============================================================================
# core/services/system_status_service.py - System Component Health
# =============================================================================
# Tracks the health of the platform's components for the dashboard.
# One row per component in the `system_status` table, keyed by name.
# =============================================================================

import logging
import time
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.activity import ActivityAction, ComponentStatus, EntityType
from core.services.activity_service import ActivityService
from app.exceptions import ApiError

logger = logging.getLogger(__name__)

TABLE = "system_status"

DEFAULT_COMPONENTS = [
    {"name": "API Service", "description": "Core API functionality"},
    {"name": "Authentication", "description": "User authentication and authorization"},
    {"name": "Database", "description": "Document store"},
    {"name": "File Storage", "description": "Uploaded documents and images"},
    {"name": "Notifications", "description": "User notifications and alerts"},
]


class SystemStatusService:
    """Service for system component status."""

    @staticmethod
    def initialize_system_components() -> int:
        """
        Insert any missing default components as operational.

        Safe to call repeatedly.

        Returns:
            Number of components created
        """
        created = 0
        try:
            existing = {row.get("name") for row in SupabaseClient.fetch_all(TABLE, "name")}
            for component in DEFAULT_COMPONENTS:
                if component["name"] in existing:
                    continue
                SupabaseClient.insert_document(TABLE, {
                    **component,
                    "status": ComponentStatus.OPERATIONAL.value,
                    "metrics": {},
                    "lastChecked": utc_now_iso(),
                })
                created += 1
        except Exception as e:
            logger.error(f"Failed to initialize system components: {e}")
            return created

        if created:
            logger.info(f"Initialized {created} system component(s)")
        return created

    @staticmethod
    def update_component_status(
        name: str,
        status: ComponentStatus | str,
        description: str | None = None,
        metrics: dict[str, Any] | None = None,
        user_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Set a component's status.

        Raises:
            ApiError: 404 for an unknown component
        """
        component = SupabaseClient.find_one(TABLE, name=name)
        if not component:
            raise ApiError("System component not found", status_code=404)

        new_status = ComponentStatus(status).value
        changes: dict[str, Any] = {"status": new_status, "lastChecked": utc_now_iso()}
        if description is not None:
            changes["description"] = description
        if metrics is not None:
            changes["metrics"] = {**(component.get("metrics") or {}), **metrics}

        updated = SupabaseClient.update_document(TABLE, component["id"], changes) or component

        old_status = component.get("status")
        if user_id and old_status != new_status:
            ActivityService.log_activity(
                description=f'System component "{name}" status changed from {old_status} to {new_status}',
                entity_type=EntityType.SYSTEM,
                entity_id=component["id"],
                action=ActivityAction.STATUS_CHANGE,
                user_id=user_id,
                metadata={"component": name, "oldStatus": old_status, "newStatus": new_status},
            )
        return updated

    @staticmethod
    def check_database_health() -> bool:
        """
        Probe the document store and record the result on "Database".

        Returns:
            True if the probe query succeeded
        """
        started = time.perf_counter()
        try:
            client = SupabaseClient.get_client()
            client.table("users").select("id").limit(1).execute()
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            SystemStatusService.update_component_status(
                "Database",
                ComponentStatus.OUTAGE,
                description="Database connection failed",
                metrics={"error": str(e)},
            )
            return False

        response_time = round((time.perf_counter() - started) * 1000)
        SystemStatusService.update_component_status(
            "Database",
            ComponentStatus.OPERATIONAL,
            description=f"Response time: {response_time}ms",
            metrics={"responseTime": response_time},
        )
        return True

    @staticmethod
    def get_all_component_status() -> list[dict[str, Any]]:
        components = SupabaseClient.fetch_all(TABLE)
        return sorted(components, key=lambda c: c.get("name") or "")
