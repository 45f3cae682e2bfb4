# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for document store operations.
# It implements the singleton pattern to reuse a single client connection
# and provides generic document helpers used by every service:
# - Fetch one document by ID or by field values
# - Count documents
# - Insert / update / delete with id and timestamp stamping
#
# Each entity lives in its own table; rows are JSON documents with
# camelCase keys (nested structures are JSON columns).
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   item = SupabaseClient.fetch_document("inventory", item_id)
# =============================================================================

from __future__ import annotations

import logging
import re
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import new_id, normalize_uuid, page_range, utc_now_iso

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed, and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for document store operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        # Insert a document (id, createdAt, updatedAt are stamped)
        task = SupabaseClient.insert_document("tasks", {"title": "Call supplier"})

        # Fetch it back
        task = SupabaseClient.fetch_document("tasks", task["id"])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_document(cls, table: str, doc_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single document by ID.

        Args:
            table: Table (collection) name
            doc_id: Document UUID

        Returns:
            Document dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        doc_id_str = normalize_uuid(doc_id)

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", doc_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if "PGRST116" in str(e):  # PostgREST code for no rows
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} document: {e}",
                code="FETCH_DOCUMENT_FAILED",
                suggestion=f"Check that the {table} table is accessible",
                details={"table": table, "id": doc_id_str}
            )

    @classmethod
    def find_one(cls, table: str, **filters: Any) -> dict[str, Any] | None:
        """
        Fetch the first document whose fields equal the given values.

        Example:
            user = SupabaseClient.find_one("users", email="a@b.com")
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("*")
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.limit(1).execute()

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to query {table}: {e}",
                code="FIND_FAILED",
                details={"table": table, "filters": filters}
            )

        rows = response.data or []
        return rows[0] if rows else None

    @classmethod
    def count_documents(cls, table: str, **filters: Any) -> int:
        """
        Count documents whose fields equal the given values.

        Example:
            active = SupabaseClient.count_documents("users", isActive=True)
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("id", count="exact")
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.execute()

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count {table}: {e}",
                code="COUNT_FAILED",
                details={"table": table, "filters": filters}
            )

        return response.count or 0

    @classmethod
    def fetch_all(cls, table: str, columns: str = "*") -> list[dict[str, Any]]:
        """Fetch every document in a table (used by stats and analytics)."""
        client = cls.get_client()

        try:
            response = client.table(table).select(columns).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {table}: {e}",
                code="FETCH_ALL_FAILED",
                details={"table": table}
            )

        return response.data or []

    @classmethod
    def fetch_page(
        cls,
        query: Any,
        sort_by: str,
        descending: bool,
        page: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Sort and paginate a prepared query.

        The query must have been built with `select("*", count="exact")`
        so the total number of matches comes back with the page.

        Returns:
            Tuple of (documents on this page, total matches)
        """
        start, end = page_range(page, limit)

        try:
            response = (
                query.order(sort_by, desc=descending)
                .range(start, end)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list documents: {e}",
                code="LIST_FAILED",
                suggestion="Check the filter and sort parameters",
                details={"sort_by": sort_by, "page": page, "limit": limit}
            )

        return response.data or [], response.count or 0

    @staticmethod
    def search_clause(term: str, columns: list[str]) -> str | None:
        """
        Build a PostgREST `or` filter matching `term` in any of `columns`.

        Nested JSON fields use the `->>` path syntax, e.g.
        "primaryContact->>email".

        Returns:
            Filter string for `.or_()`, or None if the term is blank
        """
        cleaned = re.sub(r"[,()*%\\]", " ", term).strip()
        if not cleaned:
            return None
        return ",".join(f"{column}.ilike.*{cleaned}*" for column in columns)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert_document(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a document, stamping id, createdAt and updatedAt.

        Returns:
            The stored document

        Raises:
            SupabaseClientError: If the insert fails or returns nothing
        """
        client = cls.get_client()
        now = utc_now_iso()
        document = {"id": new_id(), "createdAt": now, "updatedAt": now, **data}

        try:
            response = client.table(table).insert(document).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table}
            )

        if not response.data:
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_FAILED",
                details={"table": table}
            )

        return response.data[0]

    @classmethod
    def update_document(
        cls,
        table: str,
        doc_id: str | UUID,
        changes: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Apply a partial update to one document, stamping updatedAt.

        Returns:
            The updated document, or None if it no longer exists
        """
        client = cls.get_client()
        doc_id_str = normalize_uuid(doc_id)
        changes = {**changes, "updatedAt": utc_now_iso()}

        try:
            response = (
                client.table(table)
                .update(changes)
                .eq("id", doc_id_str)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} document: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": doc_id_str}
            )

        rows = response.data or []
        return rows[0] if rows else None

    @classmethod
    def delete_document(cls, table: str, doc_id: str | UUID) -> None:
        """Delete one document by ID."""
        cls.delete_where(table, "id", normalize_uuid(doc_id))

    @classmethod
    def delete_where(cls, table: str, column: str, value: Any) -> None:
        """Delete every document whose `column` equals `value`."""
        client = cls.get_client()

        try:
            client.table(table).delete().eq(column, value).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                details={"table": table, column: value}
            )
