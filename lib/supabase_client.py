# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a thin document-CRUD wrapper around Supabase tables.
# It implements the singleton pattern to reuse a single client connection
# and exposes generic operations used by every service:
# - insert / fetch_by_id / fetch_many / fetch_one_where
# - update_by_id / delete_by_id / delete_where
#
# The store is the sole source of truth; nothing is cached in-process.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   campground = SupabaseClient.fetch_by_id("campgrounds", campground_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no rows returned" on .single()
NO_ROWS_CODE = "PGRST116"
# Postgres unique_violation
UNIQUE_VIOLATION_CODE = "23505"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a code and an actionable suggestion alongside the message.
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


class DuplicateRecordError(SupabaseClientError):
    """Raised when an insert violates a unique constraint."""

    def __init__(self, table: str, error: str):
        super().__init__(
            message=f"Duplicate record in {table}: {error}",
            code="DUPLICATE_RECORD",
            details={"table": table},
        )


class SupabaseClient:
    """
    Generic CRUD wrapper for Supabase tables.

    One client instance is shared across the application. All methods are
    class methods so services can call them without instantiation.

    Example:
        row = SupabaseClient.insert("reviews", {"text": "Nice", "rating": 5})
        SupabaseClient.delete_by_id("reviews", row["id"])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).

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

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return normalize_uuid(uuid_value)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_by_id(cls, table: str, record_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single row by primary key.

        Returns:
            Row dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        record_id_str = cls._normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", record_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code="FETCH_FAILED",
                suggestion=f"Check that the {table} table is accessible",
                details={"table": table, "id": record_id_str}
            )

    @classmethod
    def fetch_one_where(cls, table: str, column: str, value: Any) -> dict[str, Any] | None:
        """Fetch the first row where column == value, or None."""
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select("*")
                .eq(column, value)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to query {table}: {e}",
                code="FETCH_FAILED",
                details={"table": table, "column": column}
            )

    @classmethod
    def fetch_many(
        cls,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str = "created_at",
        desc: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Fetch all rows matching equality filters.

        Args:
            table: Table name
            filters: Column -> value equality filters
            order_by: Column to sort by
            desc: Sort descending

        Returns:
            List of row dicts (possibly empty)
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("*")
            for column, value in (filters or {}).items():
                query = query.eq(column, cls._normalize_uuid(value))
            response = query.order(order_by, desc=desc).execute()

            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list {table}: {e}",
                code="LIST_FAILED",
                details={"table": table, "filters": filters or {}}
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it with generated id and created_at.

        Raises:
            DuplicateRecordError: If a unique constraint is violated
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table(table).insert(data).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            if UNIQUE_VIOLATION_CODE in str(e):
                raise DuplicateRecordError(table, str(e))
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table}
            )

    @classmethod
    def update_by_id(
        cls,
        table: str,
        record_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a row by id.

        Returns:
            Updated row dict, or None if no row matched
        """
        client = cls.get_client()
        record_id_str = cls._normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .update(data)
                .eq("id", record_id_str)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} row: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": record_id_str}
            )

    @classmethod
    def delete_by_id(cls, table: str, record_id: str | UUID) -> dict[str, Any] | None:
        """
        Delete a row by id.

        Returns:
            The deleted row, or None if nothing matched
        """
        client = cls.get_client()
        record_id_str = cls._normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .delete()
                .eq("id", record_id_str)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {table} row: {e}",
                code="DELETE_FAILED",
                details={"table": table, "id": record_id_str}
            )

    @classmethod
    def delete_where(cls, table: str, column: str, value: Any) -> int:
        """
        Delete all rows where column == value.

        Returns:
            Number of rows deleted
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .delete()
                .eq(column, cls._normalize_uuid(value))
                .execute()
            )
            deleted = len(response.data or [])
            logger.debug(f"Deleted {deleted} rows from {table} where {column}={value}")
            return deleted

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                details={"table": table, "column": column}
            )
