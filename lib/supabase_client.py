# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides small generic helpers over PostgREST tables:
# - fetch_one / fetch_many: select rows by column equality
# - insert_row / update_rows / delete_rows: single-statement writes
#
# Services join related rows themselves (one query per relation), which keeps
# every query a plain table read.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   pet = SupabaseClient.fetch_one("pets", "id", pet_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# Postgres unique_violation, surfaced by PostgREST in the error payload
UNIQUE_VIOLATION = "23505"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: tells HOW to fix, not just WHAT failed.
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

    @property
    def is_unique_violation(self) -> bool:
        return UNIQUE_VIOLATION in self.message


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        user = SupabaseClient.fetch_one("users", "email", "sarah@pawsync.demo")
        tasks = SupabaseClient.fetch_many(
            "homework_tasks",
            filters={"pet_id": pet_id},
            order_by="created_at",
            desc=True,
        )
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS);
        authorization is enforced by the API layer.

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
    def _normalize_uuid(cls, uuid_value: Any) -> Any:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        column: str,
        value: Any,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch the first row where `column` equals `value`.

        Args:
            table: Table name
            column: Column to match exactly
            value: Value to match (UUIDs are stringified)
            columns: PostgREST select list

        Returns:
            Row dict, or None if no row matches

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        value = cls._normalize_uuid(value)

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq(column, value)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                suggestion=f"Check that the {table} table is accessible",
                details={"table": table, column: value},
            )

    @classmethod
    def fetch_many(
        cls,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        in_filter: tuple[str, list[Any]] | None = None,
        order_by: str | None = None,
        desc: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows matching all equality filters.

        Args:
            table: Table name
            filters: Column -> value equality filters (ANDed)
            columns: PostgREST select list
            in_filter: Optional (column, values) membership filter
            order_by: Optional column to sort by
            desc: Sort descending
            limit: Optional max rows

        Returns:
            List of row dicts (empty if none)

        Raises:
            SupabaseClientError: If query fails
        """
        if in_filter is not None and not in_filter[1]:
            return []

        client = cls.get_client()

        try:
            query = client.table(table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, cls._normalize_uuid(value))
            if in_filter is not None:
                column, values = in_filter
                query = query.in_(column, [cls._normalize_uuid(v) for v in values])
            if order_by:
                query = query.order(order_by, desc=desc)
            if limit:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                suggestion=f"Check that the {table} table is accessible",
                details={"table": table, "filters": {k: str(v) for k, v in (filters or {}).items()}},
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert_row(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row and return it with generated id and timestamps.

        Raises:
            SupabaseClientError: If insert fails (is_unique_violation tells
                duplicate-key failures apart)
        """
        client = cls.get_client()
        data = {k: cls._normalize_uuid(v) for k, v in data.items()}

        try:
            response = client.table(table).insert(data).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table},
            )

    @classmethod
    def update_rows(
        cls,
        table: str,
        data: dict[str, Any],
        column: str,
        value: Any,
    ) -> list[dict[str, Any]]:
        """
        Update rows where `column` equals `value`.

        Returns:
            The updated rows (empty if nothing matched)

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        data = {k: cls._normalize_uuid(v) for k, v in data.items()}

        try:
            response = (
                client.table(table)
                .update(data)
                .eq(column, cls._normalize_uuid(value))
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code="UPDATE_FAILED",
                details={"table": table, column: str(value)},
            )

    @classmethod
    def delete_rows(cls, table: str, column: str, value: Any) -> int:
        """
        Delete rows where `column` equals `value`.

        Returns:
            Number of deleted rows

        Raises:
            SupabaseClientError: If delete fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .delete()
                .eq(column, cls._normalize_uuid(value))
                .execute()
            )
            return len(response.data or [])

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                details={"table": table, column: str(value)},
            )
