# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the connection to the hosted backend (Postgres tables via
# PostgREST, plus Storage). One client instance is shared across the
# application and created lazily on first use.
#
# If SUPABASE_URL or SUPABASE_ANON_KEY is missing the failure is logged and
# every call raises SupabaseClientError; the service layer turns that into its
# usual "empty"/None results.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   rows = client.table("tags").select("*").execute().data
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NOT_FOUND_CODE = "PGRST116"

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION_CODE = "23505"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a machine-readable code and a suggestion on how to fix it.
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
    Shared Supabase client.

    All methods are class methods; nothing needs to be instantiated.

    Example:
        client = SupabaseClient.get_client()
        response = client.table("artworks").select("*").execute()
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the shared Supabase client.

        Uses the service_role key when configured, otherwise the anon key.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If configuration is missing or creation fails
        """
        if cls._instance is None:
            if not settings.supabase_configured:
                logger.error(
                    "Supabase URL and/or anonymous key are missing. "
                    "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
                )
                raise SupabaseClientError(
                    message="Supabase is not configured",
                    code="CLIENT_NOT_CONFIGURED",
                    suggestion="Set SUPABASE_URL and SUPABASE_ANON_KEY in your .env file",
                )
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.supabase_write_key,
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file",
                )
        return cls._instance

    @classmethod
    def create_anon_client(cls) -> Client:
        """
        Create a fresh client bound to the anon key.

        Used for Supabase Auth calls, which store the signed-in session on the
        client object. A new client per call keeps sessions out of shared state.
        """
        if not settings.supabase_configured:
            raise SupabaseClientError(
                message="Supabase is not configured",
                code="CLIENT_NOT_CONFIGURED",
                suggestion="Set SUPABASE_URL and SUPABASE_ANON_KEY in your .env file",
            )
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)

    @classmethod
    def set_client(cls, client: Client | None) -> None:
        """Replace the shared client (None forces re-creation on next use)."""
        cls._instance = client


def error_code(error: Exception) -> str | None:
    """Return the PostgREST/Postgres error code carried by an exception, if any."""
    code = getattr(error, "code", None)
    return str(code) if code is not None else None


def is_not_found(error: Exception) -> bool:
    """True for the "no rows" error raised by .single()."""
    return error_code(error) == NOT_FOUND_CODE or NOT_FOUND_CODE in str(error)


def is_unique_violation(error: Exception) -> bool:
    """True when an insert was rejected by a unique constraint."""
    return error_code(error) == UNIQUE_VIOLATION_CODE or UNIQUE_VIOLATION_CODE in str(error)
