# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Shared Supabase client and error-code helpers
# - utils.py: Shared utilities (UUIDs, storage filenames, compensation log)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import (
    SupabaseClient,
    SupabaseClientError,
    is_not_found,
    is_unique_violation,
)
from lib.utils import (
    CompensationLog,
    file_extension,
    generate_unique_filename,
    storage_key_from_url,
    normalize_uuid,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "is_not_found",
    "is_unique_violation",
    # Utils
    "CompensationLog",
    "file_extension",
    "generate_unique_filename",
    "storage_key_from_url",
    "normalize_uuid",
]
