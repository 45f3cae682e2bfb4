# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for document operations
# - utils.py: IDs, timestamps, pagination and list envelopes
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import list_envelope, new_id, normalize_uuid, parse_datetime, utc_now_iso

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "list_envelope",
    "new_id",
    "normalize_uuid",
    "parse_datetime",
    "utc_now_iso",
]
