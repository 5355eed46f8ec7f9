# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Generic Supabase CRUD wrapper (singleton client)
# - utils.py: Shared utilities (UUID normalization, nested form parsing)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError, DuplicateRecordError
from lib.utils import normalize_uuid, extract_form_group, sanitize_form_keys

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "DuplicateRecordError",
    # Utils
    "normalize_uuid",
    "extract_form_group",
    "sanitize_form_keys",
]
