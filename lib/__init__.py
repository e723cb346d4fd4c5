# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase implementation of the backend interfaces
# - utils.py: Shared utilities (error base class, id normalization)
#
# supabase_client is imported directly by callers; it depends on core/ and
# pulling it in here would make `import core.backend` circular.
# =============================================================================

from lib.utils import ApplicationError, normalize_uuid

__all__ = [
    "ApplicationError",
    "normalize_uuid",
]
