# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import MediaUpload, StorageService, StoredObject
from .content_service import ContentService
from .admin_console import AdminConsole, ConsoleRegistry, console_registry

__all__ = [
    "MediaUpload",
    "StorageService",
    "StoredObject",
    "ContentService",
    "AdminConsole",
    "ConsoleRegistry",
    "console_registry",
]
