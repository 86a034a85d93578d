"""
Services package.

Storage backends and the field map are re-exported here. Repositories,
the net-worth calculator and the exporter are imported from their modules.
"""

from finplan.services.field_map import FieldMap
from finplan.services.storage import (
    AuditStorageInterface,
    BackendAuditStorage,
    ConnectionError,
    DuplicateError,
    NotFoundError,
    RestBackend,
    SqliteBackend,
    StorageBackend,
    StorageError,
    ValidationError,
)

__all__ = [
    "FieldMap",
    # Storage services
    "AuditStorageInterface",
    "BackendAuditStorage",
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "RestBackend",
    "SqliteBackend",
    "StorageBackend",
    "StorageError",
    "ValidationError",
]
