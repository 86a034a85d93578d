"""
Storage Services Package

Provides the abstract table interface and two implementations:
an embedded SQLite database and a hosted PostgREST backend.
"""

from finplan.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    NotFoundError,
    Row,
    StorageBackend,
    StorageError,
    ValidationError,
)
from finplan.services.storage.audit import BackendAuditStorage
from finplan.services.storage.rest import RestBackend
from finplan.services.storage.sqlite import SqliteBackend, build_metadata

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "Row",
    "StorageBackend",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
    # Implementations
    "BackendAuditStorage",
    "RestBackend",
    "SqliteBackend",
    "build_metadata",
]
