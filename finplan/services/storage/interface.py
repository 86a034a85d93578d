"""
Abstract Storage Interface

DESIGN DECISION: Repositories talk to a small table-oriented interface
instead of a concrete database. This allows us to:
1. Run the same business logic on the embedded SQLite database or on the
   hosted REST backend
2. Use an in-memory database for testing
3. Keep field naming, validation and defaults out of the backends

The interface is intentionally simple - we're not building a full ORM.
Rows are plain dicts keyed by snake_case column name. Backends translate
their native failures into the exceptions defined at the bottom of this
module.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

from finplan.models.audit import AuditEvent
from finplan.models.base import EntityId


Row = dict[str, Any]


class StorageBackend(ABC):
    """
    Abstract interface for table storage.

    Any backend (SQLite, hosted REST, ...) must implement these methods.
    """

    # True when the database itself removes a client's owned rows on
    # client delete. Otherwise the client repository deletes them first.
    cascades_deletes: bool = False

    async def connect(self) -> None:
        """
        Make sure the backend is usable (schema present, host reachable).

        Raises:
            ConnectionError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def fetch_all(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
    ) -> list[Row]:
        """
        Fetch every row matching all equality filters.

        Args:
            table: Table name
            filters: {column: value} equality filters
            order_by: Columns to sort ascending by; the primary key always
                      breaks ties

        Returns:
            Matching rows (empty list if none)
        """
        pass

    @abstractmethod
    async def fetch_one(
        self,
        table: str,
        filters: Mapping[str, Any],
        order_by: Sequence[str] = (),
    ) -> Row:
        """
        Fetch the first row matching all equality filters.

        Raises:
            NotFoundError: If no row matches
        """
        pass

    @abstractmethod
    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        """
        Insert a row.

        Returns:
            The stored row, including the backend-assigned id

        Raises:
            ValidationError: Unknown column or constraint violation
            DuplicateError: Unique constraint violation
        """
        pass

    @abstractmethod
    async def update(
        self,
        table: str,
        record_id: EntityId,
        fields: Mapping[str, Any],
    ) -> Row:
        """
        Write only the given columns of one row.

        Returns:
            The row after the update

        Raises:
            NotFoundError: If no row has this id
        """
        pass

    @abstractmethod
    async def delete(self, table: str, record_id: EntityId) -> bool:
        """
        Delete one row by id.

        Returns:
            True if a row was deleted, False if none had this id
        """
        pass

    @abstractmethod
    async def delete_where(self, table: str, filters: Mapping[str, Any]) -> int:
        """
        Delete every row matching all equality filters.

        Returns:
            Number of rows deleted
        """
        pass

    async def close(self) -> None:
        """Release connections held by the backend."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_client(
        self,
        client_id: EntityId,
    ) -> list[AuditEvent]:
        """
        Get all events concerning one client.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ValidationError(StorageError):
    """Unknown field, bad value, or schema constraint violated."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
