"""
Audit Models

Every change to a client's data produces an audit event. Events are
written to the structured log and, when an audit store is configured,
appended to the `audit_events` table.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finplan.models.base import EntityId


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Clients
    CLIENT_CREATED = "client_created"
    CLIENT_UPDATED = "client_updated"
    CLIENT_DELETED = "client_deleted"
    CLIENT_SELECTED = "client_selected"

    # Owned records
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    DEFAULT_RECORD_CREATED = "default_record_created"

    # Export
    CLIENT_DATA_EXPORTED = "client_data_exported"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What the event is about
    entity_type: Optional[str] = Field(
        default=None,
        description="Table name of the affected record (e.g. 'goals')"
    )
    entity_id: Optional[EntityId] = None
    client_id: Optional[EntityId] = Field(
        default=None,
        description="Client that owns the affected record"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id is not None else None,
            "client_id": str(self.client_id) if self.client_id is not None else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_created("goals", goal_id, client_id)
        event = AuditEventBuilder.client_deleted(client_id)
    """

    @staticmethod
    def client_created(client_id: EntityId, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLIENT_CREATED,
            entity_type="clients",
            entity_id=client_id,
            client_id=client_id,
            description=f"Client created: {name}",
        )

    @staticmethod
    def client_updated(client_id: EntityId, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLIENT_UPDATED,
            entity_type="clients",
            entity_id=client_id,
            client_id=client_id,
            description=f"Client updated ({len(fields)} fields)",
            details={"fields": fields},
        )

    @staticmethod
    def client_deleted(client_id: EntityId, cascaded: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLIENT_DELETED,
            severity=AuditSeverity.WARNING,
            entity_type="clients",
            entity_id=client_id,
            client_id=client_id,
            description="Client deleted",
            details={"cascaded_rows": cascaded},
        )

    @staticmethod
    def client_selected(client_id: Optional[EntityId]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLIENT_SELECTED,
            severity=AuditSeverity.DEBUG,
            entity_type="clients",
            entity_id=client_id,
            client_id=client_id,
            description="Client selected" if client_id is not None else "Client selection cleared",
        )

    @staticmethod
    def record_created(
        table: str,
        record_id: EntityId,
        client_id: Optional[EntityId],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            entity_type=table,
            entity_id=record_id,
            client_id=client_id,
            description=f"Record created in {table}",
        )

    @staticmethod
    def default_record_created(
        table: str,
        record_id: EntityId,
        client_id: EntityId,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEFAULT_RECORD_CREATED,
            entity_type=table,
            entity_id=record_id,
            client_id=client_id,
            description=f"Default {table} record created on first read",
        )

    @staticmethod
    def record_updated(
        table: str,
        record_id: EntityId,
        fields: list[str],
        client_id: Optional[EntityId] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=table,
            entity_id=record_id,
            client_id=client_id,
            description=f"Record updated in {table} ({len(fields)} fields)",
            details={"fields": fields},
        )

    @staticmethod
    def record_deleted(table: str, record_id: EntityId, found: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=table,
            entity_id=record_id,
            description=(
                f"Record deleted from {table}"
                if found
                else f"Delete from {table} matched no row"
            ),
            details={"found": found},
        )

    @staticmethod
    def client_data_exported(client_id: EntityId, size_bytes: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLIENT_DATA_EXPORTED,
            entity_type="clients",
            entity_id=client_id,
            client_id=client_id,
            description="Client data exported",
            details={"size_bytes": size_bytes},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        table: Optional[str] = None,
        client_id: Optional[EntityId] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type=table,
            client_id=client_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
