"""
Audit Logger

DESIGN DECISION: Every change to a client's data is logged.
This provides:
1. Traceability of who-changed-what for advisor and client roles
2. Debugging capability

The audit logger:
- Always writes to the structured local log
- Optionally appends to an audit store (the `audit_events` table)
- Gracefully handles failures (a failed audit write never fails the
  operation that produced it)
"""

import logging
import sys
from typing import Optional

import structlog

from finplan.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finplan.models.base import EntityId
from finplan.services.storage import AuditStorageInterface


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Call once at application start (create_app_components does this).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, if one is configured (for persistence)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("finplan.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_client_created(self, client_id: EntityId, name: str) -> None:
        await self.log(AuditEventBuilder.client_created(client_id, name))

    async def log_client_updated(self, client_id: EntityId, fields: list[str]) -> None:
        await self.log(AuditEventBuilder.client_updated(client_id, fields))

    async def log_client_deleted(
        self,
        client_id: EntityId,
        cascaded: dict[str, int],
    ) -> None:
        await self.log(AuditEventBuilder.client_deleted(client_id, cascaded))

    async def log_client_selected(self, client_id: Optional[EntityId]) -> None:
        await self.log(AuditEventBuilder.client_selected(client_id))

    async def log_record_created(
        self,
        table: str,
        record_id: EntityId,
        client_id: Optional[EntityId],
    ) -> None:
        await self.log(AuditEventBuilder.record_created(table, record_id, client_id))

    async def log_default_record_created(
        self,
        table: str,
        record_id: EntityId,
        client_id: EntityId,
    ) -> None:
        """Log the automatic creation of a single record on first read."""
        await self.log(
            AuditEventBuilder.default_record_created(table, record_id, client_id)
        )

    async def log_record_updated(
        self,
        table: str,
        record_id: EntityId,
        fields: list[str],
        client_id: Optional[EntityId] = None,
    ) -> None:
        await self.log(
            AuditEventBuilder.record_updated(table, record_id, fields, client_id)
        )

    async def log_record_deleted(
        self,
        table: str,
        record_id: EntityId,
        found: bool,
    ) -> None:
        await self.log(AuditEventBuilder.record_deleted(table, record_id, found))

    async def log_client_data_exported(
        self,
        client_id: EntityId,
        size_bytes: int,
    ) -> None:
        await self.log(AuditEventBuilder.client_data_exported(client_id, size_bytes))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        table: Optional[str] = None,
        client_id: Optional[EntityId] = None,
    ) -> None:
        """Log a failed storage operation. The error itself still propagates."""
        await self.log(
            AuditEventBuilder.storage_error(
                operation=operation,
                error_message=error_message,
                table=table,
                client_id=client_id,
            )
        )
