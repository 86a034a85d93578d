"""
Audit log storage on top of any table backend.

Events are appended to the `audit_events` table, one row per event, using
the same flat string representation that goes to the structured log.
"""

from finplan.models.audit import AuditEvent
from finplan.models.base import EntityId
from finplan.models.tables import AUDIT_TABLE
from finplan.services.storage.interface import AuditStorageInterface, StorageBackend


class BackendAuditStorage(AuditStorageInterface):
    """Append-only audit storage in the `audit_events` table."""

    def __init__(self, backend: StorageBackend):
        self._backend = backend

    async def append_event(self, event: AuditEvent) -> bool:
        await self._backend.insert(AUDIT_TABLE, event.to_log_dict())
        return True

    async def get_events_by_client(self, client_id: EntityId) -> list[AuditEvent]:
        rows = await self._backend.fetch_all(
            AUDIT_TABLE,
            {"client_id": str(client_id)},
            order_by=("timestamp",),
        )
        return [AuditEvent.model_validate(row) for row in rows]

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        rows = await self._backend.fetch_all(AUDIT_TABLE, order_by=("timestamp",))
        newest_first = list(reversed(rows))[:limit]
        return [AuditEvent.model_validate(row) for row in newest_first]
