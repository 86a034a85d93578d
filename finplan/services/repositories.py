"""
Entity Repositories

One generic repository per access pattern, instantiated per entity:
- ListRepository: any number of rows per client
- SingleRecordRepository: at most one row per client, created with
  defaults on first read
- ClientRepository: the clients themselves, with cascade delete

DESIGN DECISION: Repositories never retry. Storage errors are audited and
propagate to the caller unchanged.

KNOWN LIMITATIONS (accepted, not engineered around):
- Two concurrent first reads of the same single record can both miss
  and both insert a default row. Reads then return the oldest row.
- Updates are last-writer-wins; there is no version check.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Generic, Mapping, Optional, TypeVar, Union

import structlog

from finplan.audit import AuditLogger
from finplan.models.base import ClientOwnedRecord, EntityId
from finplan.models.client import Client
from finplan.models.tables import CLIENTS_TABLE, OWNED_TABLES, EntityKind, EntityTable
from finplan.services.field_map import FieldMap
from finplan.services.storage import NotFoundError, StorageBackend, StorageError


logger = structlog.get_logger(__name__)

R = TypeVar("R")
T = TypeVar("T", bound=ClientOwnedRecord)


class _Repository:
    """Shared plumbing: backend, field map, audit trail."""

    def __init__(
        self,
        backend: StorageBackend,
        table: str,
        fields: FieldMap,
        order_by: tuple[str, ...],
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._fields = fields
        self._order_by = order_by
        self._audit = audit_logger or AuditLogger()
        self.table = table

    @property
    def model(self):
        return self._fields.model

    async def _run(
        self,
        operation: str,
        call: Awaitable[R],
        client_id: Optional[EntityId] = None,
    ) -> R:
        """Await a backend call, auditing failures before re-raising them."""
        try:
            return await call
        except NotFoundError:
            raise
        except StorageError as e:
            await self._audit.log_storage_error(
                operation=operation,
                error_message=str(e),
                table=self.table,
                client_id=client_id,
            )
            raise


# =============================================================================
# LIST ENTITIES
# =============================================================================

class ListRepository(_Repository, Generic[T]):
    """
    Repository for list entities (goals, bank accounts, liabilities, ...).

    Usage:
        goals = ListRepository(backend, TABLES_BY_NAME["goals"])
        goal_id = await goals.create({"clientId": 1, "description": "Car", "targetYear": 3})
        await goals.update(goal_id, {"estimatedCost": 25000})
    """

    def __init__(
        self,
        backend: StorageBackend,
        entity: EntityTable,
        audit_logger: Optional[AuditLogger] = None,
    ):
        if entity.kind != EntityKind.LIST:
            raise ValueError(f"{entity.name} is not a list entity")
        super().__init__(
            backend,
            entity.name,
            FieldMap(entity.model),
            entity.order_by,
            audit_logger,
        )

    async def get_by_client_id(self, client_id: EntityId) -> list[T]:
        """All rows of one client in display order (empty list if none)."""
        rows = await self._run(
            "get_by_client_id",
            self._backend.fetch_all(self.table, {"client_id": client_id}, self._order_by),
            client_id,
        )
        return [self._fields.from_row(row) for row in rows]

    async def create(self, item: Union[T, Mapping[str, Any]]) -> EntityId:
        """
        Insert a new row.

        Args:
            item: Model instance, or mapping in camelCase or snake_case

        Returns:
            The id assigned by the backend

        Raises:
            ValidationError: Missing required fields or invalid values
        """
        record = self._fields.coerce(item)
        row = await self._run(
            "create",
            self._backend.insert(self.table, self._fields.to_row(record)),
            record.client_id,
        )
        created = self._fields.from_row(row)

        await self._audit.log_record_created(self.table, created.id, created.client_id)
        return created.id

    async def update(self, record_id: EntityId, fields: Mapping[str, Any]) -> bool:
        """
        Write only the given fields; everything else is left as stored.

        Raises:
            ValidationError: Unknown field or invalid value
            NotFoundError: No row with this id
        """
        columns = self._fields.to_columns(fields)
        row = await self._run(
            "update",
            self._backend.update(self.table, record_id, columns),
        )

        await self._audit.log_record_updated(
            self.table, record_id, list(columns), row.get("client_id")
        )
        return True

    async def delete(self, record_id: EntityId) -> bool:
        """
        Delete one row.

        Returns:
            True if the row existed, False if there was nothing to delete
        """
        found = await self._run("delete", self._backend.delete(self.table, record_id))
        await self._audit.log_record_deleted(self.table, record_id, found)
        return found


# =============================================================================
# SINGLE-RECORD ENTITIES
# =============================================================================

class SingleRecordRepository(_Repository, Generic[T]):
    """
    Repository for per-client questionnaires (housing, budget, pension, ...).

    Reads never report "not found" for an existing client: the first read
    creates a row holding the model defaults.
    """

    def __init__(
        self,
        backend: StorageBackend,
        entity: EntityTable,
        audit_logger: Optional[AuditLogger] = None,
    ):
        if entity.kind != EntityKind.SINGLE_RECORD:
            raise ValueError(f"{entity.name} is not a single-record entity")
        super().__init__(
            backend,
            entity.name,
            FieldMap(entity.model),
            entity.order_by,
            audit_logger,
        )

    async def find_by_client_id(self, client_id: EntityId) -> Optional[T]:
        """The client's row, or None if it was never created."""
        try:
            row = await self._run(
                "find_by_client_id",
                self._backend.fetch_one(self.table, {"client_id": client_id}, self._order_by),
                client_id,
            )
        except NotFoundError:
            return None
        return self._fields.from_row(row)

    async def get_by_client_id(self, client_id: EntityId) -> T:
        """The client's row, inserting a default one if there is none yet."""
        existing = await self.find_by_client_id(client_id)
        if existing is not None:
            return existing

        default = self._fields.coerce({"client_id": client_id})
        row = await self._run(
            "create_default",
            self._backend.insert(self.table, self._fields.to_row(default)),
            client_id,
        )
        created = self._fields.from_row(row)

        logger.info("default_record_created", table=self.table, client_id=str(client_id))
        await self._audit.log_default_record_created(self.table, created.id, client_id)
        return created

    async def upsert(self, client_id: EntityId, fields: Mapping[str, Any]) -> bool:
        """
        Update the client's row with the given fields, or insert one.

        An inserted row combines the given fields with the model defaults.
        """
        columns = self._fields.to_columns(fields)
        columns.pop("client_id", None)

        existing = await self.find_by_client_id(client_id)

        if existing is not None:
            await self._run(
                "upsert",
                self._backend.update(self.table, existing.id, columns),
                client_id,
            )
            await self._audit.log_record_updated(
                self.table, existing.id, list(columns), client_id
            )
            return True

        record = self._fields.coerce({**columns, "client_id": client_id})
        row = await self._run(
            "upsert",
            self._backend.insert(self.table, self._fields.to_row(record)),
            client_id,
        )
        created = self._fields.from_row(row)
        await self._audit.log_record_created(self.table, created.id, client_id)
        return True


# =============================================================================
# CLIENTS
# =============================================================================

class ClientRepository(_Repository):
    """Clients, ordered by last name. Deleting one removes everything it owns."""

    def __init__(
        self,
        backend: StorageBackend,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(
            backend,
            CLIENTS_TABLE,
            FieldMap(Client),
            ("last_name",),
            audit_logger,
        )

    async def get_all(self) -> list[Client]:
        """Every client visible to the caller."""
        rows = await self._run(
            "get_all",
            self._backend.fetch_all(self.table, order_by=self._order_by),
        )
        return [self._fields.from_row(row) for row in rows]

    async def get_by_id(self, client_id: EntityId) -> Optional[Client]:
        try:
            row = await self._run(
                "get_by_id",
                self._backend.fetch_one(self.table, {"id": client_id}),
                client_id,
            )
        except NotFoundError:
            return None
        return self._fields.from_row(row)

    async def create(
        self,
        client: Union[Client, Mapping[str, Any]],
        advisor_id: Optional[str] = None,
    ) -> EntityId:
        """
        Insert a client.

        Args:
            client: Client model or mapping (camelCase or snake_case)
            advisor_id: Managing advisor; overrides any advisor on `client`
        """
        record = self._fields.coerce(client)
        if advisor_id is not None:
            record = record.model_copy(update={"advisor_id": advisor_id})

        row = await self._run(
            "create",
            self._backend.insert(self.table, self._fields.to_row(record)),
        )
        created = self._fields.from_row(row)

        await self._audit.log_client_created(created.id, created.display_name)
        return created.id

    async def update(self, client_id: EntityId, fields: Mapping[str, Any]) -> bool:
        """
        Partial update. `updated_at` is always stamped.

        Raises:
            NotFoundError: No client with this id
        """
        columns = self._fields.to_columns(fields)
        columns["updated_at"] = datetime.now(timezone.utc).isoformat()

        await self._run(
            "update",
            self._backend.update(self.table, client_id, columns),
            client_id,
        )
        await self._audit.log_client_updated(
            client_id, [column for column in columns if column != "updated_at"]
        )
        return True

    async def delete(self, client_id: EntityId) -> bool:
        """
        Delete a client and every row it owns.

        Backends without a database-level cascade get the owned rows
        deleted first, table by table.

        Returns:
            True if the client existed
        """
        cascaded: dict[str, int] = {}

        if not self._backend.cascades_deletes:
            for entity in OWNED_TABLES:
                count = await self._run(
                    "delete_cascade",
                    self._backend.delete_where(entity.name, {"client_id": client_id}),
                    client_id,
                )
                if count:
                    cascaded[entity.name] = count

        found = await self._run(
            "delete",
            self._backend.delete(self.table, client_id),
            client_id,
        )

        if found:
            await self._audit.log_client_deleted(client_id, cascaded)
        else:
            logger.info("client_delete_no_match", client_id=str(client_id))
        return found


def repository_for(
    backend: StorageBackend,
    entity: EntityTable,
    audit_logger: Optional[AuditLogger] = None,
) -> Union[ListRepository, SingleRecordRepository]:
    """The repository matching the entity's kind."""
    if entity.kind == EntityKind.LIST:
        return ListRepository(backend, entity, audit_logger)
    return SingleRecordRepository(backend, entity, audit_logger)
