"""
Application wiring for Financial Planning

Builds the storage backend chosen by configuration and every service on
top of it.

DESIGN DECISION: The factory is the only place that knows which backend
is in use. Repositories, the net-worth calculator, the exporter and the
client store receive a StorageBackend and never branch on its type.
"""

from typing import Optional

import structlog

from finplan.audit import AuditLogger, configure_logging
from finplan.config import Settings, get_settings
from finplan.context import ClientStore
from finplan.models.tables import OWNED_TABLES, TABLES_BY_NAME
from finplan.services.export import ClientDataExporter
from finplan.services.net_worth import NetWorthCalculator
from finplan.services.repositories import (
    ClientRepository,
    ListRepository,
    SingleRecordRepository,
    repository_for,
)
from finplan.services.storage import (
    BackendAuditStorage,
    RestBackend,
    SqliteBackend,
    StorageBackend,
)


logger = structlog.get_logger(__name__)


class PlanningServices:
    """Everything a view layer needs, sharing one backend and audit trail."""

    def __init__(
        self,
        backend: StorageBackend,
        audit_logger: AuditLogger,
    ):
        self.backend = backend
        self.audit_logger = audit_logger
        self.clients = ClientRepository(backend, audit_logger)
        self.repositories = {
            entity.name: repository_for(backend, entity, audit_logger)
            for entity in OWNED_TABLES
        }
        self.net_worth = NetWorthCalculator(backend, audit_logger)
        self.exporter = ClientDataExporter(backend, audit_logger)
        self.client_store = ClientStore(self.clients, audit_logger)

    def list_repository(self, table: str) -> ListRepository:
        """Repository of a list entity, e.g. list_repository("goals")."""
        repository = self.repositories[TABLES_BY_NAME[table].name]
        if not isinstance(repository, ListRepository):
            raise TypeError(f"{table} is not a list entity")
        return repository

    def single_record_repository(self, table: str) -> SingleRecordRepository:
        """Repository of a single-record entity, e.g. single_record_repository("budget")."""
        repository = self.repositories[TABLES_BY_NAME[table].name]
        if not isinstance(repository, SingleRecordRepository):
            raise TypeError(f"{table} is not a single-record entity")
        return repository

    async def close(self) -> None:
        await self.backend.close()


def create_backend(settings: Settings) -> StorageBackend:
    """The storage backend selected by FINPLAN_STORAGE_BACKEND."""
    if settings.storage.backend == "remote":
        return RestBackend.from_settings(settings.remote_backend)
    return SqliteBackend.from_settings(settings.local_db)


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[StorageBackend] = None,
) -> PlanningServices:
    """
    Factory function to create all application components.

    Args:
        settings: Configuration; defaults to get_settings()
        backend: Use this backend instead of the configured one
                (tests pass an in-memory SQLite backend)

    Returns:
        PlanningServices wired to the backend, with audit events persisted
        in the backend's audit table
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.log_json)

    if backend is None:
        backend = create_backend(settings)

    audit_logger = AuditLogger(BackendAuditStorage(backend))

    logger.info(
        "app_components_created",
        backend=type(backend).__name__,
        environment=app_settings.app_environment,
    )
    return PlanningServices(backend, audit_logger)
