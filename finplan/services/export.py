"""
Per-client JSON export.

Produces one flat document per client (version 1): the client, their
goals and planned actions, and each questionnaire record. Questionnaires
that were never filled in are exported as null; exporting does not create
default rows.
"""

import asyncio
from typing import Optional

from finplan.audit import AuditLogger
from finplan.models.base import EntityId
from finplan.models.summary import ClientExport
from finplan.models.tables import TABLES_BY_NAME
from finplan.services.repositories import (
    ClientRepository,
    ListRepository,
    SingleRecordRepository,
)
from finplan.services.storage import NotFoundError, StorageBackend


# Export key -> single-record table
SINGLE_RECORD_SECTIONS = {
    "housing": "housing",
    "property_insurance": "property_insurance",
    "health_insurance": "health_insurance",
    "legal_security": "legal_security",
    "tax_optimization": "tax_optimization",
    "investment": "investment",
    "pension": "pension",
    "budget": "budget",
    "preferences": "client_preferences",
}


class ClientDataExporter:
    """Builds the JSON export of one client."""

    def __init__(
        self,
        backend: StorageBackend,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._audit = audit_logger or AuditLogger()
        self._clients = ClientRepository(backend, self._audit)
        self._goals = ListRepository(backend, TABLES_BY_NAME["goals"], self._audit)
        self._actions = ListRepository(
            backend, TABLES_BY_NAME["planned_actions"], self._audit
        )
        self._sections = {
            key: SingleRecordRepository(backend, TABLES_BY_NAME[table], self._audit)
            for key, table in SINGLE_RECORD_SECTIONS.items()
        }

    async def collect(self, client_id: EntityId) -> ClientExport:
        """
        Gather everything exported for one client.

        Raises:
            NotFoundError: Unknown client
        """
        client = await self._clients.get_by_id(client_id)
        if client is None:
            raise NotFoundError(f"No client with id {client_id}")

        goals, actions, *records = await asyncio.gather(
            self._goals.get_by_client_id(client_id),
            self._actions.get_by_client_id(client_id),
            *(repo.find_by_client_id(client_id) for repo in self._sections.values()),
        )

        return ClientExport(
            client=client,
            goals=goals,
            actions=actions,
            **dict(zip(self._sections, records)),
        )

    async def export(self, client_id: EntityId) -> str:
        """JSON document with camelCase keys, indented by two spaces."""
        document = (await self.collect(client_id)).to_json()
        await self._audit.log_client_data_exported(
            client_id, len(document.encode("utf-8"))
        )
        return document
