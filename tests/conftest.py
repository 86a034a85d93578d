"""
Shared fixtures.

Every test gets its own in-memory SQLite database; nothing touches disk or
the network (the REST backend is tested through httpx.MockTransport).
"""

import pytest
import pytest_asyncio

from finplan.audit import AuditLogger
from finplan.services.repositories import ClientRepository
from finplan.services.storage import SqliteBackend


@pytest_asyncio.fixture
async def backend():
    backend = SqliteBackend("sqlite+aiosqlite://")
    await backend.connect()
    yield backend
    await backend.close()


@pytest.fixture
def audit_logger():
    """Local-only audit logger."""
    return AuditLogger()


@pytest_asyncio.fixture
async def client_repo(backend, audit_logger):
    return ClientRepository(backend, audit_logger)


@pytest_asyncio.fixture
async def client_id(client_repo):
    return await client_repo.create({"firstName": "Anna", "lastName": "Muster"})
