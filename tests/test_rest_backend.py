"""
Tests for the hosted REST backend.

Requests go to httpx.MockTransport: either canned responses, or a small
in-memory stand-in for the PostgREST table API.
"""

import json
from datetime import datetime, timezone
from uuid import UUID, uuid4

import httpx
import pytest
import pytest_asyncio
from tenacity import wait_none

from finplan.audit import AuditLogger
from finplan.config import RemoteBackendSettings
from finplan.models import TABLES_BY_NAME
from finplan.services.repositories import (
    ClientRepository,
    ListRepository,
    SingleRecordRepository,
)
from finplan.services.storage import (
    ConnectionError,
    DuplicateError,
    NotFoundError,
    RestBackend,
    StorageError,
    ValidationError,
)


REST_URL = "https://project.example.co/rest/v1"
API_KEY = "anon-key"


class FakePostgrest:
    """Tables in memory, equality filters, ascending order, limit."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.requests: list[httpx.Request] = []

    def _matches(self, row: dict, params: httpx.QueryParams) -> bool:
        for column, condition in params.items():
            if column in ("select", "order", "limit"):
                continue
            assert condition.startswith("eq.")
            if str(row.get(column)) != condition[3:]:
                return False
        return True

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        table = request.url.path.rsplit("/", 1)[-1]
        rows = self.tables.setdefault(table, [])
        params = request.url.params

        if request.method == "GET":
            found = [row for row in rows if self._matches(row, params)]
            for column in reversed(params.get("order", "").split(",")):
                if column:
                    name = column.rsplit(".", 1)[0]
                    found.sort(key=lambda row: (row.get(name) is None, str(row.get(name))))
            if "limit" in params:
                found = found[: int(params["limit"])]
            return httpx.Response(200, json=found)

        if request.method == "POST":
            row = json.loads(request.content)
            row.setdefault("id", str(uuid4()))
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(row)
            return httpx.Response(201, json=[row])

        if request.method == "PATCH":
            changes = json.loads(request.content)
            updated = []
            for row in rows:
                if self._matches(row, params):
                    row.update(changes)
                    updated.append(row)
            return httpx.Response(200, json=updated)

        if request.method == "DELETE":
            deleted = [row for row in rows if self._matches(row, params)]
            self.tables[table] = [row for row in rows if row not in deleted]
            return httpx.Response(200, json=deleted)

        return httpx.Response(405)


def make_backend(handler, **kwargs) -> RestBackend:
    return RestBackend(
        REST_URL,
        API_KEY,
        transport=httpx.MockTransport(handler),
        retry_wait=wait_none(),
        **kwargs,
    )


@pytest_asyncio.fixture
async def server():
    return FakePostgrest()


@pytest_asyncio.fixture
async def rest(server):
    backend = make_backend(server)
    yield backend
    await backend.close()


class TestRequests:
    """Tests for the HTTP requests sent."""

    @pytest.mark.asyncio
    async def test_fetch_all_query(self, rest, server):
        """Test filters, ordering and auth headers."""
        client_id = uuid4()
        await rest.fetch_all("goals", {"client_id": client_id}, ("target_year",))

        request = server.requests[-1]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/goals"
        assert request.url.params["client_id"] == f"eq.{client_id}"
        assert request.url.params["order"] == "target_year.asc,id.asc"
        assert request.url.params["select"] == "*"
        assert request.headers["apikey"] == API_KEY
        assert request.headers["authorization"] == f"Bearer {API_KEY}"

    @pytest.mark.asyncio
    async def test_access_token(self, rest, server):
        rest.set_access_token("user-token")
        await rest.fetch_all("clients")
        assert server.requests[-1].headers["authorization"] == "Bearer user-token"

        rest.set_access_token(None)
        await rest.fetch_all("clients")
        assert server.requests[-1].headers["authorization"] == f"Bearer {API_KEY}"

    @pytest.mark.asyncio
    async def test_boolean_filters(self, rest, server):
        await rest.fetch_all("clients", {"save_taxes": True})
        assert server.requests[-1].url.params["save_taxes"] == "eq.true"

    @pytest.mark.asyncio
    async def test_insert_returns_representation(self, rest, server):
        row = await rest.insert("goals", {"client_id": "c1", "description": "Car"})

        request = server.requests[-1]
        assert request.method == "POST"
        assert request.headers["prefer"] == "return=representation"
        assert json.loads(request.content) == {"client_id": "c1", "description": "Car"}
        assert UUID(row["id"])

    @pytest.mark.asyncio
    async def test_fetch_one(self, rest, server):
        with pytest.raises(NotFoundError):
            await rest.fetch_one("budget", {"client_id": "c1"})

        await rest.insert("budget", {"client_id": "c1"})
        row = await rest.fetch_one("budget", {"client_id": "c1"}, ("created_at",))
        assert row["client_id"] == "c1"
        assert server.requests[-1].url.params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_update_and_delete(self, rest, server):
        row = await rest.insert("goals", {"client_id": "c1", "description": "Car"})

        updated = await rest.update("goals", row["id"], {"description": "Boat"})
        assert updated["description"] == "Boat"
        assert server.requests[-1].url.params["id"] == f"eq.{row['id']}"

        with pytest.raises(NotFoundError):
            await rest.update("goals", str(uuid4()), {"description": "x"})

        assert await rest.delete("goals", row["id"]) is True
        assert await rest.delete("goals", row["id"]) is False

    @pytest.mark.asyncio
    async def test_delete_where(self, rest):
        await rest.insert("goals", {"client_id": "c1"})
        await rest.insert("goals", {"client_id": "c1"})
        await rest.insert("goals", {"client_id": "c2"})
        assert await rest.delete_where("goals", {"client_id": "c1"}) == 2

    @pytest.mark.asyncio
    async def test_audit_table_keyed_by_event_id(self, rest, server):
        await rest.fetch_all("audit_events", order_by=("timestamp",))
        assert server.requests[-1].url.params["order"] == "timestamp.asc,event_id.asc"


class TestErrors:
    """Tests for error translation."""

    @staticmethod
    def failing(status, body=None):
        def handler(request):
            if body is None:
                return httpx.Response(status, text="boom")
            return httpx.Response(status, json=body)
        return handler

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,body,expected",
        [
            (409, {"code": "23505", "message": "duplicate key"}, DuplicateError),
            (400, {"code": "23502", "message": "null value"}, ValidationError),
            (409, {"code": "23503", "message": "foreign key"}, ValidationError),
            (400, {"code": "22P02", "message": "invalid input"}, ValidationError),
            (400, {"code": "PGRST204", "message": "unknown column"}, ValidationError),
            (406, {"code": "PGRST116", "message": "no rows"}, NotFoundError),
            (503, None, ConnectionError),
            (500, None, StorageError),
            (401, {"code": "PGRST301", "message": "JWT expired"}, StorageError),
        ],
    )
    async def test_status_mapping(self, status, body, expected):
        backend = make_backend(self.failing(status, body))
        with pytest.raises(expected):
            await backend.insert("goals", {"client_id": "c1"})
        await backend.close()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend = make_backend(handler)
        with pytest.raises(ConnectionError):
            await backend.fetch_all("goals")
        await backend.close()


class TestConnect:
    """Tests for the connection check."""

    @pytest.mark.asyncio
    async def test_retries_until_reachable(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("down", request=request)
            return httpx.Response(200, json={})

        backend = make_backend(handler, connect_retries=3)
        await backend.connect()
        assert len(calls) == 3
        await backend.close()

    @pytest.mark.asyncio
    async def test_gives_up(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("down", request=request)

        backend = make_backend(handler, connect_retries=2)
        with pytest.raises(ConnectionError):
            await backend.connect()
        assert len(calls) == 2
        await backend.close()

    @pytest.mark.asyncio
    async def test_does_not_retry_other_errors(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(401, json={"message": "bad key"})

        backend = make_backend(handler, connect_retries=3)
        with pytest.raises(StorageError):
            await backend.connect()
        assert len(calls) == 1
        await backend.close()

    def test_from_settings(self):
        settings = RemoteBackendSettings(
            url="https://project.example.co/",
            api_key=API_KEY,
            timeout_seconds=5,
        )
        backend = RestBackend.from_settings(settings)
        assert str(backend._client.base_url).rstrip("/") == REST_URL
        assert backend._client.timeout.read == 5


class TestRepositoriesOverRest:
    """Repositories work unchanged on UUID-keyed hosted tables."""

    @pytest.mark.asyncio
    async def test_list_round_trip(self, rest):
        audit_logger = AuditLogger()
        clients = ClientRepository(rest, audit_logger)
        client_id = await clients.create({"firstName": "Anna", "lastName": "Muster"})
        assert isinstance(client_id, UUID)

        goals = ListRepository(rest, TABLES_BY_NAME["goals"], audit_logger)
        goal_id = await goals.create({"clientId": client_id, "description": "Car", "targetYear": 3})
        await goals.update(goal_id, {"targetYear": 5})

        stored = await goals.get_by_client_id(client_id)
        assert [goal.id for goal in stored] == [goal_id]
        assert stored[0].target_year == 5
        assert stored[0].client_id == client_id

    @pytest.mark.asyncio
    async def test_single_record_created_once(self, rest, server):
        client_id = uuid4()
        repo = SingleRecordRepository(rest, TABLES_BY_NAME["pension"], AuditLogger())

        first = await repo.get_by_client_id(client_id)
        second = await repo.get_by_client_id(client_id)

        assert first.id == second.id
        assert len(server.tables["pension"]) == 1
        assert server.tables["pension"][0]["review_3a"] is False

    @pytest.mark.asyncio
    async def test_single_record_with_null_flags(self, rest, server):
        """Test a row created by the database with NULL flags is readable."""
        client_id = uuid4()
        row_id = str(uuid4())
        server.tables["budget"] = [
            {"id": row_id, "client_id": str(client_id), "taxes_da": None, "food_man": None}
        ]

        repo = SingleRecordRepository(rest, TABLES_BY_NAME["budget"], AuditLogger())
        budget = await repo.get_by_client_id(client_id)

        assert str(budget.id) == row_id
        assert budget.taxes_da is False
        assert len(server.tables["budget"]) == 1

    @pytest.mark.asyncio
    async def test_client_delete_relies_on_database_cascade(self, rest, server):
        clients = ClientRepository(rest, AuditLogger())
        client_id = await clients.create({"firstName": "Anna", "lastName": "Muster"})

        assert await clients.delete(client_id) is True

        deletes = [request for request in server.requests if request.method == "DELETE"]
        assert [request.url.path for request in deletes] == ["/rest/v1/clients"]
