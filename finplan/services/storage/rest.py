"""
Hosted REST Storage Implementation

Talks to a hosted Postgres database through its PostgREST-compatible HTTP
API (`<url>/rest/v1/<table>`).

DESIGN DECISION: Access control lives on the server (row-level security by
advisor/client role). This client only forwards the caller's token:
- `apikey` header: the project's public key, on every request
- `Authorization: Bearer <token>`: the signed-in user's access token,
  or the public key before sign-in

TRADEOFFS:
- No request timeout by default; a hung request simply waits
- Only `connect()` retries. Data operations fail fast and the caller
  decides what to do.
- Client deletes cascade in the database (`cascades_deletes = True`)
"""

from typing import Any, Mapping, Optional, Sequence

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from finplan.config import RemoteBackendSettings
from finplan.models.base import EntityId
from finplan.models.tables import AUDIT_TABLE
from finplan.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    NotFoundError,
    Row,
    StorageBackend,
    StorageError,
    ValidationError,
)


logger = structlog.get_logger(__name__)


# PostgREST / Postgres error codes we map explicitly
UNIQUE_VIOLATION = "23505"
# Only sent for single-object requests (Accept: application/vnd.pgrst.object+json);
# fetch_one asks for a one-row list instead. Mapped for callers that do.
NO_ROWS = "PGRST116"
UNKNOWN_COLUMN = "PGRST204"

RETURN_REPRESENTATION = {"Prefer": "return=representation"}

PRIMARY_KEYS = {AUDIT_TABLE: "event_id"}


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def error_from_response(response: httpx.Response) -> StorageError:
    """Translate an HTTP error response into a storage error."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    code = str(body.get("code") or "")
    message = body.get("message") or response.text or response.reason_phrase
    if code:
        detail = f"HTTP {response.status_code} {code}: {message}"
    else:
        detail = f"HTTP {response.status_code}: {message}"

    if code == UNIQUE_VIOLATION:
        return DuplicateError(detail)
    if code == NO_ROWS:
        return NotFoundError(detail)
    if code == UNKNOWN_COLUMN or code.startswith(("22", "23")):
        return ValidationError(detail)
    if response.status_code in (502, 503, 504):
        return ConnectionError(detail)
    return StorageError(detail)


class RestBackend(StorageBackend):
    """
    PostgREST implementation of table storage.

    Args:
        rest_url: Base URL of the REST endpoint (…/rest/v1)
        api_key: Public API key
        access_token: Signed-in user's token (defaults to the API key)
        timeout: Seconds per request; None waits indefinitely
        connect_retries: Attempts made by `connect()`
        transport: Custom httpx transport (tests use httpx.MockTransport)
        retry_wait: tenacity wait strategy between `connect()` attempts
    """

    cascades_deletes = True

    def __init__(
        self,
        rest_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        connect_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_wait: Optional[wait_base] = None,
    ):
        self._api_key = api_key
        self._connect_retries = connect_retries
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)
        self._client = httpx.AsyncClient(
            base_url=rest_url,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {access_token or api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: RemoteBackendSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RestBackend":
        return cls(
            rest_url=settings.rest_url,
            api_key=settings.api_key,
            timeout=settings.timeout_seconds,
            connect_retries=settings.connect_retries,
            transport=transport,
        )

    def set_access_token(self, access_token: Optional[str]) -> None:
        """Act as a signed-in user (or, with None, anonymously again)."""
        self._client.headers["Authorization"] = f"Bearer {access_token or self._api_key}"

    async def connect(self) -> None:
        """Check the endpoint answers, retrying connection failures."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._connect_retries),
            wait=self._retry_wait,
            retry=retry_if_exception_type(ConnectionError),
            reraise=True,
        ):
            with attempt:
                await self._request("GET", "/")
        logger.info("rest_backend_connected", url=str(self._client.base_url))

    async def close(self) -> None:
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.TransportError as e:
            raise ConnectionError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            error = error_from_response(response)
            logger.warning(
                "rest_request_failed",
                method=method,
                path=path,
                status=response.status_code,
                error=str(error),
            )
            raise error

        if not response.content:
            return []
        return response.json()

    @staticmethod
    def _filter_params(filters: Optional[Mapping[str, Any]]) -> dict[str, str]:
        return {
            column: f"eq.{_format_value(value)}"
            for column, value in (filters or {}).items()
        }

    @staticmethod
    def _primary_key(table: str) -> str:
        return PRIMARY_KEYS.get(table, "id")

    def _order_param(self, table: str, order_by: Sequence[str]) -> str:
        columns = list(order_by) + [self._primary_key(table)]
        return ",".join(f"{column}.asc" for column in columns)

    # -------------------------------------------------------------------------
    # StorageBackend
    # -------------------------------------------------------------------------

    async def fetch_all(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
    ) -> list[Row]:
        params = self._filter_params(filters)
        params["select"] = "*"
        params["order"] = self._order_param(table, order_by)
        return await self._request("GET", f"/{table}", params=params)

    async def fetch_one(
        self,
        table: str,
        filters: Mapping[str, Any],
        order_by: Sequence[str] = (),
    ) -> Row:
        # A limited list instead of the single-object header: when a client
        # has more than one row the first one wins instead of an error.
        params = self._filter_params(filters)
        params["select"] = "*"
        params["order"] = self._order_param(table, order_by)
        params["limit"] = "1"

        rows = await self._request("GET", f"/{table}", params=params)
        if not rows:
            raise NotFoundError(f"No row in {table} matching {dict(filters)}")
        return rows[0]

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        rows = await self._request(
            "POST",
            f"/{table}",
            json=dict(row),
            headers=RETURN_REPRESENTATION,
        )
        if not rows:
            raise StorageError(f"Insert into {table} returned no row")
        return rows[0]

    async def update(
        self,
        table: str,
        record_id: EntityId,
        fields: Mapping[str, Any],
    ) -> Row:
        if not fields:
            return await self.fetch_one(table, {self._primary_key(table): record_id})

        rows = await self._request(
            "PATCH",
            f"/{table}",
            params=self._filter_params({self._primary_key(table): record_id}),
            json=dict(fields),
            headers=RETURN_REPRESENTATION,
        )
        if not rows:
            raise NotFoundError(f"No row in {table} with id {record_id}")
        return rows[0]

    async def delete(self, table: str, record_id: EntityId) -> bool:
        rows = await self._request(
            "DELETE",
            f"/{table}",
            params=self._filter_params({self._primary_key(table): record_id}),
            headers=RETURN_REPRESENTATION,
        )
        return bool(rows)

    async def delete_where(self, table: str, filters: Mapping[str, Any]) -> int:
        rows = await self._request(
            "DELETE",
            f"/{table}",
            params=self._filter_params(filters),
            headers=RETURN_REPRESENTATION,
        )
        return len(rows)
