"""
Local SQLite Storage Implementation

DESIGN DECISION: The local backend is an embedded SQLite database reached
through SQLAlchemy's async engine (aiosqlite driver):
1. No server to install; one file per installation
2. Integer auto-increment ids
3. Foreign keys enforced (PRAGMA foreign_keys=ON)

TRADEOFFS:
- Tables are generated from the pydantic models, not migrated. Adding a
  column to an existing database file means recreating it.
- Statements are serialised on one asyncio.Lock (SQLite has one writer)
- Deleting a client does NOT cascade here; the client repository deletes
  owned rows first (`cascades_deletes = False`)

Column types follow the model annotations: bool, int, float map to their
SQL types, dicts to JSON, everything else (text, dates, enums) is stored as
text in its JSON form.
Fields with a scalar model default (flags, enum choices) are NOT NULL with
that default on the column, so rows inserted without them are still valid.
"""

import asyncio
import types
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import (
    Any,
    AsyncIterator,
    Literal,
    Mapping,
    Optional,
    Sequence,
    Union,
    get_args,
    get_origin,
)

import structlog
from pydantic import BaseModel
from pydantic.fields import FieldInfo
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    delete,
    event,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from finplan.config import LocalDatabaseSettings
from finplan.models.base import EntityId, null_means_default
from finplan.models.client import Client
from finplan.models.tables import AUDIT_TABLE, CLIENTS_TABLE, OWNED_TABLES
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


# =============================================================================
# Schema
# =============================================================================

def _column_type(annotation: Any):
    """Map a model field annotation to a SQLAlchemy column type."""
    origin = get_origin(annotation)

    if origin in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return _column_type(args[0])
        # Union[int, UUID]: ids are integers locally
        return Integer()

    if origin is Literal:
        return _column_type(type(get_args(annotation)[0]))

    if origin in (dict, list) or annotation in (dict, list):
        return JSON()

    if isinstance(annotation, type):
        if issubclass(annotation, bool):
            return Boolean()
        if issubclass(annotation, Enum):
            return String()
        if issubclass(annotation, int):
            return Integer()
        if issubclass(annotation, float):
            return Float()

    return String()


def _server_default(field: FieldInfo):
    """Model default as a column default, for scalar defaults only."""
    value = field.default
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return text("1" if value else "0")
    if isinstance(value, (int, float)):
        return text(repr(value))
    if isinstance(value, str):
        return value
    return None


def _model_table(metadata: MetaData, name: str, model: type[BaseModel]) -> Table:
    columns = [Column("id", Integer, primary_key=True, autoincrement=True)]

    for field_name, field in model.model_fields.items():
        if field_name == "id":
            continue
        if field_name == "client_id":
            columns.append(
                Column(
                    "client_id",
                    Integer,
                    ForeignKey(f"{CLIENTS_TABLE}.id"),
                    nullable=False,
                    index=True,
                )
            )
            continue
        server_default = _server_default(field) if null_means_default(field) else None
        columns.append(
            Column(
                field_name,
                _column_type(field.annotation),
                nullable=server_default is None and not field.is_required(),
                server_default=server_default,
            )
        )

    return Table(name, metadata, *columns)


def build_metadata() -> MetaData:
    """Tables for clients, every owned record kind, and the audit log."""
    metadata = MetaData()

    _model_table(metadata, CLIENTS_TABLE, Client)
    for entity in OWNED_TABLES:
        _model_table(metadata, entity.name, entity.model)

    Table(
        AUDIT_TABLE,
        metadata,
        Column("event_id", String, primary_key=True),
        Column("timestamp", String, nullable=False, index=True),
        Column("event_type", String, nullable=False),
        Column("severity", String, nullable=False),
        Column("entity_type", String),
        Column("entity_id", String),
        Column("client_id", String, index=True),
        Column("description", String, nullable=False),
        Column("details", JSON),
        Column("error_message", String),
    )

    return metadata


def _enable_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =============================================================================
# Backend
# =============================================================================

class SqliteBackend(StorageBackend):
    """
    SQLite implementation of table storage.

    Use `sqlite+aiosqlite://` for a throwaway in-memory database (tests).
    """

    cascades_deletes = False

    def __init__(
        self,
        database_url: str = "sqlite+aiosqlite://",
        echo: bool = False,
    ):
        url = make_url(database_url)

        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            engine = create_async_engine(
                url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_async_engine(url, echo=echo, poolclass=NullPool)

        event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

        self._engine: AsyncEngine = engine
        self._metadata = build_metadata()
        self._lock = asyncio.Lock()
        self._schema_ready = False

    @classmethod
    def from_settings(cls, settings: LocalDatabaseSettings) -> "SqliteBackend":
        return cls(settings.database_url, echo=settings.echo)

    async def connect(self) -> None:
        async with self._transaction("schema"):
            pass

    async def close(self) -> None:
        await self._engine.dispose()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(self._metadata.create_all)
        self._schema_ready = True
        logger.info("sqlite_schema_ready", tables=len(self._metadata.tables))

    @asynccontextmanager
    async def _transaction(self, table: str) -> AsyncIterator[AsyncConnection]:
        """
        Serialise access, create the schema on first use, and translate
        SQLAlchemy errors into storage errors.
        """
        async with self._lock:
            try:
                if not self._schema_ready:
                    await self._create_schema()
                async with self._engine.begin() as conn:
                    yield conn
            except IntegrityError as e:
                message = str(e.orig)
                if "UNIQUE" in message:
                    raise DuplicateError(f"{table}: {message}") from e
                raise ValidationError(f"{table}: {message}") from e
            except OperationalError as e:
                message = str(e.orig)
                if "unable to open" in message:
                    raise ConnectionError(f"Cannot open database: {message}") from e
                raise StorageError(f"{table}: {message}") from e
            except SQLAlchemyError as e:
                raise StorageError(f"{table}: {e}") from e

    def _table(self, name: str) -> Table:
        table = self._metadata.tables.get(name)
        if table is None:
            raise StorageError(f"Unknown table: {name}")
        return table

    @staticmethod
    def _check_columns(table: Table, columns) -> None:
        unknown = sorted(set(columns) - set(table.c.keys()))
        if unknown:
            raise ValidationError(f"{table.name}: unknown columns {unknown}")

    def _where(self, table: Table, filters: Mapping[str, Any]) -> list:
        self._check_columns(table, filters.keys())
        return [table.c[column] == value for column, value in filters.items()]

    def _order(self, table: Table, order_by: Sequence[str]) -> list:
        self._check_columns(table, order_by)
        return [table.c[column] for column in order_by] + list(table.primary_key.columns)

    @staticmethod
    def _primary_key(table: Table) -> Column:
        return list(table.primary_key.columns)[0]

    # -------------------------------------------------------------------------
    # StorageBackend
    # -------------------------------------------------------------------------

    async def fetch_all(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
    ) -> list[Row]:
        t = self._table(table)
        statement = (
            select(t)
            .where(*self._where(t, filters or {}))
            .order_by(*self._order(t, order_by))
        )

        async with self._transaction(table) as conn:
            result = await conn.execute(statement)
            return [dict(row) for row in result.mappings()]

    async def fetch_one(
        self,
        table: str,
        filters: Mapping[str, Any],
        order_by: Sequence[str] = (),
    ) -> Row:
        t = self._table(table)
        statement = (
            select(t)
            .where(*self._where(t, filters))
            .order_by(*self._order(t, order_by))
            .limit(1)
        )

        async with self._transaction(table) as conn:
            row = (await conn.execute(statement)).mappings().first()

        if row is None:
            raise NotFoundError(f"No row in {table} matching {dict(filters)}")
        return dict(row)

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        t = self._table(table)
        values = dict(row)
        self._check_columns(t, values.keys())

        if "created_at" in t.c and values.get("created_at") is None:
            values["created_at"] = datetime.now(timezone.utc).isoformat()

        statement = insert(t).values(**values).returning(*t.c)

        async with self._transaction(table) as conn:
            stored = (await conn.execute(statement)).mappings().one()
            return dict(stored)

    async def update(
        self,
        table: str,
        record_id: EntityId,
        fields: Mapping[str, Any],
    ) -> Row:
        t = self._table(table)
        pk = self._primary_key(t)
        values = dict(fields)
        self._check_columns(t, values.keys())

        if values:
            statement = update(t).where(pk == record_id).values(**values).returning(*t.c)
        else:
            statement = select(t).where(pk == record_id)

        async with self._transaction(table) as conn:
            row = (await conn.execute(statement)).mappings().first()

        if row is None:
            raise NotFoundError(f"No row in {table} with id {record_id}")
        return dict(row)

    async def delete(self, table: str, record_id: EntityId) -> bool:
        t = self._table(table)
        statement = delete(t).where(self._primary_key(t) == record_id)

        async with self._transaction(table) as conn:
            result = await conn.execute(statement)
            return result.rowcount > 0

    async def delete_where(self, table: str, filters: Mapping[str, Any]) -> int:
        t = self._table(table)
        statement = delete(t).where(*self._where(t, filters))

        async with self._transaction(table) as conn:
            result = await conn.execute(statement)
            return result.rowcount
