"""
SQLite implementation of the document store port.

Documents are JSON objects in a single ``documents`` table keyed by
(collection, doc_id). Each write batch runs in one BEGIN IMMEDIATE
transaction: preconditions are evaluated first, then every write, and any
failure rolls the whole batch back. Numeric increments are single UPDATE
statements evaluated by SQLite, never read-modify-write in Python.
"""

import json
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

import aiosqlite

from zycle.config import get_logger
from zycle.core.exceptions import (
    BatchCommitError,
    DocumentNotFoundError,
    PreconditionFailedError,
    StorageError,
    UniqueConstraintError,
)
from zycle.core.interfaces.document_store import (
    SERVER_TIMESTAMP,
    ArrayUnionWrite,
    CollectionEmpty,
    DeleteWrite,
    DocumentSnapshot,
    FieldFilter,
    FieldTotalEquals,
    IDocumentStore,
    IncrementWrite,
    Precondition,
    SetWrite,
    UpdateWrite,
    Write,
    WriteBatch,
    check_field_name,
)
from zycle.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool

logger = get_logger(__name__)

_SQL_OPS = {"==": "=", "!=": "!=", "<": "<", "<=": "<=", ">": ">", ">=": ">="}

_COLUMNS = "collection, doc_id, data, created_at, updated_at"

# Aggregate totals closer than this are considered equal
_TOTAL_EPSILON = 1e-9


def _json_path(field: str) -> str:
    return f"$.{check_field_name(field)}"


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_sql_value(value: Any) -> Any:
    """Convert a filter value to what json_extract compares against."""
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _resolve_timestamps(fields: dict[str, Any], commit_time: str) -> dict[str, Any]:
    return {
        key: commit_time if value is SERVER_TIMESTAMP else value
        for key, value in fields.items()
    }


def _row_to_snapshot(row: aiosqlite.Row) -> DocumentSnapshot:
    return DocumentSnapshot(
        id=row["doc_id"],
        collection=row["collection"],
        data=json.loads(row["data"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SQLiteDocumentStore(IDocumentStore):
    """SQLite-backed collection/document store with atomic write batches."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    async def _get_pool(self) -> ConnectionPool:
        return self._pool if self._pool is not None else await get_pool()

    def new_id(self) -> str:
        return uuid4().hex

    async def ping(self) -> bool:
        pool = await self._get_pool()
        return await pool.ping()

    # Reads

    async def get_document(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, doc_id),
            )
            row = await cursor.fetchone()
            return _row_to_snapshot(row) if row else None

    async def query_collection(
        self,
        collection: str,
        order_by: str | None = None,
        descending: bool = False,
        filters: tuple[FieldFilter, ...] | list[FieldFilter] = (),
        limit: int | None = None,
        then_by: str | None = None,
    ) -> list[DocumentSnapshot]:
        sql = f"SELECT {_COLUMNS} FROM documents WHERE collection = ?"
        params: list[Any] = [collection]

        for clause in filters:
            op = _SQL_OPS.get(clause.op)
            if op is None:
                raise ValueError(f"Unsupported filter operator: {clause.op!r}")
            sql += f" AND json_extract(data, ?) {op} ?"
            params.extend([_json_path(clause.field), _to_sql_value(clause.value)])

        direction = "DESC" if descending else "ASC"
        if order_by:
            sql += f" ORDER BY json_extract(data, ?) {direction}"
            params.append(_json_path(order_by))
            if then_by:
                sql += f", json_extract(data, ?) {direction}"
                params.append(_json_path(then_by))
            sql += f", doc_id {direction}"
        else:
            sql += " ORDER BY created_at, doc_id"

        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        pool = await self._get_pool()
        async with pool.acquire() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [_row_to_snapshot(row) for row in rows]

    # Writes

    async def commit_batch(self, batch: WriteBatch) -> None:
        if not batch.writes and not batch.preconditions:
            return

        commit_time = datetime.now(UTC).isoformat()
        pool = await self._get_pool()

        try:
            async with pool.transaction(immediate=True) as conn:
                for precondition in batch.preconditions:
                    await self._check_precondition(conn, precondition)
                for write in batch.writes:
                    await self._apply_write(conn, write, commit_time)
        except StorageError as e:
            logger.warning(
                "batch_rejected",
                writes=len(batch),
                error=e.code,
                details=e.details,
            )
            raise
        except aiosqlite.Error as e:
            logger.error("batch_commit_failed", writes=len(batch), error=str(e))
            raise BatchCommitError(str(e), writes=len(batch)) from e

        logger.debug(
            "batch_committed",
            writes=len(batch),
            preconditions=len(batch.preconditions),
        )

    async def _check_precondition(
        self, conn: aiosqlite.Connection, precondition: Precondition
    ) -> None:
        if isinstance(precondition, CollectionEmpty):
            cursor = await conn.execute(
                "SELECT 1 FROM documents WHERE collection = ? LIMIT 1",
                (precondition.collection,),
            )
            if await cursor.fetchone():
                raise PreconditionFailedError(
                    "collection_empty",
                    f"{precondition.collection} already has documents",
                )
        elif isinstance(precondition, FieldTotalEquals):
            cursor = await conn.execute(
                "SELECT COALESCE(SUM(json_extract(data, ?)), 0) FROM documents "
                "WHERE collection = ?",
                (_json_path(precondition.field), precondition.collection),
            )
            row = await cursor.fetchone()
            total = float(row[0])
            if abs(total - precondition.value) > _TOTAL_EPSILON:
                error = PreconditionFailedError(
                    "field_total_equals",
                    f"sum of {precondition.field} in {precondition.collection} "
                    f"is {total:g}, expected {precondition.value:g}",
                )
                error.details["actual"] = total
                raise error
        else:
            raise ValueError(f"Unsupported precondition: {precondition!r}")

    async def _apply_write(
        self, conn: aiosqlite.Connection, write: Write, commit_time: str
    ) -> None:
        if isinstance(write, IncrementWrite):
            path = _json_path(write.field)
            cursor = await conn.execute(
                """
                UPDATE documents
                SET data = json_set(data, ?, COALESCE(json_extract(data, ?), 0) + ?),
                    updated_at = ?
                WHERE collection = ? AND doc_id = ?
                """,
                (path, path, write.delta, commit_time, write.collection, write.doc_id),
            )
            if cursor.rowcount == 0:
                raise DocumentNotFoundError(write.collection, write.doc_id)

        elif isinstance(write, SetWrite):
            fields = _resolve_timestamps(write.fields, commit_time)
            if write.merge:
                existing = await self._read_data(conn, write.collection, write.doc_id)
                fields = {**(existing or {}), **fields}
            await self._upsert(conn, write.collection, write.doc_id, fields, commit_time)

        elif isinstance(write, UpdateWrite):
            existing = await self._read_data(conn, write.collection, write.doc_id)
            if existing is None:
                raise DocumentNotFoundError(write.collection, write.doc_id)
            fields = {**existing, **_resolve_timestamps(write.fields, commit_time)}
            await self._upsert(conn, write.collection, write.doc_id, fields, commit_time)

        elif isinstance(write, ArrayUnionWrite):
            existing = await self._read_data(conn, write.collection, write.doc_id)
            if existing is None:
                raise DocumentNotFoundError(write.collection, write.doc_id)
            current = list(existing.get(write.field) or [])
            for value in json.loads(json.dumps(write.values, default=_json_default)):
                if value not in current:
                    current.append(value)
            existing[write.field] = current
            await self._upsert(conn, write.collection, write.doc_id, existing, commit_time)

        elif isinstance(write, DeleteWrite):
            await conn.execute(
                "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                (write.collection, write.doc_id),
            )

        else:
            raise ValueError(f"Unsupported write: {write!r}")

    async def _read_data(
        self, conn: aiosqlite.Connection, collection: str, doc_id: str
    ) -> dict[str, Any] | None:
        cursor = await conn.execute(
            "SELECT data FROM documents WHERE collection = ? AND doc_id = ?",
            (collection, doc_id),
        )
        row = await cursor.fetchone()
        return json.loads(row["data"]) if row else None

    async def _upsert(
        self,
        conn: aiosqlite.Connection,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        commit_time: str,
    ) -> None:
        try:
            await conn.execute(
                """
                INSERT INTO documents (collection, doc_id, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(collection, doc_id) DO UPDATE SET
                    data = excluded.data,
                    updated_at = excluded.updated_at
                """,
                (
                    collection,
                    doc_id,
                    json.dumps(fields, default=_json_default),
                    commit_time,
                    commit_time,
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "UNIQUE" not in str(e):
                raise
            raise UniqueConstraintError(collection, doc_id, str(e)) from e
