"""Collection-oriented document store backed by the ``documents`` table."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from elderease.db_models import Document, _utcnow
from elderease.ids import id_for

logger = logging.getLogger("elderease.store")

Record = dict[str, Any]
Predicate = Callable[[Record], bool]


class DocumentStore(Protocol):
    """What the services need from persistence: named collections of JSON records."""

    def transaction(self) -> Any: ...

    async def collections(self) -> list[str]: ...

    async def all(self, collection: str) -> list[Record]: ...

    async def find(
        self, collection: str, where: Predicate | None = None, **fields: Any
    ) -> list[Record]: ...

    async def get(self, collection: str, record_id: Any) -> Record | None: ...

    async def insert(self, collection: str, record: Record) -> Record: ...

    async def update(self, collection: str, record_id: Any, patch: Record) -> Record | None: ...

    async def replace(self, collection: str, record_id: Any, record: Record) -> Record | None: ...

    async def delete(self, collection: str, record_id: Any) -> bool: ...

    async def snapshot(self) -> dict[str, list[Record]]: ...

    async def load(self, data: dict[str, list[Record]]) -> int: ...


def _key(record_id: Any) -> str:
    return str(record_id)


def matches(record: Record, fields: dict[str, Any]) -> bool:
    return all(record.get(k) == v for k, v in fields.items())


class SQLDocumentStore:
    """DocumentStore on an async SQLAlchemy session.

    Writes are only flushed; ``transaction()`` serialises writers on a shared
    lock and commits (or rolls back) once per logical operation.
    """

    def __init__(self, session: AsyncSession, lock: asyncio.Lock):
        self.session = session
        self._lock = lock

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLDocumentStore]:
        async with self._lock:
            try:
                yield self
                await self.session.commit()
            except BaseException:
                await self.session.rollback()
                raise

    async def _row(self, collection: str, record_id: Any) -> Document | None:
        result = await self.session.execute(
            select(Document).where(
                Document.collection == collection, Document.id == _key(record_id)
            )
        )
        return result.scalar_one_or_none()

    async def collections(self) -> list[str]:
        result = await self.session.execute(
            select(Document.collection).distinct().order_by(Document.collection)
        )
        return list(result.scalars().all())

    async def all(self, collection: str) -> list[Record]:
        result = await self.session.execute(
            select(Document).where(Document.collection == collection).order_by(Document.seq)
        )
        return [dict(row.body) for row in result.scalars().all()]

    async def find(
        self, collection: str, where: Predicate | None = None, **fields: Any
    ) -> list[Record]:
        records = await self.all(collection)
        return [r for r in records if matches(r, fields) and (where is None or where(r))]

    async def get(self, collection: str, record_id: Any) -> Record | None:
        row = await self._row(collection, record_id)
        return dict(row.body) if row else None

    async def insert(self, collection: str, record: Record) -> Record:
        body = dict(record)
        if body.get("id") is None:
            body["id"] = id_for(collection)
        row = Document(collection=collection, id=_key(body["id"]), body=body)
        self.session.add(row)
        await self.session.flush()
        return dict(body)

    async def update(self, collection: str, record_id: Any, patch: Record) -> Record | None:
        row = await self._row(collection, record_id)
        if not row:
            return None
        # The id is the row key; a patch never moves a record.
        merged = {**row.body, **patch, "id": row.body.get("id", record_id)}
        row.body = merged
        row.updated_at = _utcnow()
        self.session.add(row)
        await self.session.flush()
        return dict(merged)

    async def replace(self, collection: str, record_id: Any, record: Record) -> Record | None:
        row = await self._row(collection, record_id)
        if not row:
            return None
        body = {**record, "id": row.body.get("id", record_id)}
        row.body = body
        row.updated_at = _utcnow()
        self.session.add(row)
        await self.session.flush()
        return dict(body)

    async def delete(self, collection: str, record_id: Any) -> bool:
        row = await self._row(collection, record_id)
        if not row:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def snapshot(self) -> dict[str, list[Record]]:
        """The whole database as one document of named top-level arrays."""
        result = await self.session.execute(
            select(Document).order_by(Document.collection, Document.seq)
        )
        data: dict[str, list[Record]] = {}
        for row in result.scalars().all():
            data.setdefault(row.collection, []).append(dict(row.body))
        return data

    async def load(self, data: dict[str, list[Record]]) -> int:
        """Insert every record of a snapshot document, keeping array order."""
        count = 0
        for collection, records in data.items():
            if not isinstance(records, list):
                logger.warning("Skipping non-array top-level key %r", collection)
                continue
            for record in records:
                await self.insert(collection, record)
                count += 1
        return count
