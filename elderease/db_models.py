"""SQLModel table definitions and record vocabularies for ElderEase."""

from __future__ import annotations

import enum
from datetime import UTC, datetime

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field, SQLModel


class TaskStatus(str, enum.Enum):
    """Statuses the lifecycle engine reacts to. Any other string is stored as-is."""

    created = "Created"
    accepted = "Accepted"
    completed = "Completed"


class UserType(str, enum.Enum):
    elderly = "elderly"
    volunteer = "volunteer"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def iso_now() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision and a Z suffix."""
    return _utcnow().isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Document(SQLModel, table=True):
    """One JSON record in a named collection.

    ``seq`` preserves insertion order inside a collection; ``id`` is the
    record's own identifier, unique per collection.
    """

    __tablename__ = "documents"
    __table_args__ = (Index("ix_documents_collection_id", "collection", "id", unique=True),)

    seq: int | None = Field(default=None, primary_key=True)
    collection: str = Field(index=True)
    id: str
    body: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
