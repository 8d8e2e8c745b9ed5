"""Async SQLModel database setup."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from pathlib import Path

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from elderease.db_models import Document  # noqa: F401 (register tables)
from elderease.store import SQLDocumentStore

logger = logging.getLogger("elderease.database")

_engine = None
_session_factory = None
_write_lock: asyncio.Lock | None = None

# Absolute path to the migrations directory (sibling of elderease/ package)
_MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


async def init_db(url: str = "sqlite+aiosqlite:///elderease.db") -> None:
    global _engine, _session_factory
    connect_args = {}
    if "sqlite" in url:
        connect_args["check_same_thread"] = False
        connect_args["timeout"] = 30
    _engine = create_async_engine(url, echo=False, connect_args=connect_args, pool_pre_ping=True)
    _session_factory = sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)  # type: ignore[call-overload]
    reset_write_lock()

    async with _engine.begin() as conn:
        if "sqlite" in url:
            await conn.execute(text("PRAGMA journal_mode=WAL"))
        await _run_alembic_upgrade(conn)


async def _run_alembic_upgrade(conn) -> None:
    """Run Alembic migrations using the existing async connection."""
    from alembic import command
    from alembic.config import Config

    def _do_upgrade(sync_conn):
        from alembic.migration import MigrationContext
        from alembic.script import ScriptDirectory

        alembic_cfg = Config()
        alembic_cfg.set_main_option("script_location", str(_MIGRATIONS_DIR))
        # Pass connection so env.py uses it instead of creating a new engine
        alembic_cfg.attributes["connection"] = sync_conn

        current_rev = MigrationContext.configure(sync_conn).get_current_revision()
        head_rev = ScriptDirectory.from_config(alembic_cfg).get_current_head()
        if current_rev == head_rev:
            logger.debug("Database schema is up to date at revision %s", current_rev)
            return
        logger.info("Upgrading database from %s to %s", current_rev or "(empty)", head_rev)
        command.upgrade(alembic_cfg, "head")

    # Alembic's command API is synchronous; run_sync bridges the gap
    await conn.run_sync(_do_upgrade)


async def seed_from_file(path: str) -> int:
    """Load a JSON document of named arrays into an empty database.

    Returns the number of records imported; 0 when the database already holds
    data or the file does not exist.
    """
    assert _session_factory is not None
    seed_path = Path(path)
    if not seed_path.exists():
        logger.warning("Seed file %s not found, skipping", seed_path)
        return 0

    async with _session_factory() as session:
        store = SQLDocumentStore(session, get_write_lock())
        if await store.collections():
            logger.info("Database already populated, not importing %s", seed_path)
            return 0
        data = json.loads(seed_path.read_text())
        async with store.transaction():
            count = await store.load(data)
    logger.info("Imported %d records from %s", count, seed_path)
    return count


async def close_db() -> None:
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def get_write_lock() -> asyncio.Lock:
    """The process-wide single-writer lock shared by every store instance."""
    global _write_lock
    if _write_lock is None:
        _write_lock = asyncio.Lock()
    return _write_lock


def reset_write_lock() -> None:
    global _write_lock
    _write_lock = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    assert _session_factory is not None, "Database not initialised, call init_db() first"
    async with _session_factory() as session:
        yield session


async def get_store(session: AsyncSession = Depends(get_db_session)) -> SQLDocumentStore:
    return SQLDocumentStore(session, get_write_lock())


def get_session_factory() -> sessionmaker:
    assert _session_factory is not None
    return _session_factory
