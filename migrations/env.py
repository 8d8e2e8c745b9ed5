"""Alembic environment for the ElderEase document database.

Runs on the connection handed over by ``elderease.database`` at startup, or
on a fresh engine built from settings when invoked as ``alembic upgrade head``.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlmodel import SQLModel

from elderease.db_models import Document  # noqa: F401 (register tables)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def _cli_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    from elderease.config import settings

    db_path = settings.database_url
    if db_path.startswith("sqlite"):
        return db_path.replace("sqlite+aiosqlite", "sqlite")
    return f"sqlite:///{db_path}"


def _migrate(connection) -> None:
    # Batch mode: SQLite cannot ALTER most column properties in place
    context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    context.configure(
        url=_cli_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is not None:
        _migrate(connection)
        return

    engine = create_engine(_cli_url(), poolclass=pool.NullPool)
    with engine.connect() as conn:
        _migrate(conn)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
