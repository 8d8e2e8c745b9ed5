"""Test fixtures with in-memory SQLite via SQLModel."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from elderease.config import settings
from elderease.database import get_db_session, reset_write_lock
from elderease.db_models import Document  # noqa: F401 (register tables)
from elderease.main import app
from elderease.rate_limit import limiter


@pytest.fixture
async def db():
    engine = create_async_engine(
        "sqlite+aiosqlite://", echo=False, connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)  # type: ignore[call-overload]

    async def override_get_db_session():
        async with factory() as session:
            yield session

    reset_write_lock()
    app.dependency_overrides[get_db_session] = override_get_db_session

    yield factory

    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest.fixture
async def client(db):
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def create_user(
    client: AsyncClient,
    user_type: str,
    first_name: str = "Test",
    last_name: str = "User",
    **fields,
) -> dict:
    """Helper: create a user through the generic users collection."""
    resp = await client.post(
        "/users",
        json={"userType": user_type, "firstName": first_name, "lastName": last_name, **fields},
    )
    assert resp.status_code == 201
    return resp.json()


async def notifications_for(client: AsyncClient, **filters) -> list[dict]:
    resp = await client.get("/notifications", params=filters)
    assert resp.status_code == 200
    return resp.json()


@pytest.fixture
async def participants(client):
    """One elderly requester and one volunteer."""
    elderly = await create_user(client, "elderly", "Ada", "Byron")
    volunteer = await create_user(client, "volunteer", "Vic", "Helper")
    return {"client": client, "elderly": elderly, "volunteer": volunteer}


@pytest.fixture
async def accepted_task(participants):
    """A task created by the elderly user and accepted by the volunteer."""
    c = participants["client"]
    resp = await c.post(
        "/tasks",
        json={"title": "Groceries", "elderlyId": participants["elderly"]["id"]},
    )
    task = resp.json()
    resp = await c.patch(
        f"/tasks/{task['id']}",
        json={"status": "Accepted", "volunteerId": participants["volunteer"]["id"]},
    )
    assert resp.status_code == 200
    return {**participants, "task": task}
