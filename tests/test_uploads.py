"""Inline image uploads."""

from __future__ import annotations

import base64

import pytest

from elderease.config import settings

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


@pytest.mark.asyncio
async def test_upload_data_uri_and_fetch(client, upload_dir):
    payload = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
    resp = await client.post("/uploads", json={"base64": payload})
    assert resp.status_code == 201
    name = resp.json()["id"]
    assert name.endswith(".png")
    assert (upload_dir / name).read_bytes() == PNG_BYTES

    resp = await client.get(f"/uploads/{name}")
    assert resp.status_code == 200
    assert resp.content == PNG_BYTES


@pytest.mark.asyncio
async def test_upload_plain_base64(client, upload_dir):
    resp = await client.post("/uploads", json={"base64": base64.b64encode(b"abc").decode()})
    assert resp.status_code == 201
    assert (upload_dir / resp.json()["id"]).read_bytes() == b"abc"


@pytest.mark.asyncio
async def test_upload_rejects_bad_payloads(client, monkeypatch):
    resp = await client.post("/uploads", json={"base64": "not base64!!"})
    assert resp.status_code == 400

    resp = await client.post("/uploads", json={})
    assert resp.status_code == 400

    monkeypatch.setattr(settings, "max_upload_bytes", 2)
    resp = await client.post("/uploads", json={"base64": base64.b64encode(b"abc").decode()})
    assert resp.status_code == 413


@pytest.mark.asyncio
async def test_upload_write_failure(client, upload_dir):
    upload_dir.parent.mkdir(parents=True, exist_ok=True)
    upload_dir.write_text("a file where the directory should be")
    resp = await client.post("/uploads", json={"base64": base64.b64encode(b"abc").decode()})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Error saving upload"}


@pytest.mark.asyncio
async def test_missing_upload(client):
    assert (await client.get("/uploads/nope.png")).status_code == 404
    assert (await client.get("/uploads/..%2Fsecret.png")).status_code == 404
