"""Notification read state and per-user listing."""

from __future__ import annotations

import pytest

from tests.conftest import notifications_for


@pytest.mark.asyncio
async def test_mark_read_is_idempotent(accepted_task):
    c = accepted_task["client"]
    note = (await notifications_for(c, title="Task Accepted"))[0]

    for _ in range(2):
        resp = await c.patch(f"/notifications/{note['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Notification marked as read"}

    resp = await c.get(f"/notifications/{note['id']}")
    assert resp.json()["read"] is True


@pytest.mark.asyncio
async def test_mark_read_missing(client):
    resp = await client.patch("/notifications/nt_missing")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Notification not found"}


@pytest.mark.asyncio
async def test_list_user_notifications(accepted_task):
    c = accepted_task["client"]
    vid = accepted_task["volunteer"]["id"]
    tid = accepted_task["task"]["id"]
    await c.patch(f"/tasks/{tid}", json={"status": "Completed"})

    resp = await c.get(f"/users/{vid}/notifications")
    assert resp.status_code == 200
    titles = [n["title"] for n in resp.json()]
    assert titles == ["New Task Available", "Task Completed"]

    first = resp.json()[0]
    await c.patch(f"/notifications/{first['id']}")
    resp = await c.get(f"/users/{vid}/notifications", params={"unread": "true"})
    assert [n["title"] for n in resp.json()] == ["Task Completed"]

    # The generic filter sees the same read state
    unread = await notifications_for(c, userId=vid, read="false")
    assert [n["id"] for n in unread] == [n["id"] for n in resp.json()]


@pytest.mark.asyncio
async def test_notifications_are_not_created_or_deleted_directly(accepted_task):
    c = accepted_task["client"]
    resp = await c.post("/notifications", json={"userId": "x", "title": "t", "message": "m"})
    assert resp.status_code == 405

    note = (await notifications_for(c))[0]
    assert (await c.delete(f"/notifications/{note['id']}")).status_code == 405
    assert (await c.get(f"/notifications/{note['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_bad_query_parameter_uses_error_shape(client):
    resp = await client.get("/users/us_x/notifications", params={"unread": "maybe"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Invalid request parameters"}
