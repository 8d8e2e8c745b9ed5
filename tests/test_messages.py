"""In-task messaging and the counterpart notification."""

from __future__ import annotations

import pytest

from tests.conftest import notifications_for


@pytest.mark.asyncio
async def test_message_from_elderly_notifies_volunteer(accepted_task):
    c = accepted_task["client"]
    tid = accepted_task["task"]["id"]
    elderly, volunteer = accepted_task["elderly"], accepted_task["volunteer"]

    resp = await c.post(
        f"/tasks/{tid}/messages", json={"senderId": elderly["id"], "content": "Hi!"}
    )
    assert resp.status_code == 201
    msg = resp.json()
    assert msg["id"].startswith("ms_")
    assert msg["taskId"] == tid
    assert msg["senderId"] == elderly["id"]
    assert msg["content"] == "Hi!"

    notes = await notifications_for(c, title="New Message")
    assert len(notes) == 1
    assert notes[0]["userId"] == volunteer["id"]
    assert notes[0]["taskId"] == tid
    assert notes[0]["message"] == 'You have a new message in task "Groceries".'


@pytest.mark.asyncio
async def test_message_from_volunteer_notifies_elderly(accepted_task):
    c = accepted_task["client"]
    tid = accepted_task["task"]["id"]

    await c.post(
        f"/tasks/{tid}/messages",
        json={"senderId": accepted_task["volunteer"]["id"], "content": "On my way"},
    )
    notes = await notifications_for(c, title="New Message")
    assert [n["userId"] for n in notes] == [accepted_task["elderly"]["id"]]


@pytest.mark.asyncio
async def test_list_messages_in_order(accepted_task):
    c = accepted_task["client"]
    tid = accepted_task["task"]["id"]
    elderly, volunteer = accepted_task["elderly"], accepted_task["volunteer"]

    for sender, text in [(elderly, "one"), (volunteer, "two"), (elderly, "three")]:
        resp = await c.post(
            f"/tasks/{tid}/messages", json={"senderId": sender["id"], "content": text}
        )
        assert resp.status_code == 201

    resp = await c.get(f"/tasks/{tid}/messages")
    assert resp.status_code == 200
    assert [m["content"] for m in resp.json()] == ["one", "two", "three"]

    resp = await c.get("/tasks/tk_other/messages")
    assert resp.json() == []


@pytest.mark.asyncio
async def test_message_on_missing_task(participants):
    c = participants["client"]
    resp = await c.post(
        "/tasks/tk_missing/messages",
        json={"senderId": participants["elderly"]["id"], "content": "Hello?"},
    )
    assert resp.status_code == 404
    assert (await c.get("/tasks/tk_missing/messages")).json() == []
    assert await notifications_for(c) == []


@pytest.mark.asyncio
async def test_message_requires_content(accepted_task):
    c = accepted_task["client"]
    tid = accepted_task["task"]["id"]
    resp = await c.post(f"/tasks/{tid}/messages", json={"senderId": "x"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_messages_cannot_be_edited_through_collection_routes(accepted_task):
    c = accepted_task["client"]
    tid = accepted_task["task"]["id"]
    resp = await c.post(
        f"/tasks/{tid}/messages",
        json={"senderId": accepted_task["elderly"]["id"], "content": "Keep me"},
    )
    mid = resp.json()["id"]

    assert (await c.patch(f"/messages/{mid}", json={"content": "edited"})).status_code == 405
    assert (await c.delete(f"/messages/{mid}")).status_code == 405
    assert (await c.get(f"/messages/{mid}")).json()["content"] == "Keep me"
