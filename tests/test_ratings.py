"""User ratings: history, average, task stamp and notification."""

from __future__ import annotations

import pytest

from elderease.services.ratings import average_rating, with_average
from tests.conftest import create_user, notifications_for


def test_average_rating():
    assert average_rating([4, 5]) == 4.5
    assert average_rating([3]) == 3
    assert average_rating([]) is None


def test_with_average_only_touches_rated_users():
    assert with_average({"id": "u"}) == {"id": "u"}
    assert with_average({"id": "u", "ratings": [1, 2]})["averageRating"] == 1.5


@pytest.mark.asyncio
async def test_rate_user_appends_and_averages(accepted_task):
    c = accepted_task["client"]
    tid = accepted_task["task"]["id"]
    vid = accepted_task["volunteer"]["id"]

    resp = await c.patch(f"/users/{vid}/rate", json={"rating": 4, "taskId": tid})
    assert resp.status_code == 200
    user = resp.json()
    assert user["ratings"] == [4]
    assert user["averageRating"] == 4

    resp = await c.patch(f"/users/{vid}/rate", json={"rating": 5, "taskId": tid})
    user = resp.json()
    assert user["ratings"] == [4, 5]
    assert user["averageRating"] == 4.5

    # Last rating wins on the task
    assert (await c.get(f"/tasks/{tid}")).json()["rating"] == 5

    notes = await notifications_for(c, title="New Rating Received")
    assert len(notes) == 2
    assert all(n["userId"] == vid for n in notes)
    assert notes[-1]["message"] == 'You received a new rating of 5 for the task "Groceries".'


@pytest.mark.asyncio
async def test_rate_user_with_existing_history(client):
    user = await create_user(client, "volunteer", ratings=[2, 3])
    assert user["averageRating"] == 2.5
    task = (await client.post("/tasks", json={"title": "Paint fence"})).json()

    resp = await client.patch(f"/users/{user['id']}/rate", json={"rating": 4, "taskId": task["id"]})
    assert resp.json()["ratings"] == [2, 3, 4]
    assert resp.json()["averageRating"] == 3


@pytest.mark.asyncio
async def test_rate_missing_user_or_task(accepted_task):
    c = accepted_task["client"]
    tid = accepted_task["task"]["id"]

    resp = await c.patch("/users/us_missing/rate", json={"rating": 4, "taskId": tid})
    assert resp.status_code == 404
    assert resp.json()["message"] == "User or task not found"

    vid = accepted_task["volunteer"]["id"]
    resp = await c.patch(f"/users/{vid}/rate", json={"rating": 4, "taskId": "tk_missing"})
    assert resp.status_code == 404
    assert "ratings" not in (await c.get(f"/users/{vid}")).json()


@pytest.mark.asyncio
async def test_rate_rejects_invalid_body(accepted_task):
    c = accepted_task["client"]
    vid = accepted_task["volunteer"]["id"]
    resp = await c.patch(f"/users/{vid}/rate", json={"rating": "great"})
    assert resp.status_code == 400
