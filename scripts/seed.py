"""Seed a running ElderEase server with demo users, tasks and messages.

Usage:
    uv run uvicorn elderease.main:app --port 3005

    # Then seed:
    uv run python scripts/seed.py                          # localhost:3005
    uv run python scripts/seed.py https://elderease.example  # elsewhere
"""

from __future__ import annotations

import asyncio
import random
import sys

import httpx

BASE = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3005"

ELDERLY = [
    {"firstName": "Margaret", "lastName": "Hughes", "address": "12 Elm Street"},
    {"firstName": "Walter", "lastName": "Brandt", "address": "4 Harbour Lane"},
    {"firstName": "Rosa", "lastName": "Alvarez", "address": "88 Mill Road"},
]

VOLUNTEERS = [
    {"firstName": "Priya", "lastName": "Nair", "skills": "shopping, driving"},
    {"firstName": "Tom", "lastName": "Okafor", "skills": "gardening, repairs"},
    {"firstName": "Lena", "lastName": "Fischer", "skills": "technology help, reading"},
    {"firstName": "Sam", "lastName": "Carter", "skills": "dog walking, errands"},
]

TASKS = [
    {"title": "Weekly grocery run", "description": "Milk, bread, fruit and tea."},
    {"title": "Set up video calls", "description": "Help me call my grandchildren."},
    {"title": "Mow the front lawn", "description": "The mower is in the shed."},
    {"title": "Pharmacy pickup", "description": "Prescription is ready on Friday."},
    {"title": "Change a light bulb", "description": "Hallway ceiling light."},
]


async def _post(client: httpx.AsyncClient, path: str, body: dict) -> dict:
    resp = await client.post(path, json=body)
    resp.raise_for_status()
    return resp.json()


async def main() -> None:
    async with httpx.AsyncClient(base_url=BASE, timeout=10) as client:
        elderly = [
            await _post(client, "/users", {**u, "userType": "elderly"}) for u in ELDERLY
        ]
        volunteers = [
            await _post(client, "/users", {**u, "userType": "volunteer", "ratings": []})
            for u in VOLUNTEERS
        ]
        print(f"Created {len(elderly)} elderly users and {len(volunteers)} volunteers")

        for spec in TASKS:
            owner = random.choice(elderly)
            task = await _post(client, "/tasks", {**spec, "elderlyId": owner["id"]})
            print(f"  task {task['id']}: {task['title']}")

            if random.random() < 0.6:
                helper = random.choice(volunteers)
                resp = await client.patch(
                    f"/tasks/{task['id']}",
                    json={"status": "Accepted", "volunteerId": helper["id"]},
                )
                resp.raise_for_status()
                await _post(
                    client,
                    f"/tasks/{task['id']}/messages",
                    {"senderId": helper["id"], "content": "Happy to help! When suits you?"},
                )

        resp = await client.get("/notifications")
        resp.raise_for_status()
        print(f"Done. {len(resp.json())} notifications in the system.")


if __name__ == "__main__":
    asyncio.run(main())
