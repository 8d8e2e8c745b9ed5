"""In-task messaging: append-only log plus a notification to the other participant."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException

from elderease.db_models import iso_now
from elderease.ids import message_id as make_message_id
from elderease.services.notifications import notify
from elderease.store import DocumentStore

logger = logging.getLogger("elderease.messages")

MESSAGES = "messages"


def counterpart(task: dict, sender_id: Any) -> Any:
    """The participant who is not *sender_id*. Assumes exactly two: requester and volunteer."""
    if str(sender_id) == str(task.get("elderlyId")):
        return task.get("volunteerId")
    return task.get("elderlyId")


async def list_messages(store: DocumentStore, task_id: str) -> list[dict]:
    return await store.find(MESSAGES, taskId=task_id)


async def post_message(
    store: DocumentStore, task_id: str, sender_id: Any, content: str, **extra: Any
) -> dict:
    async with store.transaction():
        task = await store.get("tasks", task_id)
        if not task:
            raise HTTPException(status_code=404, detail="Task not found")

        msg = {
            "createdAt": iso_now(),
            **extra,
            "id": make_message_id(),
            "taskId": task_id,
            "senderId": sender_id,
            "content": content,
        }
        await store.insert(MESSAGES, msg)

        recipient = counterpart(task, sender_id)
        await notify(
            store,
            recipient,
            "New Message",
            f'You have a new message in task "{task.get("title")}".',
            task_id,
        )
    logger.info("Message %s on task %s from %s to %s", msg["id"], task_id, sender_id, recipient)
    return msg
