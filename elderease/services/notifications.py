"""Notification service: the single place user-visible alerts are created."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException

from elderease.db_models import iso_now
from elderease.ids import notification_id
from elderease.store import DocumentStore

logger = logging.getLogger("elderease.notifications")

NOTIFICATIONS = "notifications"


async def notify(
    store: DocumentStore,
    user_id: Any,
    title: str,
    message: str,
    task_id: str | None,
) -> dict:
    """Persist one unread notification for *user_id*.

    The recipient is not validated. Callers run inside ``store.transaction()``.
    """
    notification = {
        "id": notification_id(),
        "userId": user_id,
        "title": title,
        "message": message,
        "taskId": task_id,
        "read": False,
        "createdAt": iso_now(),
    }
    await store.insert(NOTIFICATIONS, notification)
    logger.info("Notification %s (%s) for user %s", notification["id"], title, user_id)
    return notification


async def mark_read(store: DocumentStore, nid: str) -> dict:
    async with store.transaction():
        updated = await store.update(NOTIFICATIONS, nid, {"read": True})
    if updated is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True, "message": "Notification marked as read"}


async def list_for_user(
    store: DocumentStore, user_id: str, unread_only: bool = False
) -> list[dict]:
    """A user's notifications in creation order."""
    return await store.find(
        NOTIFICATIONS,
        lambda n: str(n.get("userId")) == user_id and not (unread_only and n.get("read")),
    )
