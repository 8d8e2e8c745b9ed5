"""Task lifecycle service: state transitions and the notifications they fan out."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException

from elderease.db_models import TaskStatus, UserType
from elderease.ids import task_id as make_task_id
from elderease.services.notifications import notify
from elderease.store import DocumentStore

logger = logging.getLogger("elderease.tasks")

TASKS = "tasks"
USERS = "users"


def _can_archive(task: dict) -> bool:
    return task.get("status") == TaskStatus.completed.value and bool(task.get("elderlyConfirmed"))


def _volunteer_name(volunteer: dict) -> str:
    return f"{volunteer.get('firstName', '')} {volunteer.get('lastName', '')}".strip()


async def _find_user(store: DocumentStore, uid: Any) -> dict | None:
    if uid is None:
        return None
    return await store.get(USERS, uid)


async def get_task(store: DocumentStore, tid: str) -> dict:
    task = await store.get(TASKS, tid)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


async def create_task(store: DocumentStore, details: dict) -> dict:
    """Create a task and tell every volunteer about it.

    Caller fields are stored as given, nulls included; status and
    elderlyConfirmed fall back to their defaults only when absent.
    """
    record = {
        "status": TaskStatus.created.value,
        "elderlyConfirmed": False,
        **details,
        "id": make_task_id(),
        "archived": False,
    }
    async with store.transaction():
        task = await store.insert(TASKS, record)
        volunteers = await store.find(USERS, userType=UserType.volunteer.value)
        logger.info(
            "Task %s created, notifying %d volunteers", task["id"], len(volunteers)
        )
        for volunteer in volunteers:
            await notify(
                store,
                volunteer["id"],
                "New Task Available",
                f'A new task "{task.get("title")}" is available.',
                task["id"],
            )
    return task


async def update_task(store: DocumentStore, tid: str, patch: dict) -> dict:
    """Merge *patch* into the task, then fire the first matching notification rule.

    Rules, in priority order:
    1. status -> Accepted: the requester hears who accepted.
    2. status -> Completed: requester and volunteer both hear.
    3. elderlyConfirmed with a rating: the volunteer hears the rating.
    """
    async with store.transaction():
        current = await store.get(TASKS, tid)
        if not current:
            raise HTTPException(status_code=404, detail="Task not found")

        status = patch.get("status")
        volunteer = None
        if status == TaskStatus.accepted.value:
            volunteer = await _find_user(
                store, patch.get("volunteerId", current.get("volunteerId"))
            )
            if not volunteer:
                raise HTTPException(status_code=404, detail="Volunteer not found")

        if patch.get("archived") and not _can_archive({**current, **patch}):
            raise HTTPException(status_code=400, detail="Task cannot be archived")

        task = await store.update(TASKS, tid, patch)
        logger.info("Task %s updated: %s", tid, patch)
        title = task.get("title")

        if status == TaskStatus.accepted.value:
            await notify(
                store,
                task.get("elderlyId"),
                "Task Accepted",
                f'Your task "{title}" has been accepted by {_volunteer_name(volunteer)}.',
                tid,
            )
        elif status == TaskStatus.completed.value:
            await notify(
                store,
                task.get("elderlyId"),
                "Task Completed",
                f'Your task "{title}" has been marked as completed. '
                "Please confirm and rate the volunteer.",
                tid,
            )
            await notify(
                store,
                task.get("volunteerId"),
                "Task Completed",
                f'You have marked the task "{title}" as completed. '
                "Waiting for elderly confirmation.",
                tid,
            )
        elif patch.get("elderlyConfirmed") and patch.get("rating") is not None:
            await notify(
                store,
                task.get("volunteerId"),
                "Task Rated",
                f'The task "{title}" has been confirmed completed '
                f"and you've received a rating of {patch['rating']}.",
                tid,
            )

    return {"success": True, "message": "Task updated successfully"}


async def archive_task(store: DocumentStore, tid: str) -> dict:
    """Archive a completed, confirmed task. Emits no notification."""
    async with store.transaction():
        task = await store.get(TASKS, tid)
        if not task or not _can_archive(task):
            raise HTTPException(status_code=400, detail="Task cannot be archived")
        await store.update(TASKS, tid, {"archived": True})
    logger.info("Task %s archived", tid)
    return {"success": True, "message": "Task archived successfully"}
