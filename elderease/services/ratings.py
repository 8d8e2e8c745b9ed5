"""User ratings: history, aggregate and the rated user's notification."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fastapi import HTTPException

from elderease.services.notifications import notify
from elderease.store import DocumentStore

logger = logging.getLogger("elderease.ratings")


def average_rating(ratings: Sequence[float]) -> float | None:
    """Arithmetic mean of *ratings*; None for an empty history."""
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


async def rate_user(store: DocumentStore, user_id: str, rating: float, task_id: str) -> dict:
    """Append *rating* to the user's history and stamp it on the task (last write wins)."""
    async with store.transaction():
        user = await store.get("users", user_id)
        task = await store.get("tasks", task_id)
        if not user or not task:
            raise HTTPException(status_code=404, detail="User or task not found")

        ratings = [*(user.get("ratings") or []), rating]
        user = await store.update(
            "users", user_id, {"ratings": ratings, "averageRating": average_rating(ratings)}
        )
        await store.update("tasks", task_id, {"rating": rating})

        await notify(
            store,
            user["id"],
            "New Rating Received",
            f'You received a new rating of {rating} for the task "{task.get("title")}".',
            task_id,
        )
    logger.info(
        "User %s rated %s for task %s (average %s)",
        user_id,
        rating,
        task_id,
        user["averageRating"],
    )
    return user


def with_average(user: dict) -> dict:
    """Recompute ``averageRating`` when a user record carries a ratings list."""
    if "ratings" not in user:
        return user
    ratings = user.get("ratings") or []
    return {**user, "ratings": ratings, "averageRating": average_rating(ratings)}
