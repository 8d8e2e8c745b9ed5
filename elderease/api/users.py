"""User rating and per-user notification routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from elderease.content import parse_body, render_response
from elderease.database import get_store
from elderease.models import (
    ErrorResponse,
    NotificationResponse,
    RateRequest,
    UserResponse,
)
from elderease.services.notifications import list_for_user
from elderease.services.ratings import rate_user

router = APIRouter()


@router.patch(
    "/users/{user_id}/rate",
    response_model=UserResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def rate(request: Request, user_id: str, store=Depends(get_store)):
    """Add a rating to a user's history and record it on the task."""
    body = await parse_body(request)
    try:
        validated = RateRequest(**body)
    except ValidationError:
        return render_response(
            {"success": False, "message": "Invalid request body"}, status_code=400
        )

    user = await rate_user(store, user_id, validated.rating, validated.taskId)
    return render_response(user)


@router.get("/users/{user_id}/notifications", response_model=list[NotificationResponse])
async def notifications(user_id: str, unread: bool = False, store=Depends(get_store)):
    return render_response(await list_for_user(store, user_id, unread_only=unread))
