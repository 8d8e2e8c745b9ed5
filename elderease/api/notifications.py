"""Notification routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from elderease.content import render_response
from elderease.database import get_store
from elderease.models import AckResponse, ErrorResponse
from elderease.services.notifications import mark_read

router = APIRouter()


@router.patch(
    "/notifications/{notification_id}",
    response_model=AckResponse,
    responses={404: {"model": ErrorResponse}},
)
async def read(notification_id: str, store=Depends(get_store)):
    """Mark a notification as read. Safe to repeat."""
    return render_response(await mark_read(store, notification_id))
