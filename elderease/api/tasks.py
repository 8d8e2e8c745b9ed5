"""Task lifecycle and in-task messaging routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from elderease.config import settings
from elderease.content import parse_body, render_response
from elderease.database import get_store
from elderease.models import (
    AckResponse,
    ErrorResponse,
    MessageRequest,
    MessageResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
)
from elderease.rate_limit import limiter
from elderease.services.messages import list_messages, post_message
from elderease.services.tasks import archive_task, create_task, get_task, update_task

router = APIRouter()


def _invalid_body():
    return render_response(
        {"success": False, "message": "Invalid request body"}, status_code=400
    )


@router.post(
    "/tasks",
    status_code=201,
    response_model=TaskResponse,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_create)
async def create(request: Request, store=Depends(get_store)):
    """Create a task and notify every volunteer."""
    body = await parse_body(request)
    try:
        validated = TaskCreateRequest(**body)
    except ValidationError:
        return _invalid_body()

    task = await create_task(store, validated.model_dump(exclude_unset=True))
    return render_response(task, status_code=201)


@router.get(
    "/tasks/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def read(task_id: str, store=Depends(get_store)):
    return render_response(await get_task(store, task_id))


@router.patch(
    "/tasks/{task_id}",
    response_model=AckResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update(request: Request, task_id: str, store=Depends(get_store)):
    """Merge fields into a task. Accepted, Completed and confirmed ratings notify participants."""
    body = await parse_body(request)
    try:
        validated = TaskUpdateRequest(**body)
    except ValidationError:
        return _invalid_body()

    result = await update_task(store, task_id, validated.model_dump(exclude_unset=True))
    return render_response(result)


@router.patch(
    "/tasks/{task_id}/archive",
    response_model=AckResponse,
    responses={400: {"model": ErrorResponse}},
)
async def archive(task_id: str, store=Depends(get_store)):
    """Archive a task once it is completed and confirmed by the requester."""
    return render_response(await archive_task(store, task_id))


@router.get("/tasks/{task_id}/messages", response_model=list[MessageResponse])
async def messages(task_id: str, store=Depends(get_store)):
    return render_response(await list_messages(store, task_id))


@router.post(
    "/tasks/{task_id}/messages",
    status_code=201,
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_message)
async def send(request: Request, task_id: str, store=Depends(get_store)):
    """Post a message; the other participant gets a notification."""
    body = await parse_body(request)
    try:
        validated = MessageRequest(**body)
    except ValidationError:
        return _invalid_body()

    extra = {k: v for k, v in validated.model_dump().items() if k not in ("senderId", "content")}
    msg = await post_message(store, task_id, validated.senderId, validated.content, **extra)
    return render_response(msg, status_code=201)
