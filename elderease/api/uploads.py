"""Image upload and retrieval routes."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse
from pydantic import ValidationError

from elderease.config import settings
from elderease.content import parse_body, render_response
from elderease.models import ErrorResponse, UploadRequest, UploadResponse
from elderease.rate_limit import limiter
from elderease.services.uploads import resolve_upload, save_upload

router = APIRouter()


@router.post(
    "/uploads",
    status_code=201,
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_upload)
async def upload(request: Request):
    """Store a base64 image (plain or data URI) and return its file name."""
    body = await parse_body(request)
    try:
        validated = UploadRequest(**body)
    except ValidationError:
        return render_response(
            {"success": False, "message": "Invalid request body"}, status_code=400
        )
    return render_response(save_upload(validated.base64), status_code=201)


@router.get("/uploads/{name}", responses={404: {"model": ErrorResponse}})
async def serve(name: str):
    return FileResponse(resolve_upload(name))
