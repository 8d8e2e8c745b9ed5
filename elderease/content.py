"""JSON request parsing and response rendering."""

from __future__ import annotations

import json

from fastapi import HTTPException, Request, Response
from pydantic import BaseModel


async def parse_body(request: Request) -> dict:
    """Parse the request body as a JSON object; an empty body is ``{}``."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8").strip()
        if not text:
            return {}
        data = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise HTTPException(status_code=400, detail="Invalid JSON body") from None
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return data


def render_response(
    data: dict | list | BaseModel,
    status_code: int = 200,
    headers: dict | None = None,
) -> Response:
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return Response(
        content=json.dumps(data),
        status_code=status_code,
        media_type="application/json",
        headers=headers,
    )
