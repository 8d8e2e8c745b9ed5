"""Generic CRUD for named collections, plus the whole-database snapshot.

Mounted last so the bespoke task, user and notification routes win.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from elderease.content import parse_body, render_response
from elderease.database import get_store
from elderease.models import ErrorResponse
from elderease.services.collections import (
    create_record,
    delete_record,
    get_record,
    list_records,
    replace_record,
    snapshot,
    update_record,
)

router = APIRouter()

_ERRORS = {
    404: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
}


@router.get("/db")
async def database_snapshot(store=Depends(get_store)):
    """Every collection as one JSON document of named arrays."""
    return render_response(await snapshot(store))


@router.get("/{collection}", responses={**_ERRORS, 400: {"model": ErrorResponse}})
async def list_collection(collection: str, request: Request, store=Depends(get_store)):
    """List records; fields filter by equality, _sort/_page and friends shape the list."""
    params = request.query_params.multi_items()
    return render_response(await list_records(store, collection, params))


@router.get("/{collection}/{record_id}", responses=_ERRORS)
async def get_one(collection: str, record_id: str, store=Depends(get_store)):
    return render_response(await get_record(store, collection, record_id))


@router.post("/{collection}", status_code=201, responses={**_ERRORS, 409: {"model": ErrorResponse}})
async def create_one(collection: str, request: Request, store=Depends(get_store)):
    body = await parse_body(request)
    return render_response(await create_record(store, collection, body), status_code=201)


@router.put("/{collection}/{record_id}", responses=_ERRORS)
async def replace_one(
    collection: str, record_id: str, request: Request, store=Depends(get_store)
):
    body = await parse_body(request)
    return render_response(await replace_record(store, collection, record_id, body))


@router.patch("/{collection}/{record_id}", responses=_ERRORS)
async def update_one(
    collection: str, record_id: str, request: Request, store=Depends(get_store)
):
    body = await parse_body(request)
    return render_response(await update_record(store, collection, record_id, body))


@router.delete("/{collection}/{record_id}", responses=_ERRORS)
async def delete_one(collection: str, record_id: str, store=Depends(get_store)):
    await delete_record(store, collection, record_id)
    return Response(content="{}", media_type="application/json")
