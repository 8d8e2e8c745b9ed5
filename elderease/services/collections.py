"""Generic collection CRUD behind the fallback router."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException

from elderease.config import settings
from elderease.services.ratings import with_average
from elderease.store import DocumentStore

logger = logging.getLogger("elderease.collections")

# Verbs refused on collections whose records only change through the lifecycle services.
GUARDED_VERBS: dict[str, set[str]] = {
    "tasks": {"PUT", "DELETE"},
    "notifications": {"POST", "PUT", "DELETE"},
    "messages": {"POST", "PUT", "PATCH", "DELETE"},
}


def _normalize(collection: str, record: dict) -> dict:
    if collection == "users":
        return with_average(record)
    return record


CONTROL_PARAMS = {"_sort", "_order", "_limit", "_page", "_start", "_end"}
DEFAULT_PAGE_SIZE = 10


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _split_query(
    params: list[tuple[str, str]],
) -> tuple[dict[str, list[str]], dict[str, str]]:
    """Separate field filters (repeated keys mean "any of") from control parameters."""
    filters: dict[str, list[str]] = {}
    controls: dict[str, str] = {}
    for key, value in params:
        if key.startswith("_"):
            if key not in CONTROL_PARAMS:
                raise HTTPException(status_code=400, detail=f"Unsupported query parameter '{key}'")
            controls[key] = value
        else:
            filters.setdefault(key, []).append(value)
    return filters, controls


def _query_matches(record: dict, filters: dict[str, list[str]]) -> bool:
    return all(_as_text(record.get(field)) in allowed for field, allowed in filters.items())


def _sort_key(field: str):
    def key(record: dict):
        value = record.get(field)
        if value is None:
            return (2, 0, "")
        if isinstance(value, (int, float)):
            return (0, value, "")
        return (1, 0, _as_text(value))

    return key


def _int_param(controls: dict[str, str], name: str) -> int | None:
    if name not in controls:
        return None
    try:
        number = int(controls[name])
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{name} must be an integer") from None
    if number < 0:
        raise HTTPException(status_code=400, detail=f"{name} must not be negative")
    return number


def _apply_controls(records: list[dict], controls: dict[str, str]) -> list[dict]:
    """json-server style sorting and paging over an already filtered list."""
    if "_sort" in controls:
        fields = [f for f in controls["_sort"].split(",") if f]
        orders = controls.get("_order", "asc").split(",")
        # Stable sorts, least significant field first
        for i in reversed(range(len(fields))):
            order = orders[i] if i < len(orders) else orders[-1]
            if order not in ("asc", "desc"):
                raise HTTPException(status_code=400, detail="_order must be asc or desc")
            records = sorted(records, key=_sort_key(fields[i]), reverse=order == "desc")

    limit = _int_param(controls, "_limit")
    page = _int_param(controls, "_page")
    if page is not None:
        size = limit if limit is not None else DEFAULT_PAGE_SIZE
        start = max(page - 1, 0) * size
        return records[start : start + size]

    start = _int_param(controls, "_start") or 0
    end = _int_param(controls, "_end")
    if end is None and limit is not None:
        end = start + limit
    return records[start:end]


async def ensure_collection(store: DocumentStore, collection: str, verb: str) -> None:
    if collection not in settings.collections and collection not in await store.collections():
        raise HTTPException(status_code=404, detail=f"Unknown collection '{collection}'")
    if verb in GUARDED_VERBS.get(collection, set()):
        raise HTTPException(
            status_code=405, detail=f"{verb} is not allowed on {collection}"
        )


async def list_records(
    store: DocumentStore, collection: str, params: list[tuple[str, str]]
) -> list[dict]:
    """Records matching every field filter, then sorted and paged by the control parameters."""
    await ensure_collection(store, collection, "GET")
    filters, controls = _split_query(params)
    records = await store.find(collection, lambda r: _query_matches(r, filters))
    return _apply_controls(records, controls)


async def get_record(store: DocumentStore, collection: str, record_id: str) -> dict:
    await ensure_collection(store, collection, "GET")
    record = await store.get(collection, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return record


async def create_record(store: DocumentStore, collection: str, body: dict) -> dict:
    await ensure_collection(store, collection, "POST")
    async with store.transaction():
        if body.get("id") is not None and await store.get(collection, body["id"]):
            raise HTTPException(status_code=409, detail=f"Duplicate id '{body['id']}'")
        record = await store.insert(collection, _normalize(collection, body))
    logger.info("Created %s/%s", collection, record["id"])
    return record


async def replace_record(
    store: DocumentStore, collection: str, record_id: str, body: dict
) -> dict:
    await ensure_collection(store, collection, "PUT")
    async with store.transaction():
        record = await store.replace(collection, record_id, _normalize(collection, body))
    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return record


async def update_record(
    store: DocumentStore, collection: str, record_id: str, patch: dict[str, Any]
) -> dict:
    await ensure_collection(store, collection, "PATCH")
    async with store.transaction():
        current = await store.get(collection, record_id)
        if current is None:
            raise HTTPException(status_code=404, detail="Record not found")
        merged = _normalize(collection, {**current, **patch})
        record = await store.replace(collection, record_id, merged)
    return record


async def delete_record(store: DocumentStore, collection: str, record_id: str) -> None:
    await ensure_collection(store, collection, "DELETE")
    async with store.transaction():
        deleted = await store.delete(collection, record_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Record not found")
    logger.info("Deleted %s/%s", collection, record_id)


async def snapshot(store: DocumentStore) -> dict[str, list[dict]]:
    """Whole database; configured collections appear even when empty."""
    data: dict[str, list[dict]] = {name: [] for name in settings.collections}
    data.update(await store.snapshot())
    return data
