from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, TypeVar

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel

from persistence.disk_store import ToiletDB
from persistence.errors import EncodeError

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

T = TypeVar("T")

_MISSING = object()


class ValueBody(BaseModel):
    value: Any


class KeyValueRecord(BaseModel):
    key: str
    value: Any = None


def build_router(db: ToiletDB, *, log_requests: bool = False) -> APIRouter:
    """
    Expose one store over HTTP.

    Store calls go through asyncio.to_thread and hold one lock per router, so
    only one of them touches the store at a time.
    """
    router = APIRouter(prefix="/kv", tags=["kv"])
    lock = threading.Lock()

    async def _run(fn: Callable[..., T], *args: Any) -> T:
        def _locked() -> T:
            with lock:
                return fn(*args)

        return await asyncio.to_thread(_locked)

    def _log(op: str, key: str | None = None) -> None:
        if log_requests:
            logger.info("KV %s: key=%s path=%s", op, key, db.path)

    @router.get("")
    async def get_document() -> dict[str, Any]:
        _log("DOCUMENT")
        return await _run(db.to_dict)

    @router.delete("", status_code=204)
    async def reset_document() -> Response:
        _log("RESET")
        await _run(db.reset)
        return Response(status_code=204)

    @router.get("/raw")
    async def get_raw() -> Response:
        _log("RAW")
        try:
            raw = await _run(db.get_raw)
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail="nothing persisted yet")
        return Response(content=raw, media_type=JSON_MEDIA_TYPE)

    @router.get("/{key}", response_model=KeyValueRecord)
    async def get_key(key: str) -> KeyValueRecord:
        _log("GET", key)
        value = await _run(db.get, key, _MISSING)
        if value is _MISSING:
            raise HTTPException(status_code=404, detail=f"unknown key: {key}")
        return KeyValueRecord(key=key, value=value)

    @router.put("/{key}", response_model=KeyValueRecord)
    async def put_key(key: str, body: ValueBody) -> KeyValueRecord:
        _log("SET", key)
        try:
            await _run(db.set, key, body.value)
        except EncodeError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return KeyValueRecord(key=key, value=body.value)

    @router.delete("/{key}")
    async def delete_key(key: str) -> Response:
        _log("DELETE", key)
        raw = await _run(db.delete, key)
        return Response(content=raw, media_type=JSON_MEDIA_TYPE)

    return router
