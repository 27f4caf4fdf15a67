from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def create_app(db=None) -> FastAPI:
    """
    Build the HTTP app around one store.

    Run with: uvicorn app:create_app --factory
    """
    load_dotenv("local.env")

    import json_store
    from endpoints.store_endpoints import build_router
    from persistence.disk_store import ToiletDB
    from settings import get_settings

    settings = get_settings()
    if db is None:
        serializer = json_store.JsonSerializer(indent=settings.indent, sort_keys=settings.sort_keys)
        db = ToiletDB(settings.db_path, serializer, fsync=settings.fsync)
    logger.info("Serving store at %s (%d keys)", db.path, len(db))

    app = FastAPI()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok", "path": str(db.path)}

    app.include_router(build_router(db, log_requests=settings.debug_log_requests))

    return app
