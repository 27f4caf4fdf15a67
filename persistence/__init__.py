from __future__ import annotations

from .errors import DecodeError, EncodeError, StoreError
from .interfaces import DocumentSerializer, KeyValueStore
from .disk_store import ToiletDB, open_db

__all__ = [
    "DecodeError",
    "EncodeError",
    "StoreError",
    "DocumentSerializer",
    "KeyValueStore",
    "ToiletDB",
    "open_db",
]
