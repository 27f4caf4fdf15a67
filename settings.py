from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    # Storage
    db_path: Path

    # Serializer
    indent: int
    sort_keys: bool

    # Durability
    fsync: bool

    # Debug
    debug_log_requests: bool


def get_settings() -> Settings:
    db_path = Path(os.getenv("TOILETDB_PATH", "data.json")).expanduser()

    indent = _env_int("TOILETDB_INDENT", 2)
    sort_keys = _env_bool("TOILETDB_SORT_KEYS", True)

    # Turning this off trades crash durability for speed (e.g. on tmpfs in tests).
    fsync = _env_bool("TOILETDB_FSYNC", True)

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return Settings(
        db_path=db_path,
        indent=indent,
        sort_keys=sort_keys,
        fsync=fsync,
        debug_log_requests=debug_log_requests,
    )
