from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, TypeVar

from pydantic import BaseModel

import json_store

from .errors import DecodeError
from .interfaces import DocumentSerializer, KeyValueStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ToiletDB(KeyValueStore):
    """
    Key-value store that flushes its whole state to one JSON file.

    - Loads the file once on construction; missing or zero-byte files start empty.
    - Refuses to open over content it cannot decode (DecodeError).
    - Every mutation updates memory first, then rewrites the file atomically.
    """

    def __init__(
        self,
        path: str | Path,
        serializer: DocumentSerializer | None = None,
        *,
        fsync: bool = True,
    ):
        self._path = Path(path)
        self._serializer = serializer or json_store.JsonSerializer()
        self._fsync = fsync
        self._state = self._load()
        logger.debug("OPEN: %s (%d keys)", self._path, len(self._state))

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        raw = json_store.read_bytes(self._path)
        if not raw:
            return {}
        try:
            return self._serializer.loads(raw)
        except DecodeError as e:
            raise DecodeError(f"refusing to open {self._path}: {e}", path=self._path) from e

    def _persist(self) -> None:
        json_store.persist(self._path, self._state, self._serializer, fsync=self._fsync)

    def set(self, key: str, value: Any) -> None:
        """
        Sets `key` to `value` and rewrites the file.

        The candidate document is encoded before memory changes, so an
        EncodeError leaves the store as it was. If the write itself fails the
        in-memory value is kept; reopen to resync with disk.
        """
        if not isinstance(key, str):
            raise TypeError(f"keys must be str, not {type(key).__name__}")
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        candidate = {**self._state, key: value}
        data = self._serializer.dumps(candidate)
        self._state = candidate
        json_store.atomic_write_bytes(self._path, data, fsync=self._fsync)
        logger.debug("SET: %s in %s (%d keys, %d bytes)", key, self._path, len(candidate), len(data))

    def get(self, key: str, default: Any = None) -> Any:
        return self._state.get(key, default)

    def get_model(self, key: str, model_cls: type[ModelT]) -> ModelT | None:
        if key not in self._state:
            return None
        return model_cls.model_validate(self._state[key])

    def get_raw(self) -> bytes:
        """Exact bytes currently on disk, read from the file rather than memory."""
        return self._path.read_bytes()

    def delete(self, key: str) -> bytes:
        """Removes `key` (no-op if absent), rewrites the file and returns its raw content."""
        self._state.pop(key, None)
        self._persist()
        return self.get_raw()

    def reset(self) -> None:
        """Clears state and deletes the file. A missing file is not an error."""
        self._state = {}
        self._path.unlink(missing_ok=True)
        logger.debug("RESET: %s", self._path)

    def keys(self) -> Iterator[str]:
        return iter(list(self._state))

    def to_dict(self) -> dict[str, Any]:
        return dict(self._state)

    def __contains__(self, key: object) -> bool:
        return key in self._state

    def __len__(self) -> int:
        return len(self._state)

    def __repr__(self) -> str:
        return f"ToiletDB(path={str(self._path)!r}, keys={len(self._state)})"


def open_db(path: str | Path, serializer: DocumentSerializer | None = None, *, fsync: bool = True) -> ToiletDB:
    return ToiletDB(path, serializer, fsync=fsync)
