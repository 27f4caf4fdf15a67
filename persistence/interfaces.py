from __future__ import annotations

from typing import Any, Iterator, Protocol


class DocumentSerializer(Protocol):
    """
    Turns a whole document into bytes and back.
    """

    def dumps(self, doc: dict[str, Any]) -> bytes:
        """Encode the full document. Raises EncodeError."""
        ...

    def loads(self, data: bytes) -> dict[str, Any]:
        """Decode a full document. Raises DecodeError."""
        ...


class KeyValueStore(Protocol):
    """
    Minimal key-value interface backed by a single persisted document.
    """

    def set(self, key: str, value: Any) -> None: ...
    def get(self, key: str, default: Any = None) -> Any: ...
    def get_raw(self) -> bytes: ...
    def delete(self, key: str) -> bytes: ...
    def reset(self) -> None: ...
    def keys(self) -> Iterator[str]: ...
