from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from persistence.errors import DecodeError, EncodeError
from persistence.interfaces import DocumentSerializer

logger = logging.getLogger(__name__)


class JsonSerializer(DocumentSerializer):
    """
    Pretty-printed UTF-8 JSON with a trailing newline.
    """

    def __init__(self, *, indent: int | None = 2, sort_keys: bool = True, ensure_ascii: bool = False):
        self.indent = indent
        self.sort_keys = sort_keys
        self.ensure_ascii = ensure_ascii

    def dumps(self, doc: dict[str, Any]) -> bytes:
        try:
            text = json.dumps(
                doc,
                indent=self.indent,
                sort_keys=self.sort_keys,
                ensure_ascii=self.ensure_ascii,
                allow_nan=False,
            )
        except (TypeError, ValueError) as e:
            raise EncodeError(f"document is not JSON serializable: {e}") from e
        return (text + "\n").encode("utf-8")

    def loads(self, data: bytes) -> dict[str, Any]:
        try:
            doc = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"invalid JSON document: {e}") from e
        if not isinstance(doc, dict):
            raise DecodeError(f"expected a JSON object at top level, got {type(doc).__name__}")
        return doc


def read_bytes(path: Path) -> bytes | None:
    """
    Read a file's exact bytes.

    Returns None for missing files. Any other I/O error propagates.
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None


def atomic_write_bytes(path: Path, data: bytes, *, fsync: bool = True) -> None:
    """
    Atomically write bytes to disk by writing to a scratch file then replacing.

    The scratch file lives next to `path` so the final os.replace is a rename
    on the same volume. On any failure the scratch file is removed and `path`
    keeps its previous content (or stays absent).
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        f = os.fdopen(fd, "wb")
    except BaseException:
        os.close(fd)
        _discard(tmp)
        raise
    try:
        with f:
            f.write(data)
            f.flush()
            if fsync:
                os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        _discard(tmp)
        raise


def _discard(tmp: str) -> None:
    try:
        os.unlink(tmp)
    except FileNotFoundError:
        pass


def persist(
    path: Path,
    document: dict[str, Any],
    serializer: DocumentSerializer | None = None,
    *,
    fsync: bool = True,
) -> None:
    """
    Serialize the whole document, then atomically swap it onto `path`.

    Serialization happens before any file is created, so an EncodeError
    never leaves anything on disk.
    """
    data = (serializer or JsonSerializer()).dumps(document)
    atomic_write_bytes(path, data, fsync=fsync)
    logger.debug("PERSIST: wrote %d keys (%d bytes) to %s", len(document), len(data), path)
