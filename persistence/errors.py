from __future__ import annotations

from pathlib import Path


class StoreError(Exception):
    """Base class for store-specific failures. I/O failures stay plain OSError."""


class DecodeError(StoreError, ValueError):
    """
    Existing on-disk content is not a valid document.

    Raised by the store on open instead of discarding the file.
    """

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class EncodeError(StoreError, TypeError):
    """A value cannot be represented by the serializer."""
