from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class BlobStoreError(Exception):
    """Base class for blob store errors."""


class BlobKeyError(BlobStoreError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Invalid blob key: {key!r}")
        self.key = key


@dataclass(frozen=True, slots=True)
class StoredBlob:
    key: str
    data: bytes
    content_type: str
    filename: str
    etag: str

    @property
    def size(self) -> int:
        return len(self.data)


class BlobStore(Protocol):
    backend: str

    def put(self, key: str, data: bytes, *, content_type: str, filename: str) -> StoredBlob: ...

    def get(self, key: str) -> StoredBlob | None: ...

    def delete(self, key: str) -> None: ...


def validate_key(key: str) -> str:
    parts = key.split("/")
    if not key or key.startswith("/") or any(p in {"", ".", ".."} for p in parts):
        raise BlobKeyError(key)
    return key
