from __future__ import annotations

import hashlib

from services.api.app.services.blob_base import StoredBlob, validate_key


class InMemoryBlobStore:
    backend = "memory"

    def __init__(self) -> None:
        self._blobs: dict[str, StoredBlob] = {}

    def put(self, key: str, data: bytes, *, content_type: str, filename: str) -> StoredBlob:
        blob = StoredBlob(
            key=validate_key(key),
            data=data,
            content_type=content_type,
            filename=filename,
            etag=hashlib.md5(data).hexdigest(),
        )
        self._blobs[key] = blob
        return blob

    def get(self, key: str) -> StoredBlob | None:
        return self._blobs.get(validate_key(key))

    def delete(self, key: str) -> None:
        self._blobs.pop(validate_key(key), None)

    def keys(self) -> list[str]:
        return sorted(self._blobs)


store = InMemoryBlobStore()
