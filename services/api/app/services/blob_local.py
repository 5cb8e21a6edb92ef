from __future__ import annotations

import hashlib
import json
from pathlib import Path

from services.api.app.services.blob_base import BlobKeyError, StoredBlob, validate_key


class LocalBlobStore:
    """Filesystem blob store.

    Layout under ``root``:
      blobs/<key>        raw bytes
      meta/<key>.json    content type, filename and etag
    """

    backend = "local"

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()
        self._blob_root = self._root / "blobs"
        self._meta_root = self._root / "meta"

    @property
    def root(self) -> Path:
        return self._root

    def _paths(self, key: str) -> tuple[Path, Path]:
        validate_key(key)
        blob_path = (self._blob_root / key).resolve()
        meta_path = (self._meta_root / f"{key}.json").resolve()
        if not blob_path.is_relative_to(self._blob_root) or not meta_path.is_relative_to(
            self._meta_root
        ):
            raise BlobKeyError(key)
        return blob_path, meta_path

    def put(self, key: str, data: bytes, *, content_type: str, filename: str) -> StoredBlob:
        blob_path, meta_path = self._paths(key)
        etag = hashlib.md5(data).hexdigest()

        blob_path.parent.mkdir(parents=True, exist_ok=True)
        meta_path.parent.mkdir(parents=True, exist_ok=True)
        blob_path.write_bytes(data)
        meta_path.write_text(
            json.dumps({"content_type": content_type, "filename": filename, "etag": etag}),
            encoding="utf-8",
        )

        return StoredBlob(
            key=key, data=data, content_type=content_type, filename=filename, etag=etag
        )

    def get(self, key: str) -> StoredBlob | None:
        blob_path, meta_path = self._paths(key)
        if not blob_path.is_file():
            return None

        data = blob_path.read_bytes()
        meta: dict = {}
        if meta_path.is_file():
            meta = json.loads(meta_path.read_text(encoding="utf-8"))

        return StoredBlob(
            key=key,
            data=data,
            content_type=meta.get("content_type", "application/octet-stream"),
            filename=meta.get("filename", Path(key).name),
            etag=meta.get("etag") or hashlib.md5(data).hexdigest(),
        )

    def delete(self, key: str) -> None:
        blob_path, meta_path = self._paths(key)
        blob_path.unlink(missing_ok=True)
        meta_path.unlink(missing_ok=True)
