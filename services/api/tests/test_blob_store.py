from __future__ import annotations

from pathlib import Path

import pytest
from services.api.app.services.blob_base import BlobKeyError
from services.api.app.services.blob_factory import get_blob_store
from services.api.app.services.blob_local import LocalBlobStore
from services.api.app.services.blob_memory import InMemoryBlobStore


def test_local_store_keeps_metadata(tmp_path: Path) -> None:
    store = LocalBlobStore(tmp_path)

    stored = store.put("uploads/u-1/1-a.pdf", b"%PDF", content_type="application/pdf", filename="a.pdf")
    fetched = store.get("uploads/u-1/1-a.pdf")

    assert fetched == stored
    assert fetched.size == 4
    assert store.get("uploads/u-1/missing.pdf") is None

    store.delete("uploads/u-1/1-a.pdf")
    assert store.get("uploads/u-1/1-a.pdf") is None


@pytest.mark.parametrize("key", ["", "/etc/passwd", "uploads/../secret", "uploads//x", "./x"])
def test_stores_reject_unsafe_keys(tmp_path: Path, key: str) -> None:
    for store in (LocalBlobStore(tmp_path), InMemoryBlobStore()):
        with pytest.raises(BlobKeyError):
            store.get(key)


def test_factory_selects_backend(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRINTDROP_BLOB_STORE", "local")
    monkeypatch.setenv("PRINTDROP_BLOB_DIR", str(tmp_path))
    local = get_blob_store()
    assert local.backend == "local"
    assert local.root == tmp_path.resolve()

    monkeypatch.setenv("PRINTDROP_BLOB_STORE", "memory")
    assert get_blob_store().backend == "memory"
    assert get_blob_store() is get_blob_store()

    monkeypatch.setenv("PRINTDROP_BLOB_STORE", "s3")
    with pytest.raises(ValueError):
        get_blob_store()
