from __future__ import annotations

import os
from pathlib import Path

from services.api.app.services.blob_base import BlobStore


def get_blob_store() -> BlobStore:
    """Select a blob store based on env vars.

    Defaults to a local directory so uploads survive restarts in local dev. Set
    PRINTDROP_BLOB_STORE=memory for a process-local store.
    """

    mode = os.getenv("PRINTDROP_BLOB_STORE", "local").strip().lower()

    if mode == "local":
        from services.api.app.services.blob_local import LocalBlobStore

        return LocalBlobStore(Path(os.getenv("PRINTDROP_BLOB_DIR", ".local/blobs")))

    if mode == "memory":
        from services.api.app.services.blob_memory import store

        return store

    raise ValueError(f"Unknown PRINTDROP_BLOB_STORE={mode!r}. Expected local or memory.")
