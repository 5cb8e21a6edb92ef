from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from uuid import uuid4

from packages.shared.schemas.order_v1 import OrderStatusV1
from services.api.app.db.models import Order, OrderFile
from services.api.app.services.blob_base import BlobKeyError, BlobStore, StoredBlob
from services.api.app.services.errors import (
    FileNotFound,
    FileTooLarge,
    Forbidden,
    StorageFailure,
    UnsupportedType,
    ValidationError,
)
from sqlalchemy import or_
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 50 * 1024 * 1024

# Longest filename segment kept in a storage key, in UTF-8 bytes. Keys become
# path components on disk, which most filesystems cap at 255 bytes.
MAX_KEY_FILENAME_BYTES = 100

# Rough bytes-per-page used to pre-fill the page count; students can correct it.
BYTES_PER_PAGE_ESTIMATE = 50_000


@dataclass(frozen=True, slots=True)
class UploadResult:
    file_key: str
    original_filename: str
    size: int
    estimated_pages: int


def estimate_pages(size: int) -> int:
    return max(1, math.ceil(size / BYTES_PER_PAGE_ESTIMATE))


def user_namespace(provider_user_id: str) -> str:
    return f"uploads/{provider_user_id}/"


def _clean_filename(filename: str | None) -> str:
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in {"", ".", ".."}:
        return "document.pdf"
    return name


def _key_filename(filename: str) -> str:
    if len(filename.encode("utf-8")) <= MAX_KEY_FILENAME_BYTES:
        return filename

    stem, dot, ext = filename.rpartition(".")
    suffix = f".{ext}" if dot and stem and len(ext) <= 10 else ""
    head = filename[: len(filename) - len(suffix)] if suffix else filename
    budget = MAX_KEY_FILENAME_BYTES - len(suffix.encode("utf-8"))
    head = head.encode("utf-8")[:budget].decode("utf-8", errors="ignore")
    return f"{head}{suffix}"


def build_file_key(provider_user_id: str, filename: str) -> str:
    """Storage key for a new upload. The filename part is truncated; the full name lives in metadata."""

    # Not content-addressed: uploading the same bytes twice yields two keys.
    millis = int(time.time() * 1000)
    return f"{user_namespace(provider_user_id)}{millis}-{uuid4().hex[:8]}-{_key_filename(filename)}"


def is_owned_by(file_key: str, provider_user_id: str) -> bool:
    if ".." in file_key.split("/"):
        return False
    return file_key.startswith(user_namespace(provider_user_id))


def upload(
    blobs: BlobStore,
    *,
    provider_user_id: str,
    filename: str | None,
    content_type: str | None,
    data: bytes,
) -> UploadResult:
    """Validate and store a PDF upload. Nothing is written unless validation passes."""

    if content_type != PDF_CONTENT_TYPE:
        raise UnsupportedType(content_type)

    if len(data) > MAX_UPLOAD_BYTES:
        raise FileTooLarge(len(data), MAX_UPLOAD_BYTES)

    original_filename = _clean_filename(filename)
    file_key = build_file_key(provider_user_id, original_filename)

    try:
        blobs.put(file_key, data, content_type=PDF_CONTENT_TYPE, filename=original_filename)
    except BlobKeyError as e:
        raise ValidationError("Invalid file name") from e
    except OSError as e:
        logger.error("Blob store write failed key=%s: %s", file_key, e)
        raise StorageFailure("Could not store file") from e

    logger.info("Stored upload key=%s size=%d", file_key, len(data))
    return UploadResult(
        file_key=file_key,
        original_filename=original_filename,
        size=len(data),
        estimated_pages=estimate_pages(len(data)),
    )


def _fetch(blobs: BlobStore, file_key: str) -> StoredBlob:
    try:
        blob = blobs.get(file_key)
    except BlobKeyError as e:
        raise FileNotFound(file_key) from e

    if blob is None:
        logger.warning("Blob missing for key=%s", file_key)
        raise FileNotFound(file_key)
    return blob


def retrieve_for_user(blobs: BlobStore, *, provider_user_id: str, file_key: str) -> StoredBlob:
    if not is_owned_by(file_key, provider_user_id):
        logger.warning("User %s denied access to key=%s", provider_user_id, file_key)
        raise Forbidden("Unauthorized")

    return _fetch(blobs, file_key)


def retrieve_for_vendor(
    db: Session, blobs: BlobStore, *, vendor_id: str, file_key: str
) -> StoredBlob:
    """Vendors may fetch files of orders assigned to them or still in the claimable queue."""

    visible = (
        db.query(OrderFile.id)
        .join(Order, Order.id == OrderFile.order_id)
        .filter(OrderFile.file_key == file_key)
        .filter(or_(Order.vendor_id == vendor_id, Order.status == OrderStatusV1.PENDING.value))
        .first()
    )
    if visible is None:
        logger.warning("Vendor %s denied access to key=%s", vendor_id, file_key)
        raise Forbidden("Unauthorized")

    return _fetch(blobs, file_key)
