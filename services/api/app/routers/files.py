from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from services.api.app.db.deps import get_db
from services.api.app.identity.base import Identity
from services.api.app.identity.deps import current_identity, current_vendor_id
from services.api.app.models.files import FileUploadResponse
from services.api.app.services import files
from services.api.app.services.blob_base import StoredBlob
from services.api.app.services.blob_factory import get_blob_store
from services.api.app.services.errors import ValidationError
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api")


def _blob_response(blob: StoredBlob) -> Response:
    safe_name = blob.filename.replace('"', "")
    return Response(
        content=blob.data,
        media_type=blob.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{safe_name}"',
            "ETag": f'"{blob.etag}"',
        },
    )


@router.post("/files/upload", response_model=FileUploadResponse)
def upload_file(
    file: UploadFile | None = File(None),
    identity: Identity = Depends(current_identity),
) -> FileUploadResponse:
    if file is None:
        raise ValidationError("No file provided")

    # One byte past the limit is enough to know it is too large.
    data = file.file.read(files.MAX_UPLOAD_BYTES + 1)
    result = files.upload(
        get_blob_store(),
        provider_user_id=identity.id,
        filename=file.filename,
        content_type=file.content_type,
        data=data,
    )

    return FileUploadResponse(
        file_key=result.file_key,
        original_filename=result.original_filename,
        size=result.size,
        estimated_pages=result.estimated_pages,
    )


@router.get("/files/{file_key:path}")
def get_file(file_key: str, identity: Identity = Depends(current_identity)) -> Response:
    blob = files.retrieve_for_user(get_blob_store(), provider_user_id=identity.id, file_key=file_key)
    return _blob_response(blob)


@router.get("/vendor/files/{file_key:path}")
def get_vendor_file(
    file_key: str,
    vendor_id: str = Depends(current_vendor_id),
    db: Session = Depends(get_db),
) -> Response:
    blob = files.retrieve_for_vendor(db, get_blob_store(), vendor_id=vendor_id, file_key=file_key)
    return _blob_response(blob)
