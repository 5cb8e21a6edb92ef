from __future__ import annotations

import inspect
from pathlib import Path

import pytest
from conftest import (
    file_descriptor,
    make_vendor,
    place_order,
    seed_pricing,
    student_login,
    upload_pdf,
    vendor_login,
)
from services.api.app.services import files
from services.api.app.services.blob_memory import InMemoryBlobStore
from services.api.app.services.blob_base import StoredBlob
from services.api.app.services.errors import FileTooLarge, StorageFailure, UnsupportedType


def _stored_files(blob_dir: Path) -> list[Path]:
    if not blob_dir.exists():
        return []
    return [p for p in blob_dir.rglob("*") if p.is_file()]


def test_upload_returns_key_size_and_estimate(client) -> None:
    student_login(client, "s1")
    data = b"%PDF" + b"0" * 120_000

    body = upload_pdf(client, name="lab report.pdf", data=data)

    assert body["fileKey"].startswith("uploads/s1/")
    assert body["fileKey"].endswith("-lab report.pdf")
    assert body["originalFilename"] == "lab report.pdf"
    assert body["size"] == len(data)
    assert body["estimatedPages"] == 3


def test_upload_requires_session(client) -> None:
    response = client.post(
        "/api/files/upload", files={"file": ("a.pdf", b"%PDF", "application/pdf")}
    )
    assert response.status_code == 401


def test_non_pdf_is_rejected_without_writing(client, blob_dir: Path) -> None:
    student_login(client, "s1")

    response = client.post("/api/files/upload", files={"file": ("a.png", b"\x89PNG", "image/png")})

    assert response.status_code == 400
    assert response.json() == {"error": "Only PDF files are allowed"}
    assert _stored_files(blob_dir) == []


def test_oversized_upload_is_rejected_without_writing(
    client, blob_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(files, "MAX_UPLOAD_BYTES", 16)
    student_login(client, "s1")

    response = client.post(
        "/api/files/upload", files={"file": ("big.pdf", b"%PDF" + b"0" * 32, "application/pdf")}
    )

    assert response.status_code == 400
    assert _stored_files(blob_dir) == []


def test_upload_limit_is_fifty_mebibytes() -> None:
    blobs = InMemoryBlobStore()
    limit = 50 * 1024 * 1024

    with pytest.raises(FileTooLarge):
        files.upload(
            blobs,
            provider_user_id="s1",
            filename="big.pdf",
            content_type="application/pdf",
            data=b"0" * (limit + 1),
        )
    with pytest.raises(UnsupportedType):
        files.upload(
            blobs, provider_user_id="s1", filename="a.pdf", content_type="application/x-pdf", data=b"1"
        )
    assert blobs.keys() == []

    ok = files.upload(
        blobs,
        provider_user_id="s1",
        filename="exact.pdf",
        content_type="application/pdf",
        data=b"0" * limit,
    )
    assert ok.size == limit


@pytest.mark.parametrize(("size", "expected"), [(0, 1), (1, 1), (50_000, 1), (50_001, 2)])
def test_estimate_pages(size: int, expected: int) -> None:
    assert files.estimate_pages(size) == expected


def test_same_file_uploaded_twice_gets_distinct_keys(client) -> None:
    student_login(client, "s1")

    first = upload_pdf(client, name="same.pdf")
    second = upload_pdf(client, name="same.pdf")

    assert first["fileKey"] != second["fileKey"]


def test_owner_can_download_upload(client) -> None:
    student_login(client, "s1")
    upload = upload_pdf(client, data=b"%PDF-owner")

    response = client.get(f"/api/files/{upload['fileKey']}")

    assert response.status_code == 200
    assert response.content == b"%PDF-owner"
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="notes.pdf"' in response.headers["content-disposition"]
    assert response.headers["etag"]


def test_other_student_cannot_download_by_key(client) -> None:
    student_login(client, "s1")
    upload = upload_pdf(client)

    student_login(client, "s2")
    response = client.get(f"/api/files/{upload['fileKey']}")

    assert response.status_code == 403


def test_dot_segments_do_not_escape_namespace(client) -> None:
    student_login(client, "s1")
    upload = upload_pdf(client)
    foreign = upload["fileKey"].replace("uploads/s1/", "uploads/s2/")

    student_login(client, "s2")
    sneaky = foreign.replace("uploads/s2/", "uploads/s2/../s1/")

    assert client.get(f"/api/files/{sneaky}").status_code in {403, 404}


def test_missing_blob_is_404(client, blob_dir: Path) -> None:
    student_login(client, "s1")
    upload = upload_pdf(client)
    for path in _stored_files(blob_dir):
        path.unlink()

    response = client.get(f"/api/files/{upload['fileKey']}")

    assert response.status_code == 404
    assert response.json() == {"error": "File not found"}


def test_vendor_file_access_follows_order_visibility(client, db) -> None:
    seed_pricing(db)
    make_vendor(db, "alpha")
    make_vendor(db, "beta")

    student_login(client, "s1")
    upload = upload_pdf(client, data=b"%PDF-order")
    order = place_order(client, [file_descriptor(upload)])
    key = upload["fileKey"]

    # Pending orders are visible to every vendor.
    vendor_login(client, "beta")
    pending = client.get(f"/api/vendor/files/{key}")
    assert pending.status_code == 200
    assert pending.content == b"%PDF-order"

    vendor_login(client, "alpha")
    assert client.post(f"/api/vendor/orders/{order['orderId']}/accept").status_code == 200
    assert client.get(f"/api/vendor/files/{key}").status_code == 200

    vendor_login(client, "beta")
    assert client.get(f"/api/vendor/files/{key}").status_code == 403


def test_vendor_cannot_fetch_keys_outside_orders(client, db) -> None:
    make_vendor(db, "alpha")
    student_login(client, "s1")
    upload = upload_pdf(client)

    vendor_login(client, "alpha")
    assert client.get(f"/api/vendor/files/{upload['fileKey']}").status_code == 403


def test_vendor_gets_404_when_blob_missing(client, db, blob_dir: Path) -> None:
    seed_pricing(db)
    make_vendor(db, "alpha")
    student_login(client, "s1")
    upload = upload_pdf(client)
    place_order(client, [file_descriptor(upload)])
    for path in _stored_files(blob_dir):
        path.unlink()

    vendor_login(client, "alpha")
    assert client.get(f"/api/vendor/files/{upload['fileKey']}").status_code == 404


def test_long_filename_is_truncated_in_key_only(client) -> None:
    student_login(client, "s1")
    long_name = "a" * 240 + ".pdf"

    body = upload_pdf(client, name=long_name)

    assert body["originalFilename"] == long_name
    segment = body["fileKey"].rsplit("/", 1)[-1]
    assert segment.endswith(".pdf")
    assert len(segment.encode("utf-8")) <= 255 - len(".json")

    download = client.get(f"/api/files/{body['fileKey']}")
    assert download.status_code == 200
    assert long_name in download.headers["content-disposition"]


def test_key_truncation_keeps_multibyte_names_valid() -> None:
    key = files.build_file_key("s1", "प्रयोगशाला" * 20 + ".pdf")
    segment = key.rsplit("/", 1)[-1]

    assert segment.endswith(".pdf")
    assert len(segment.encode("utf-8")) <= 130
    assert "\ufffd" not in segment


class _FailingStore:
    backend = "failing"

    def put(self, key: str, data: bytes, *, content_type: str, filename: str) -> StoredBlob:
        del key, data, content_type, filename
        raise OSError(28, "No space left on device")

    def get(self, key: str) -> StoredBlob | None:
        del key
        return None

    def delete(self, key: str) -> None:
        del key


def test_storage_write_errors_become_domain_errors() -> None:
    with pytest.raises(StorageFailure):
        files.upload(
            _FailingStore(),
            provider_user_id="s1",
            filename="notes.pdf",
            content_type="application/pdf",
            data=b"%PDF",
        )


def test_upload_route_runs_off_the_event_loop() -> None:
    from services.api.app.routers.files import upload_file

    assert not inspect.iscoroutinefunction(upload_file)
