from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

ALLOWED_DOMAIN = "@pilani.bits-pilani.ac.in"


@pytest.fixture()
def blob_dir(tmp_path: Path) -> Path:
    return tmp_path / "blobs"


@pytest.fixture()
def client(tmp_path: Path, blob_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    db_path = tmp_path / "printdrop_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("PRINTDROP_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("PRINTDROP_BLOB_STORE", "local")
    monkeypatch.setenv("PRINTDROP_BLOB_DIR", str(blob_dir))
    monkeypatch.setenv("PRINTDROP_IDENTITY_PROVIDER", "fake")
    monkeypatch.setenv("PRINTDROP_ALLOWED_EMAIL_DOMAIN", ALLOWED_DOMAIN)
    monkeypatch.setenv("PRINTDROP_COOKIE_SECURE", "false")

    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(client: TestClient) -> Iterator[Session]:
    from services.api.app.db.database import db_session

    session = db_session()
    try:
        yield session
    finally:
        session.close()


def seed_pricing(
    db: Session,
    *,
    bw_single: int = 200,
    bw_double: int = 150,
    color_single: int = 1000,
    color_double: int = 800,
    delivery_fee: int = 2000,
) -> None:
    from services.api.app.services.pricing import PricingRates, set_pricing

    set_pricing(
        db,
        PricingRates(
            bw_single=bw_single,
            bw_double=bw_double,
            color_single=color_single,
            color_double=color_double,
            delivery_fee=delivery_fee,
        ),
    )


def make_vendor(db: Session, username: str, password: str = "s3cret", **kwargs) -> str:
    from services.api.app.services.vendor_auth import create_vendor

    kwargs.setdefault("shop_name", f"{username} prints")
    return create_vendor(db, username=username, password=password, **kwargs).id


def student_login(client: TestClient, user_id: str, *, register: bool = True) -> None:
    code = f"{user_id}:{user_id}{ALLOWED_DOMAIN}:Student {user_id}"
    assert client.post("/api/sessions", json={"code": code}).status_code == 200
    if register:
        assert client.get("/api/users/me").status_code == 200


def vendor_login(client: TestClient, username: str, password: str = "s3cret") -> None:
    response = client.post("/api/vendor/login", json={"username": username, "password": password})
    assert response.status_code == 200


def upload_pdf(client: TestClient, name: str = "notes.pdf", data: bytes = b"%PDF-1.4 test") -> dict:
    response = client.post(
        "/api/files/upload",
        files={"file": (name, data, "application/pdf")},
    )
    assert response.status_code == 200, response.text
    return response.json()


def file_descriptor(upload: dict, **overrides) -> dict:
    payload = {
        "fileKey": upload["fileKey"],
        "originalFilename": upload["originalFilename"],
        "pageCount": 10,
        "colorType": "bw",
        "isDoubleSided": False,
        "pagesPerSide": 1,
        "copies": 1,
    }
    payload.update(overrides)
    return payload


def place_order(client: TestClient, files: list[dict], **overrides) -> dict:
    payload = {
        "files": files,
        "deliveryHostel": "Ram Bhawan",
        "deliveryGate": "Gate 2",
        "deliveryPhone": "9999999999",
    }
    payload.update(overrides)
    response = client.post("/api/orders", json=payload)
    assert response.status_code == 200, response.text
    return response.json()
