import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.models.department import Department
from app.models.service import Service
from app.services import storage_service

API = "/api/v1"


@pytest.fixture(autouse=True)
def local_media(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "MEDIA_ROOT", str(tmp_path))
    monkeypatch.setattr(settings, "CLOUDINARY_CLOUD_NAME", None)
    return tmp_path


def service_form(**overrides):
    form = {
        "department": "IT",
        "service_type": "external",
        "nature_of_service": "repair",
        "service_date": "2026-03-14",
        "technician_vendor_name": "Acme Services",
        "cost": "1500.50",
    }
    form.update(overrides)
    return form


def test_log_service_with_bill_photo(client, make_item, hod_headers, local_media):
    item = make_item("Oscilloscope")

    response = client.post(
        f"{API}/services/",
        headers=hod_headers,
        data=service_form(equipment_id=item.id),
        files={"bill_photo": ("bill.png", b"\x89PNG fake image", "image/png")},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["equipment_name"] == "Oscilloscope"
    assert body["bill_photo_url"].startswith(f"{settings.MEDIA_URL}/")
    assert body["bill_photo_url"].endswith(".png")
    assert len(list(local_media.rglob("*.png"))) == 1


def test_log_service_without_photo(client, hod_headers):
    response = client.post(f"{API}/services/", headers=hod_headers, data=service_form(remarks=""))

    assert response.status_code == 201
    assert response.json()["bill_photo_url"] is None
    assert response.json()["equipment_id"] is None


def test_oversized_photo_rejected(client, db, hod_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)

    response = client.post(
        f"{API}/services/",
        headers=hod_headers,
        data=service_form(),
        files={"bill_photo": ("bill.jpg", b"x" * 11, "image/jpeg")},
    )

    assert response.status_code == 413
    assert db.query(Service).count() == 0


@pytest.mark.parametrize("field,value", [
    ("technician_vendor_name", "x" * 201),
    ("cost", "-1"),
    ("service_type", "outsourced"),
    ("service_date", "not-a-date"),
])
def test_invalid_fields(client, hod_headers, field, value):
    response = client.post(f"{API}/services/", headers=hod_headers, data=service_form(**{field: value}))

    assert response.status_code == 422


def test_hod_limited_to_own_department(client, hod_headers):
    response = client.post(f"{API}/services/", headers=hod_headers, data=service_form(department="Physics"))

    assert response.status_code == 403


def test_staff_cannot_log_services(client, staff_headers):
    assert client.post(f"{API}/services/", headers=staff_headers, data=service_form()).status_code == 403


def test_equipment_must_match_department(client, make_item, admin_headers):
    item = make_item("Spectrometer", Department.PHYSICS)

    response = client.post(f"{API}/services/", headers=admin_headers, data=service_form(equipment_id=item.id))

    assert response.status_code == 422


def test_list_filters(client, admin_headers):
    client.post(f"{API}/services/", headers=admin_headers, data=service_form())
    client.post(f"{API}/services/", headers=admin_headers,
                data=service_form(department="CSE", service_type="internal", status="completed"))

    internal = client.get(f"{API}/services/", headers=admin_headers, params={"type": "internal"}).json()
    pending = client.get(f"{API}/services/", headers=admin_headers, params={"status": "pending"}).json()
    it_only = client.get(f"{API}/services/", headers=admin_headers, params={"department": "IT"}).json()

    assert [s["department"] for s in internal] == ["CSE"]
    assert [s["department"] for s in pending] == ["IT"]
    assert [s["service_type"] for s in it_only] == ["external"]


def test_update_and_delete(client, db, hod_headers):
    created = client.post(f"{API}/services/", headers=hod_headers, data=service_form()).json()

    updated = client.put(f"{API}/services/{created['id']}", headers=hod_headers,
                         data={"status": "completed", "remarks": "Replaced fuse"})
    assert updated.status_code == 200
    assert updated.json()["status"] == "completed"
    assert updated.json()["technician_vendor_name"] == "Acme Services"

    deleted = client.delete(f"{API}/services/{created['id']}", headers=hod_headers)
    assert deleted.status_code == 200
    assert db.query(Service).count() == 0


def test_missing_service(client, hod_headers):
    assert client.get(f"{API}/services/nope", headers=hod_headers).status_code == 404


def test_bill_photo_stored_after_row_is_written(client, db, hod_headers, monkeypatch):
    rows_at_upload = []

    def fake_upload(account_id, filename, content):
        rows_at_upload.append(db.query(Service).count())
        return "https://files.example/bill.png"

    monkeypatch.setattr(storage_service, "upload_bill_photo", fake_upload)

    response = client.post(
        f"{API}/services/",
        headers=hod_headers,
        data=service_form(),
        files={"bill_photo": ("bill.png", b"png", "image/png")},
    )

    assert response.status_code == 201
    assert response.json()["bill_photo_url"] == "https://files.example/bill.png"
    assert rows_at_upload == [1]


def test_failed_insert_uploads_nothing(client, db, hod_headers, monkeypatch):
    uploads = []
    monkeypatch.setattr(storage_service, "upload_bill_photo", lambda *args: uploads.append(args) or "url")

    def failing_flush(*args, **kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(db, "flush", failing_flush)

    response = client.post(
        f"{API}/services/",
        headers=hod_headers,
        data=service_form(),
        files={"bill_photo": ("bill.png", b"png", "image/png")},
    )

    assert response.status_code == 500
    assert uploads == []


def test_failed_upload_leaves_no_row(client, db, hod_headers, monkeypatch):
    def broken_upload(account_id, filename, content):
        raise storage_service.StorageError("Failed to upload file")

    monkeypatch.setattr(storage_service, "upload_bill_photo", broken_upload)

    response = client.post(
        f"{API}/services/",
        headers=hod_headers,
        data=service_form(),
        files={"bill_photo": ("bill.png", b"png", "image/png")},
    )

    assert response.status_code == 400
    assert db.query(Service).count() == 0
