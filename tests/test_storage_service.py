import os

import pytest

from app.core.config import settings
from app.services import storage_service


@pytest.fixture
def media_root(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "MEDIA_ROOT", str(tmp_path))
    monkeypatch.setattr(settings, "CLOUDINARY_CLOUD_NAME", None)
    return tmp_path


def test_object_path_layout():
    assert storage_service.object_path("acct-1", "png", timestamp_ms=1700000000123) == "acct-1/1700000000123.png"


def test_local_upload_writes_file(media_root):
    url = storage_service.upload_bill_photo("acct-1", "bill.PNG", b"\x89PNG data")

    assert url.startswith("/media/acct-1/")
    assert url.endswith(".png")
    stored = os.path.join(str(media_root), *url[len("/media/"):].split("/"))
    with open(stored, "rb") as f:
        assert f.read() == b"\x89PNG data"


def test_rejects_files_over_limit(media_root):
    content = b"x" * (settings.MAX_UPLOAD_BYTES + 1)

    with pytest.raises(storage_service.FileTooLargeError):
        storage_service.upload_bill_photo("acct-1", "bill.jpg", content)


def test_rejects_unknown_extension(media_root):
    with pytest.raises(storage_service.StorageError):
        storage_service.upload_bill_photo("acct-1", "bill.exe", b"data")
