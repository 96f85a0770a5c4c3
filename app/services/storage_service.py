"""
Bill photo storage.

Objects are stored under ``{account_id}/{timestamp_ms}.{ext}``. Cloudinary is
used when its credentials are configured; otherwise files are written below
``MEDIA_ROOT`` and served by the application under ``MEDIA_URL``.
"""
import io
import logging
import os
import time
from typing import Optional

import cloudinary
import cloudinary.uploader

from app.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "pdf"}


class StorageError(Exception):
    pass


class FileTooLargeError(StorageError):
    pass


def _extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        raise StorageError("File must have an extension")
    extension = filename.rsplit(".", 1)[-1].lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise StorageError(f"Unsupported file type: .{extension}")
    return extension


def object_path(account_id: str, extension: str, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{account_id}/{timestamp_ms}.{extension}"


def _upload_to_cloudinary(content: bytes, path: str, extension: str) -> str:
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
    )
    public_id = path.rsplit(".", 1)[0]
    try:
        result = cloudinary.uploader.upload(
            io.BytesIO(content),
            public_id=public_id,
            folder=settings.CLOUDINARY_FOLDER,
            resource_type="raw" if extension == "pdf" else "image",
            use_filename=False,
            unique_filename=False,
            overwrite=False,
        )
    except Exception as e:
        logger.error(f"Error uploading {path} to Cloudinary: {str(e)}")
        raise StorageError("Failed to upload file") from e
    return result["secure_url"]


def _save_locally(content: bytes, path: str) -> str:
    destination = os.path.join(settings.MEDIA_ROOT, *path.split("/"))
    os.makedirs(os.path.dirname(destination), exist_ok=True)
    with open(destination, "wb") as f:
        f.write(content)
    return f"{settings.MEDIA_URL.rstrip('/')}/{path}"


def upload_bill_photo(account_id: str, filename: Optional[str], content: bytes) -> str:
    """Store an uploaded bill photo and return its public URL."""
    if len(content) > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise FileTooLargeError(f"File size must be less than {limit_mb}MB")
    if not content:
        raise StorageError("Uploaded file is empty")

    extension = _extension(filename)
    path = object_path(account_id, extension)

    if settings.cloudinary_enabled:
        url = _upload_to_cloudinary(content, path, extension)
    else:
        url = _save_locally(content, path)

    logger.info(f"Stored bill photo {path} ({len(content)} bytes)")
    return url
