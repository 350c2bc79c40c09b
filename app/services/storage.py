"""Image upload to Cloudinary through the official SDK."""

from __future__ import annotations

import io
import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

import cloudinary.exceptions
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from app.core.errors import UploadError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def is_storage_configured(settings: Settings) -> bool:
    if not settings.CLOUDINARY_CLOUD_NAME or not settings.CLOUDINARY_CLOUD_NAME.strip():
        return False
    if not settings.CLOUDINARY_API_KEY or not settings.CLOUDINARY_API_KEY.strip():
        return False
    if settings.CLOUDINARY_API_SECRET is None:
        return False
    secret = settings.CLOUDINARY_API_SECRET.get_secret_value()
    return bool(secret and secret.strip())


def file_extension(filename: str | None) -> str:
    """Lower-case extension without the dot ('' when there is none)."""
    if not filename:
        return ""
    return PurePosixPath(filename).suffix.lower().lstrip(".")


def format_size(num_bytes: int) -> str:
    """Human-readable size in the largest unit that divides it evenly (bytes, KB, MB)."""
    for unit, factor in (("MB", 1024 * 1024), ("KB", 1024)):
        if num_bytes >= factor and num_bytes % factor == 0:
            return f"{num_bytes // factor} {unit}"
    return f"{num_bytes} bytes"


def validate_image(data: bytes, filename: str | None, settings: Settings) -> str:
    """Check presence, size and format; return the normalized extension."""
    if not data:
        raise UploadError("No file uploaded")
    if len(data) > settings.UPLOAD_MAX_BYTES:
        raise UploadError(
            f"File size must not exceed {format_size(settings.UPLOAD_MAX_BYTES)}."
        )
    ext = file_extension(filename)
    if ext not in settings.UPLOAD_ALLOWED_FORMATS:
        raise UploadError(
            "File format not allowed. Allowed: " + ", ".join(settings.UPLOAD_ALLOWED_FORMATS)
        )
    return ext


def upload_options(settings: Settings) -> dict[str, Any]:
    """Per-call SDK options: credentials come from settings, never from global config."""
    return {
        "cloud_name": settings.CLOUDINARY_CLOUD_NAME.strip(),
        "api_key": settings.CLOUDINARY_API_KEY.strip(),
        "api_secret": settings.CLOUDINARY_API_SECRET.get_secret_value(),
        "folder": settings.CLOUDINARY_FOLDER,
        "allowed_formats": list(settings.UPLOAD_ALLOWED_FORMATS),
        "resource_type": "image",
        "timeout": settings.CLOUDINARY_REQUEST_TIMEOUT_SEC,
    }


async def upload_image(data: bytes, filename: str | None, settings: Settings) -> str:
    """
    Store an image and return its durable HTTPS URL.

    Raises UploadError when nothing was sent, the file breaks the size/format
    constraints, storage is not configured, or Cloudinary rejects the upload.
    The SDK call is blocking, so it runs in the threadpool.
    """
    validate_image(data, filename, settings)
    if not is_storage_configured(settings):
        raise UploadError("Image storage is not configured.")

    stream = io.BytesIO(data)
    stream.name = filename or "upload"
    try:
        result = await run_in_threadpool(
            cloudinary.uploader.upload, stream, **upload_options(settings)
        )
    except cloudinary.exceptions.Error as e:
        logger.warning("Cloudinary upload failed: %s", e)
        raise UploadError("Image storage rejected the upload.") from e

    secure_url = result.get("secure_url") if isinstance(result, dict) else None
    if not secure_url:
        raise UploadError("Image storage response missing URL.")
    logger.info("Uploaded image to %s", secure_url)
    return secure_url
