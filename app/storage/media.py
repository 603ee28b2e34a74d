"""Upload adapter for the external media host (Cloudinary)."""
import base64
import logging

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from fastapi.concurrency import run_in_threadpool

from app.config import settings

logger = logging.getLogger("journal.media")


class MediaUploadError(Exception):
    pass


def is_configured() -> bool:
    return all([
        settings.CLOUDINARY_CLOUD_NAME,
        settings.CLOUDINARY_API_KEY,
        settings.CLOUDINARY_API_SECRET,
    ])


def configure() -> None:
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


def build_data_uri(data: bytes, content_type: str | None) -> str:
    encoded = base64.b64encode(data or b"").decode("ascii")
    return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"


def upload_options() -> dict:
    options = {"folder": settings.CLOUDINARY_FOLDER}
    if settings.UPLOAD_TIMEOUT_SECONDS:
        options["timeout"] = settings.UPLOAD_TIMEOUT_SECONDS
    return options


async def upload_image(data: bytes, content_type: str | None) -> str:
    """Send an in-memory image to the media host and return its public URL.

    A single attempt is made; any failure raises :class:`MediaUploadError`.
    """
    if not is_configured():
        raise MediaUploadError("media host credentials are not configured")
    configure()
    try:
        result = await run_in_threadpool(
            cloudinary.uploader.upload,
            build_data_uri(data, content_type),
            **upload_options(),
        )
    except cloudinary.exceptions.Error as exc:
        logger.warning("MEDIA_UPLOAD_FAIL error=%s", exc)
        raise MediaUploadError(str(exc) or exc.__class__.__name__) from exc
    secure_url = (result or {}).get("secure_url")
    if not secure_url:
        raise MediaUploadError("media host response has no secure_url")
    logger.info("MEDIA_UPLOAD_OK bytes=%d url=%s", len(data or b""), secure_url)
    return secure_url
