"""Storage for a post's ``selectedFile``.

The client sends either a URL or a base64 ``data:`` URI. When Cloudinary
credentials are configured, data URIs are uploaded and replaced by the hosted
URL; otherwise the payload is stored unchanged.
"""
import logging
import time
from typing import Optional, Tuple
import cloudinary
from cloudinary import uploader
from cloudinary.exceptions import Error as CloudinaryError
from memories.core import config
from memories.core.errors import BadRequest, InternalError

ALLOWED_MEDIA_PREFIXES = ("data:image/", "data:video/")
ALLOWED_URL_PREFIXES = ("http://", "https://")

if config.CLOUDINARY_CLOUD_NAME:
    cloudinary.config(
        cloud_name=config.CLOUDINARY_CLOUD_NAME,
        api_key=config.CLOUDINARY_API_KEY,
        api_secret=config.CLOUDINARY_API_SECRET,
        secure=True,
    )


def cloudinary_enabled() -> bool:
    return bool(config.CLOUDINARY_CLOUD_NAME)


def payload_size(selected_file: str) -> int:
    """Decoded byte size of a base64 data URI, or the string length of anything else."""
    header, sep, data = selected_file.partition(",")
    if not sep or not header.endswith(";base64"):
        return len(selected_file)
    data = data.strip()
    return len(data) * 3 // 4 - data[-2:].count("=")


def store_selected_file(selected_file: Optional[str], user_id: int) -> Tuple[Optional[str], Optional[str]]:
    """Validate and store a media payload.

    Returns ``(selected_file, public_id)``; ``public_id`` is only set when the
    payload was uploaded to Cloudinary.
    """
    if not selected_file:
        return None, None

    if payload_size(selected_file) > config.MAX_UPLOAD_BYTES:
        raise BadRequest(f"File too large (max {config.MAX_UPLOAD_BYTES // (1024 * 1024)}MB)")

    if selected_file.startswith(ALLOWED_URL_PREFIXES):
        return selected_file, None
    if not selected_file.startswith(ALLOWED_MEDIA_PREFIXES):
        raise BadRequest("Invalid media format, expected an http(s) URL or an image or video data URI")

    if not cloudinary_enabled():
        return selected_file, None

    try:
        upload_result = uploader.upload(
            selected_file,
            folder="memories",
            public_id=f"post_{user_id}_{int(time.time())}",
            resource_type="video" if selected_file.startswith("data:video/") else "image",
            overwrite=True,
        )
    except CloudinaryError as e:
        logging.error(f"Cloudinary Error: {str(e)}")
        raise InternalError("Media upload failed")

    return upload_result["secure_url"], upload_result["public_id"]


def destroy_media(public_id: Optional[str]):
    if not public_id:
        return
    try:
        uploader.destroy(public_id)
    except CloudinaryError as e:
        logging.error(f"Cloudinary cleanup error: {str(e)}")
