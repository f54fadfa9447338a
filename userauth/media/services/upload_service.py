"""
Image upload service.

Validates uploaded files against an UploadConfig and hands accepted bytes
to a BlobStorage.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Callable, Optional

from fastapi import UploadFile

from common.utils.exceptions import InternalServerException
from userauth.auth.errors import PayloadTooLargeError, UnsupportedMediaError, ValidationError
from userauth.media.services.blob_storage import BlobStorage

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB


def is_image_type(content_type: Optional[str]) -> bool:
    """Accept any image/* media type."""
    return bool(content_type) and content_type.lower().startswith("image/")


def timestamped_filename(original: str) -> str:
    """`<epoch millis>-<original basename>`, unique enough for one host."""
    basename = PurePath(original.replace("\\", "/")).name or "upload"
    return f"{int(time.time() * 1000)}-{basename}"


def same_key(filename: str) -> str:
    return filename


@dataclass(frozen=True)
class UploadConfig:
    """Per-endpoint upload rules."""

    max_bytes: int = MAX_IMAGE_BYTES
    is_allowed_type: Callable[[Optional[str]], bool] = field(default=is_image_type)
    generate_filename: Callable[[str], str] = field(default=timestamped_filename)
    # Maps a generated filename to its storage key
    resolve_destination: Callable[[str], str] = field(default=same_key)


class ImageUploadService:
    """
    Accepts image uploads and stores them.
    """

    def __init__(self, storage: BlobStorage, config: Optional[UploadConfig] = None):
        """
        Initialize ImageUploadService.

        Args:
            storage: Where accepted files are written
            config: Upload rules (defaults: image/*, 5MB)
        """
        self._storage = storage
        self._config = config or UploadConfig()

    async def upload(self, file: Optional[UploadFile]) -> dict:
        """
        Validate and store an uploaded image.

        Args:
            file: Multipart file part, or None when the field was absent

        Returns:
            dict with filename, originalname, size and url

        Raises:
            ValidationError: No file provided
            UnsupportedMediaError: Not an image
            PayloadTooLargeError: Larger than the configured cap
            InternalServerException: Storage failed
        """
        if file is None or not file.filename:
            raise ValidationError("No image file provided")

        if not self._config.is_allowed_type(file.content_type):
            logger.info(f"Rejected upload with content type {file.content_type!r}")
            raise UnsupportedMediaError()

        # Read one byte past the cap so oversize files are detected without buffering them whole
        data = await file.read(self._config.max_bytes + 1)
        if len(data) > self._config.max_bytes:
            logger.info(f"Rejected upload larger than {self._config.max_bytes} bytes")
            raise PayloadTooLargeError(self._config.max_bytes)

        filename = self._config.generate_filename(file.filename)
        key = self._config.resolve_destination(filename)

        try:
            url = await self._storage.store(key, data)
        except (OSError, ValueError) as e:
            logger.error(f"Upload storage failed for {key}: {e}")
            raise InternalServerException(message="File upload failed")

        logger.info(f"Image uploaded: {key} ({len(data)} bytes)")
        return {
            "filename": filename,
            "originalname": file.filename,
            "size": len(data),
            "url": url,
        }
