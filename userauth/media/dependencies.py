"""
FastAPI dependencies for Media system.
"""

import logging

from userauth.media.services.blob_storage import LocalBlobStorage
from userauth.media.services.upload_service import ImageUploadService, UploadConfig

logger = logging.getLogger(__name__)

_upload_service: ImageUploadService | None = None


def init_media_services(upload_dir: str, url_prefix: str, max_bytes: int) -> LocalBlobStorage:
    """
    Initialize the upload service backed by a local directory.

    Called once at application startup.

    Returns:
        The storage, so the caller can serve its directory
    """
    global _upload_service

    storage = LocalBlobStorage(upload_dir, url_prefix=url_prefix)
    storage.ensure_directory()
    _upload_service = ImageUploadService(storage, UploadConfig(max_bytes=max_bytes))
    logger.info(f"Uploads stored in {storage.directory}")
    return storage


def get_upload_service() -> ImageUploadService:
    """Get image upload service."""
    if _upload_service is None:
        raise RuntimeError("Media services not initialized. Call init_media_services first.")
    return _upload_service
