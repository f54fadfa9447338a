"""
Media services.
"""

from userauth.media.services.blob_storage import BlobStorage, LocalBlobStorage
from userauth.media.services.upload_service import ImageUploadService, UploadConfig

__all__ = [
    "BlobStorage",
    "LocalBlobStorage",
    "ImageUploadService",
    "UploadConfig",
]
