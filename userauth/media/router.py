"""
FastAPI router for Media system endpoints.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from common.utils import success_response
from userauth.media.dependencies import get_upload_service
from userauth.media.services.upload_service import ImageUploadService

router = APIRouter(prefix="/auth", tags=["media"])


@router.post("/upload")
async def upload_image(
    upload_service: Annotated[ImageUploadService, Depends(get_upload_service)],
    image: Optional[UploadFile] = File(None),
):
    """Upload an image (multipart field `image`, max 5MB)."""
    stored = await upload_service.upload(image)
    return success_response(message="Image uploaded successfully", **stored)
