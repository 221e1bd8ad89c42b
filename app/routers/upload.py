# =============================================================================
# app/routers/upload.py - File Upload Endpoint
# =============================================================================
# Stores an image or video and returns where it is served from. Clients
# upload first, then reference the returned file_path in a submission.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from app.dependencies import ContextDep
from core.models.media import StoredFile
from core.services.media_service import MediaService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=StoredFile)
async def upload_file(
    ctx: ContextDep,
    file: Annotated[UploadFile | None, File(description="Image or video, up to 50MB")] = None,
):
    """
    Upload a photo or video.

    Returns:
        {"file_path": "/uploads/<name>", "media_type": "IMAGE"|"VIDEO", "file_name": ...}

    Raises:
        400: If no file was sent, or it's too large or not an image/video
    """
    stored = await MediaService.save_upload(file)
    logger.info(f"User {ctx.user_id} uploaded {stored.file_path}")
    return stored
