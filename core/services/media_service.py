# =============================================================================
# core/services/media_service.py - Local Media Storage
# =============================================================================
# Handles image/video uploads: validates type and size, writes the bytes to
# the uploads directory under a randomized name, and returns the public path
# the file is served under.
# =============================================================================

import logging
import secrets
import time
from pathlib import Path

from fastapi import UploadFile

from app.config import settings
from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    NoFileError,
    StorageUploadError,
)
from core.models.media import MediaType, StoredFile

logger = logging.getLogger(__name__)

# Read uploads in 1MB chunks so oversized files are rejected early
CHUNK_SIZE = 1024 * 1024


class MediaService:
    """
    Service for uploaded media files.

    Files live on local disk under settings.UPLOAD_DIR and are served
    statically under settings.UPLOADS_URL_PATH.
    """

    @staticmethod
    def random_filename(original_name: str | None) -> str:
        """<epoch-ms>-<random>.<ext>, keeping the original extension."""
        suffix = Path(original_name or "").suffix.lower()
        return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"

    @staticmethod
    def validate_content_type(content_type: str | None) -> MediaType:
        """
        Raises:
            InvalidFileTypeError: If the MIME type is not an allowed image/video
        """
        allowed = settings.allowed_media_types_list
        if not content_type or content_type.lower() not in allowed:
            raise InvalidFileTypeError(content_type, allowed)
        return MediaType.from_mime(content_type)

    @staticmethod
    async def save_upload(file: UploadFile | None) -> StoredFile:
        """
        Validate and store an uploaded file.

        Args:
            file: Multipart file (None when the form had no file)

        Returns:
            StoredFile with public path, media type and original name

        Raises:
            NoFileError: If no file was sent
            InvalidFileTypeError: If the type isn't an allowed image/video
            FileTooLargeError: If the file exceeds MAX_UPLOAD_SIZE_MB
            StorageUploadError: If writing to disk fails
        """
        if file is None or not file.filename:
            raise NoFileError()

        media_type = MediaService.validate_content_type(file.content_type)

        content = bytearray()
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            content.extend(chunk)
            if len(content) > settings.max_upload_size_bytes:
                raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        filename = MediaService.random_filename(file.filename)
        upload_dir = settings.upload_path

        try:
            upload_dir.mkdir(parents=True, exist_ok=True)
            (upload_dir / filename).write_bytes(bytes(content))
        except OSError as e:
            logger.error(f"Failed to write upload {filename}: {e}")
            raise StorageUploadError(str(e))

        logger.info(f"Stored upload {file.filename} as {filename} ({len(content)} bytes)")

        return StoredFile(
            file_path=f"{settings.UPLOADS_URL_PATH.rstrip('/')}/{filename}",
            media_type=media_type,
            file_name=file.filename,
        )
