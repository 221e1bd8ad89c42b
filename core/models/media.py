# =============================================================================
# core/models/media.py - Media Attachment Schemas
# =============================================================================
# Media (photos/videos) can be attached to tasks, submissions and comments.
# Each owner table has the same shape: media_type, file_path, file_name.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class MediaType(str, Enum):
    """Kind of uploaded media, derived from the file's MIME type."""
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"

    @classmethod
    def from_mime(cls, content_type: str) -> "MediaType":
        """video/* is a VIDEO, everything else that passed validation is an IMAGE."""
        return cls.VIDEO if content_type.lower().startswith("video/") else cls.IMAGE


class StoredFile(BaseModel):
    """
    A file written to the uploads directory.

    Returned by POST /api/upload so clients can attach it to a submission.

    Example:
        {
            "file_path": "/uploads/1729250000000-483920112.jpg",
            "media_type": "IMAGE",
            "file_name": "sit.jpg"
        }
    """
    file_path: str = Field(..., description="Public path the file is served under")
    media_type: MediaType
    file_name: str | None = Field(default=None, description="Original client filename")


class MediaAttachment(BaseModel):
    """Client-supplied reference to an already uploaded file."""
    media_type: MediaType
    file_path: str = Field(..., min_length=1)
    file_name: str | None = None


class MediaRecord(BaseModel):
    """Row shape shared by task_media, submission_media and comment_media."""
    id: str
    media_type: MediaType
    file_path: str
    file_name: str | None = None
    created_at: datetime | None = None


class TaskMediaRecord(MediaRecord):
    task_id: str


class SubmissionMediaRecord(MediaRecord):
    submission_id: str


class CommentMediaRecord(MediaRecord):
    comment_id: str
