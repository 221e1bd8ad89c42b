# =============================================================================
# core/models/submission.py - Submission & Comment Schemas
# =============================================================================
# An owner submits proof (note + media) against an active task. Submissions
# are immutable once created; the trainer responds with comments, each of
# which may carry one media file.
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from .media import CommentMediaRecord, MediaAttachment, SubmissionMediaRecord
from .task import HomeworkTaskRecord
from .user import UserRecord


class SubmissionStatus(str, Enum):
    COMPLETED = "COMPLETED"


class HomeworkSubmissionRecord(BaseModel):
    """A row from the homework_submissions table."""
    id: str
    task_id: str
    submitted_by_user_id: str
    note: str | None = None
    status: SubmissionStatus = SubmissionStatus.COMPLETED
    submitted_at: datetime
    created_at: datetime | None = None


class TrainerCommentRecord(BaseModel):
    """A row from the trainer_comments table."""
    id: str
    submission_id: str
    trainer_id: str
    comment: str
    created_at: datetime


class TrainerCommentDetail(TrainerCommentRecord):
    trainer: UserRecord | None = None
    media: list[CommentMediaRecord] = Field(default_factory=list)


class HomeworkSubmissionDetail(HomeworkSubmissionRecord):
    """Submission joined with task, submitter, media and comments (newest first)."""
    task: HomeworkTaskRecord | None = None
    submitted_by: UserRecord | None = None
    media: list[SubmissionMediaRecord] = Field(default_factory=list)
    comments: list[TrainerCommentDetail] = Field(default_factory=list)


class SubmissionCreate(BaseModel):
    """
    Body of POST /api/submissions.

    Media entries reference files already stored through POST /api/upload.

    Example:
        {
            "task_id": "a81c...",
            "note": "Held the sit for 20 seconds today!",
            "media": [{"media_type": "VIDEO", "file_path": "/uploads/...mp4", "file_name": "sit.mp4"}]
        }
    """
    task_id: UUID
    note: str | None = Field(default=None, max_length=5000)
    media: list[MediaAttachment] = Field(default_factory=list)
