# =============================================================================
# app/routers/submissions.py - Submission & Comment Endpoints
# =============================================================================
# Owners submit homework (note + already uploaded media); trainers reply
# with a comment that may carry one photo or video.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Path, UploadFile, status

from app.dependencies import ContextDep, OwnerDep, TrainerDep
from app.exceptions import ValidationError
from core.models.submission import HomeworkSubmissionDetail, SubmissionCreate
from core.services.media_service import MediaService
from core.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()

SubmissionId = Annotated[UUID, Path(description="Submission UUID")]


@router.get("/{submission_id}", response_model=HomeworkSubmissionDetail)
async def get_submission(submission_id: SubmissionId, ctx: ContextDep):
    """
    Submission with task, submitter, media and comments (newest first).

    Raises:
        403: Unless the caller can view the task's pet
        404: If the submission doesn't exist
    """
    return SubmissionService.get_submission(ctx, str(submission_id))


@router.post("", response_model=HomeworkSubmissionDetail, status_code=status.HTTP_201_CREATED)
async def create_submission(request: SubmissionCreate, ctx: OwnerDep):
    """
    Submit homework against an active task.

    Raises:
        400: If the task has been closed
        403: If the caller doesn't own the task's pet
        404: If the task doesn't exist
    """
    return SubmissionService.create_submission(ctx, request)


@router.post(
    "/{submission_id}/comment",
    response_model=HomeworkSubmissionDetail,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    submission_id: SubmissionId,
    ctx: TrainerDep,
    comment: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File(description="Optional image or video")] = None,
):
    """
    Reply to a submission (multipart form: comment, optional file).

    Raises:
        400: If the comment is missing or the file is rejected
        403: Unless the caller is the pet's trainer or an admin
        404: If the submission doesn't exist
    """
    SubmissionService.ensure_can_comment(ctx, str(submission_id))
    if not comment or not comment.strip():
        raise ValidationError("Comment is required", code="COMMENT_REQUIRED")

    stored = None
    if file is not None and file.filename:
        stored = await MediaService.save_upload(file)

    return SubmissionService.add_comment(ctx, str(submission_id), comment, stored)
