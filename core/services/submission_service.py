# =============================================================================
# core/services/submission_service.py - Submission & Comment Business Logic
# =============================================================================
# Owners submit homework against active tasks; the pet's trainer replies
# with comments. Submissions are never edited after creation.
#
# Submission media rows are inserted one at a time after the submission row
# with no surrounding transaction, so a failure partway through leaves the
# submission and the media inserted so far in place.
# =============================================================================

import logging

from app.exceptions import (
    ForbiddenError,
    SubmissionNotFoundError,
    TaskClosedError,
    ValidationError,
)
from core.models.context import RequestContext
from core.models.media import CommentMediaRecord, StoredFile, SubmissionMediaRecord
from core.models.submission import (
    HomeworkSubmissionDetail,
    HomeworkSubmissionRecord,
    SubmissionCreate,
    SubmissionStatus,
    TrainerCommentDetail,
    TrainerCommentRecord,
)
from core.models.task import HomeworkTaskRecord
from core.services.pet_service import PetService
from core.services.task_service import TaskService
from core.services.user_service import UserService
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

SUBMISSIONS_TABLE = "homework_submissions"
SUBMISSION_MEDIA_TABLE = "submission_media"
COMMENTS_TABLE = "trainer_comments"
COMMENT_MEDIA_TABLE = "comment_media"


class SubmissionService:
    """Service for homework submissions and trainer comments."""

    # -------------------------------------------------------------------------
    # Joins
    # -------------------------------------------------------------------------

    @staticmethod
    def _comments_for(submission_ids: list[str]) -> dict[str, list[TrainerCommentDetail]]:
        """Comments grouped by submission, newest first within each group."""
        rows = SupabaseClient.fetch_many(
            COMMENTS_TABLE,
            in_filter=("submission_id", submission_ids),
            order_by="created_at",
            desc=True,
        )
        comments = [TrainerCommentRecord(**row) for row in rows]
        trainers = UserService.get_users([c.trainer_id for c in comments])

        media_by_comment: dict[str, list[CommentMediaRecord]] = {}
        for row in SupabaseClient.fetch_many(
            COMMENT_MEDIA_TABLE,
            in_filter=("comment_id", [c.id for c in comments]),
        ):
            media_by_comment.setdefault(row["comment_id"], []).append(CommentMediaRecord(**row))

        grouped: dict[str, list[TrainerCommentDetail]] = {}
        for comment in comments:
            grouped.setdefault(comment.submission_id, []).append(
                TrainerCommentDetail(
                    **comment.model_dump(),
                    trainer=trainers.get(comment.trainer_id),
                    media=media_by_comment.get(comment.id, []),
                )
            )
        return grouped

    @staticmethod
    def _details(
        rows: list[dict],
        tasks: dict[str, HomeworkTaskRecord],
    ) -> list[HomeworkSubmissionDetail]:
        submissions = [HomeworkSubmissionRecord(**row) for row in rows]
        ids = [s.id for s in submissions]
        submitters = UserService.get_users([s.submitted_by_user_id for s in submissions])
        comments = SubmissionService._comments_for(ids)

        media_by_submission: dict[str, list[SubmissionMediaRecord]] = {}
        for row in SupabaseClient.fetch_many(
            SUBMISSION_MEDIA_TABLE,
            in_filter=("submission_id", ids),
            order_by="created_at",
        ):
            media_by_submission.setdefault(row["submission_id"], []).append(
                SubmissionMediaRecord(**row)
            )

        return [
            HomeworkSubmissionDetail(
                **submission.model_dump(),
                task=tasks.get(submission.task_id),
                submitted_by=submitters.get(submission.submitted_by_user_id),
                media=media_by_submission.get(submission.id, []),
                comments=comments.get(submission.id, []),
            )
            for submission in submissions
        ]

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def get_submission_detail(submission_id: str) -> HomeworkSubmissionDetail:
        """
        Submission with task, submitter, media and comments (newest first).

        Raises:
            SubmissionNotFoundError: If the submission doesn't exist
        """
        row = SupabaseClient.fetch_one(SUBMISSIONS_TABLE, "id", submission_id)
        if not row:
            raise SubmissionNotFoundError(submission_id)

        task_row = SupabaseClient.fetch_one("homework_tasks", "id", row["task_id"])
        tasks = {task_row["id"]: HomeworkTaskRecord(**task_row)} if task_row else {}
        return SubmissionService._details([row], tasks)[0]

    @staticmethod
    def get_submission(ctx: RequestContext, submission_id: str) -> HomeworkSubmissionDetail:
        """
        Raises:
            SubmissionNotFoundError: If the submission doesn't exist
            ForbiddenError: Unless the caller can view the task's pet
        """
        submission = SubmissionService.get_submission_detail(submission_id)
        if submission.task is None:
            if not ctx.is_admin:
                raise ForbiddenError()
            return submission

        PetService.ensure_can_view(ctx, submission.task.pet_id)
        return submission

    @staticmethod
    def get_submissions_for_tasks(
        tasks: list[HomeworkTaskRecord],
    ) -> list[HomeworkSubmissionDetail]:
        """Submissions against any of the given tasks, newest first."""
        by_id = {task.id: task for task in tasks}
        rows = SupabaseClient.fetch_many(
            SUBMISSIONS_TABLE,
            in_filter=("task_id", list(by_id)),
            order_by="submitted_at",
            desc=True,
        )
        return SubmissionService._details(rows, by_id)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_submission(ctx: RequestContext, data: SubmissionCreate) -> HomeworkSubmissionDetail:
        """
        Submit homework against a task.

        Raises:
            TaskNotFoundError: If the task doesn't exist
            TaskClosedError: If the task is no longer active
            ForbiddenError: Unless the caller owns the task's pet
        """
        task = TaskService.get_task(normalize_uuid(data.task_id))
        if not task.is_active:
            raise TaskClosedError(task.id)

        pet = PetService.get_pet_record(task.pet_id)
        if pet.owner_id != ctx.user_id:
            raise ForbiddenError()

        row = SupabaseClient.insert_row(
            SUBMISSIONS_TABLE,
            {
                "task_id": task.id,
                "submitted_by_user_id": ctx.user_id,
                "note": data.note or None,
                "status": SubmissionStatus.COMPLETED.value,
            },
        )
        submission_id = row["id"]

        for item in data.media:
            SupabaseClient.insert_row(
                SUBMISSION_MEDIA_TABLE,
                {
                    "submission_id": submission_id,
                    "media_type": item.media_type.value,
                    "file_path": item.file_path,
                    "file_name": item.file_name or None,
                },
            )

        logger.info(
            f"Created submission {submission_id} for task {task.id} "
            f"with {len(data.media)} media"
        )
        return SubmissionService.get_submission_detail(submission_id)

    @staticmethod
    def ensure_can_comment(ctx: RequestContext, submission_id: str) -> HomeworkSubmissionDetail:
        """
        Raises:
            SubmissionNotFoundError: If the submission doesn't exist
            TaskNotFoundError: If its task doesn't exist
            NotAssignedTrainerError: Unless the caller is the pet's trainer or an admin
        """
        submission = SubmissionService.get_submission_detail(submission_id)
        task = TaskService.get_task(submission.task_id)
        PetService.ensure_assigned_trainer(ctx, task.pet_id)
        return submission

    @staticmethod
    def add_comment(
        ctx: RequestContext,
        submission_id: str,
        comment: str | None,
        stored: StoredFile | None = None,
    ) -> HomeworkSubmissionDetail:
        """
        Add a trainer comment, optionally with one media file.

        Returns:
            The submission with its refreshed comment list

        Raises:
            ValidationError: If the comment text is missing
        """
        SubmissionService.ensure_can_comment(ctx, submission_id)

        if not comment or not comment.strip():
            raise ValidationError("Comment is required", code="COMMENT_REQUIRED")

        row = SupabaseClient.insert_row(
            COMMENTS_TABLE,
            {"submission_id": submission_id, "trainer_id": ctx.user_id, "comment": comment},
        )

        if stored is not None:
            SupabaseClient.insert_row(
                COMMENT_MEDIA_TABLE,
                {
                    "comment_id": row["id"],
                    "media_type": stored.media_type.value,
                    "file_path": stored.file_path,
                    "file_name": stored.file_name,
                },
            )

        logger.info(f"Trainer {ctx.user_id} commented on submission {submission_id}")
        return SubmissionService.get_submission_detail(submission_id)
