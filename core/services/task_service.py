# =============================================================================
# core/services/task_service.py - Homework Task Business Logic
# =============================================================================
# Trainers create and edit tasks for the pets assigned to them; owners pick
# the weekdays a task shows up on their calendar. Closing a task
# (is_active=false) stops new submissions against it.
# =============================================================================

import logging

from app.exceptions import (
    InvalidPreferredDaysError,
    MediaNotFoundError,
    NotPetOwnerError,
    TaskNotFoundError,
)
from core.models.context import RequestContext
from core.models.media import StoredFile, TaskMediaRecord
from core.models.task import (
    HomeworkTaskDetail,
    HomeworkTaskRecord,
    TaskCreate,
    TaskUpdate,
    Weekday,
)
from core.services.pet_service import PetService
from core.services.user_service import UserService
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

TASKS_TABLE = "homework_tasks"
TASK_MEDIA_TABLE = "task_media"


class TaskService:
    """Service for homework tasks and their media."""

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def get_task(task_id: str) -> HomeworkTaskRecord:
        """
        Raises:
            TaskNotFoundError: If the task doesn't exist
        """
        row = SupabaseClient.fetch_one(TASKS_TABLE, "id", task_id)
        if not row:
            raise TaskNotFoundError(task_id)
        return HomeworkTaskRecord(**row)

    @staticmethod
    def get_tasks_for_pet(pet_id: str) -> list[HomeworkTaskDetail]:
        """All tasks for a pet, newest first, with trainer and media."""
        rows = SupabaseClient.fetch_many(
            TASKS_TABLE,
            filters={"pet_id": pet_id},
            order_by="created_at",
            desc=True,
        )
        tasks = [HomeworkTaskRecord(**row) for row in rows]
        trainers = UserService.get_users([t.created_by_trainer_id for t in tasks])

        media_rows = SupabaseClient.fetch_many(
            TASK_MEDIA_TABLE,
            in_filter=("task_id", [t.id for t in tasks]),
            order_by="created_at",
        )
        media_by_task: dict[str, list[TaskMediaRecord]] = {}
        for row in media_rows:
            media_by_task.setdefault(row["task_id"], []).append(TaskMediaRecord(**row))

        return [
            HomeworkTaskDetail(
                **task.model_dump(),
                trainer=trainers.get(task.created_by_trainer_id),
                media=media_by_task.get(task.id, []),
            )
            for task in tasks
        ]

    @staticmethod
    def list_tasks(ctx: RequestContext, pet_id: str) -> list[HomeworkTaskDetail]:
        """
        Raises:
            PetNotFoundError: If the pet doesn't exist
            ForbiddenError: If the caller can't view the pet
        """
        PetService.ensure_can_view(ctx, pet_id)
        return TaskService.get_tasks_for_pet(pet_id)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_task(ctx: RequestContext, data: TaskCreate) -> HomeworkTaskRecord:
        """
        Raises:
            PetNotFoundError: If the pet doesn't exist
            NotAssignedTrainerError: Unless the caller is the pet's trainer or an admin
        """
        pet_id = normalize_uuid(data.pet_id)
        PetService.ensure_assigned_trainer(ctx, pet_id)

        row = SupabaseClient.insert_row(
            TASKS_TABLE,
            {
                "pet_id": pet_id,
                "created_by_trainer_id": ctx.user_id,
                "title": data.title,
                "instructions": data.instructions,
                "frequency": data.frequency.value,
                "expected_duration_mins": data.expected_duration_mins,
                "is_active": True,
            },
        )
        task = HomeworkTaskRecord(**row)
        logger.info(f"Created task {task.id} for pet {pet_id}")
        return task

    @staticmethod
    def update_task(ctx: RequestContext, task_id: str, updates: TaskUpdate) -> HomeworkTaskRecord:
        """
        Change the fields that were sent. Last write wins.

        Raises:
            TaskNotFoundError: If the task doesn't exist
            NotAssignedTrainerError: Unless the caller is the pet's trainer or an admin
        """
        task = TaskService.get_task(task_id)
        PetService.ensure_assigned_trainer(ctx, task.pet_id)

        data = updates.model_dump(exclude_unset=True, mode="json")
        if not data:
            return task

        rows = SupabaseClient.update_rows(TASKS_TABLE, data, "id", task_id)
        logger.info(f"Updated task {task_id}: {sorted(data)}")
        return HomeworkTaskRecord(**rows[0]) if rows else task

    @staticmethod
    def parse_preferred_days(days: list[str] | None) -> list[Weekday] | None:
        """
        Validate weekday abbreviations. An empty list clears the override.

        Raises:
            InvalidPreferredDaysError: If any value isn't Mon..Sun
        """
        if not days:
            return None
        try:
            return [Weekday(day) for day in days]
        except ValueError:
            raise InvalidPreferredDaysError(days)

    @staticmethod
    def set_preferred_days(
        ctx: RequestContext,
        task_id: str,
        days: list[str] | None,
    ) -> HomeworkTaskRecord:
        """
        Owner-chosen weekdays for the calendar.

        Raises:
            TaskNotFoundError: If the task doesn't exist
            PetNotFoundError: If the task's pet doesn't exist
            NotPetOwnerError: Unless the caller owns the pet or is an admin
            InvalidPreferredDaysError: If any value isn't a weekday abbreviation
        """
        task = TaskService.get_task(task_id)
        pet = PetService.get_pet_record(task.pet_id)
        if pet.owner_id != ctx.user_id and not ctx.is_admin:
            raise NotPetOwnerError("Only the pet owner can set preferred days")

        preferred = TaskService.parse_preferred_days(days)
        value = [day.value for day in preferred] if preferred else None

        rows = SupabaseClient.update_rows(TASKS_TABLE, {"preferred_days": value}, "id", task_id)
        logger.info(f"Set preferred days for task {task_id}: {value}")
        return HomeworkTaskRecord(**rows[0]) if rows else task

    # -------------------------------------------------------------------------
    # Media
    # -------------------------------------------------------------------------

    @staticmethod
    def list_media(task_id: str) -> list[TaskMediaRecord]:
        TaskService.get_task(task_id)
        rows = SupabaseClient.fetch_many(
            TASK_MEDIA_TABLE,
            filters={"task_id": task_id},
            order_by="created_at",
        )
        return [TaskMediaRecord(**row) for row in rows]

    @staticmethod
    def ensure_can_manage_media(ctx: RequestContext, task_id: str) -> HomeworkTaskRecord:
        task = TaskService.get_task(task_id)
        PetService.ensure_assigned_trainer(ctx, task.pet_id)
        return task

    @staticmethod
    def add_media(task_id: str, stored: StoredFile) -> TaskMediaRecord:
        """Record an already stored file against a task."""
        row = SupabaseClient.insert_row(
            TASK_MEDIA_TABLE,
            {
                "task_id": task_id,
                "media_type": stored.media_type.value,
                "file_path": stored.file_path,
                "file_name": stored.file_name,
            },
        )
        logger.info(f"Attached {stored.file_path} to task {task_id}")
        return TaskMediaRecord(**row)

    @staticmethod
    def delete_media(ctx: RequestContext, task_id: str, media_id: str) -> None:
        """
        Raises:
            TaskNotFoundError: If the task doesn't exist
            NotAssignedTrainerError: Unless the caller is the pet's trainer or an admin
            MediaNotFoundError: If the media doesn't belong to the task
        """
        TaskService.ensure_can_manage_media(ctx, task_id)

        row = SupabaseClient.fetch_one(TASK_MEDIA_TABLE, "id", media_id)
        if not row or row["task_id"] != task_id:
            raise MediaNotFoundError(media_id)

        SupabaseClient.delete_rows(TASK_MEDIA_TABLE, "id", media_id)
        logger.info(f"Deleted media {media_id} from task {task_id}")
