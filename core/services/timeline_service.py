# =============================================================================
# core/services/timeline_service.py - Timeline & Calendar Views
# =============================================================================
# Loads a pet's tasks and submissions once and hands them to the pure
# aggregation functions in lib.timeline and lib.schedule. Nothing computed
# here is stored.
# =============================================================================

import logging
from datetime import date, tzinfo

from core.models.context import RequestContext
from core.models.timeline import MonthCalendar, TimelineItem, TimelineWeek
from core.services.pet_service import PetService
from core.services.submission_service import SubmissionService
from core.services.task_service import TaskService
from lib.schedule import build_month_calendar, local_date
from lib.timeline import build_timeline, group_by_week
from lib.utils import utc_now

logger = logging.getLogger(__name__)


class TimelineService:
    """Service for derived per-pet views."""

    @staticmethod
    def get_timeline(ctx: RequestContext, pet_id: str) -> list[TimelineItem]:
        """
        Every task, submission and comment for a pet, newest first.

        Raises:
            PetNotFoundError: If the pet doesn't exist
            ForbiddenError: If the caller can't view the pet
        """
        PetService.ensure_can_view(ctx, pet_id)

        tasks = TaskService.get_tasks_for_pet(pet_id)
        submissions = SubmissionService.get_submissions_for_tasks(tasks)
        items = build_timeline(tasks, submissions)

        logger.debug(
            f"Timeline for pet {pet_id}: {len(tasks)} tasks, "
            f"{len(submissions)} submissions, {len(items)} items"
        )
        return items

    @staticmethod
    def get_weekly_timeline(
        ctx: RequestContext,
        pet_id: str,
        today: date | None = None,
    ) -> list[TimelineWeek]:
        """The timeline bucketed into Monday-start weeks, newest week first."""
        items = TimelineService.get_timeline(ctx, pet_id)
        return group_by_week(items, today or utc_now().date())

    @staticmethod
    def get_calendar(
        ctx: RequestContext,
        pet_id: str,
        year: int,
        month: int,
        tz: tzinfo | None = None,
    ) -> MonthCalendar:
        """
        Completion status of every day in a month for the pet's active tasks.

        Days are calendar days in `tz` (UTC when not given).

        Raises:
            PetNotFoundError: If the pet doesn't exist
            ForbiddenError: If the caller can't view the pet
        """
        PetService.ensure_can_view(ctx, pet_id)

        tasks = TaskService.get_tasks_for_pet(pet_id)
        active = [task for task in tasks if task.is_active]
        submissions = SubmissionService.get_submissions_for_tasks(active)
        today = local_date(utc_now(), tz)

        return build_month_calendar(
            year,
            month,
            active,
            submissions,
            today=today,
            tz=tz,
            pet_id=pet_id,
        )
