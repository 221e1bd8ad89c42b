# =============================================================================
# app/routers/timeline.py - Timeline & Calendar Endpoints
# =============================================================================
# Read-only views derived from a pet's tasks, submissions and comments.
# Mounted twice in main.py: under /api/timeline and /api/calendar.
# =============================================================================

import logging
import re
from typing import Annotated
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Path, Query

from app.dependencies import ContextDep
from app.exceptions import ValidationError
from core.models.timeline import MonthCalendar, TimelineItem, TimelineWeek
from core.services.timeline_service import TimelineService
from lib.schedule import local_date
from lib.utils import utc_now

logger = logging.getLogger(__name__)

timeline_router = APIRouter()
calendar_router = APIRouter()

PetId = Annotated[UUID, Path(description="Pet UUID")]

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def _parse_month(month: str | None, tz: ZoneInfo | None = None) -> tuple[int, int]:
    """YYYY-MM, defaulting to the current month in `tz` (UTC when unset)."""
    if not month:
        today = local_date(utc_now(), tz)
        return today.year, today.month

    match = MONTH_PATTERN.match(month)
    if not match or int(match.group(1)) < 1 or not 1 <= int(match.group(2)) <= 12:
        raise ValidationError(
            f"Invalid month: {month}",
            code="INVALID_MONTH",
            suggestion="Use the YYYY-MM format, e.g. 2024-10",
        )
    return int(match.group(1)), int(match.group(2))


def _parse_timezone(tz: str | None) -> ZoneInfo | None:
    if not tz:
        return None
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(
            f"Unknown time zone: {tz}",
            code="INVALID_TIMEZONE",
            suggestion="Use an IANA name such as America/New_York",
        )


# =============================================================================
# Timeline
# =============================================================================

@timeline_router.get("/{pet_id}", response_model=list[TimelineItem])
async def get_timeline(pet_id: PetId, ctx: ContextDep):
    """
    Every task, submission and trainer comment for a pet, newest first.

    Raises:
        403: Unless the caller is the owner, the assigned trainer or an admin
        404: If the pet doesn't exist
    """
    return TimelineService.get_timeline(ctx, str(pet_id))


@timeline_router.get("/{pet_id}/weeks", response_model=list[TimelineWeek])
async def get_weekly_timeline(pet_id: PetId, ctx: ContextDep):
    """The timeline grouped into Monday-start weeks, newest week first."""
    return TimelineService.get_weekly_timeline(ctx, str(pet_id))


# =============================================================================
# Calendar
# =============================================================================

@calendar_router.get("/{pet_id}", response_model=MonthCalendar)
async def get_calendar(
    pet_id: PetId,
    ctx: ContextDep,
    month: Annotated[str | None, Query(description="YYYY-MM, defaults to this month")] = None,
    tz: Annotated[str | None, Query(description="IANA time zone for day boundaries")] = None,
):
    """
    Per-day completion status for the pet's active tasks.

    Example:
        GET /api/calendar/5d1e...?month=2024-10&tz=America/New_York
    """
    zone = _parse_timezone(tz)
    year, month_number = _parse_month(month, zone)
    return TimelineService.get_calendar(ctx, str(pet_id), year, month_number, zone)
