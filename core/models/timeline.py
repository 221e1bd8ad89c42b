# =============================================================================
# core/models/timeline.py - Timeline & Calendar Schemas
# =============================================================================
# Derived views, computed fresh per request and never stored:
#   - TimelineItem: one task / submission / comment event
#   - TimelineWeek: items bucketed into a Monday-start week
#   - CalendarDay / MonthCalendar: per-day completion status
# =============================================================================

from datetime import date, datetime
from enum import Enum
from typing import Union

from pydantic import BaseModel, Field

from .submission import HomeworkSubmissionDetail, TrainerCommentDetail
from .task import HomeworkTaskDetail


class TimelineItemType(str, Enum):
    TASK = "task"
    SUBMISSION = "submission"
    COMMENT = "comment"


class TimelineItem(BaseModel):
    """
    One entry of a pet's activity feed.

    date is task.created_at, submission.submitted_at or comment.created_at
    depending on type; data is the underlying record.
    """
    type: TimelineItemType
    date: datetime
    data: Union[HomeworkSubmissionDetail, TrainerCommentDetail, HomeworkTaskDetail]


class TimelineWeek(BaseModel):
    """
    Timeline items that fall in one Monday-start week.

    Example label: "This Week (Oct 12 - Oct 18)" or "Week of Oct 5 - Oct 11"
    """
    label: str
    week_start: date
    week_end: date
    items: list[TimelineItem] = Field(default_factory=list)


class DayStatus(str, Enum):
    """
    Completion status of one calendar day.

    Precedence: none (nothing scheduled) > future > complete / partial / missed
    """
    NONE = "none"
    FUTURE = "future"
    COMPLETE = "complete"
    PARTIAL = "partial"
    MISSED = "missed"


class CalendarDay(BaseModel):
    date: date
    status: DayStatus
    scheduled_task_ids: list[str] = Field(default_factory=list)
    completed_task_ids: list[str] = Field(default_factory=list)


class MonthCalendar(BaseModel):
    """Every day of one month, classified. Used for calendar color-coding."""
    pet_id: str | None = None
    year: int
    month: int
    days: list[CalendarDay] = Field(default_factory=list)
