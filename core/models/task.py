# =============================================================================
# core/models/task.py - Homework Task Schemas
# =============================================================================
# Tasks are assigned by a pet's trainer. Scheduling is described by a closed
# Frequency enum plus an optional owner-chosen set of weekdays.
#
# Frequency values are what the task form offers. Legacy spellings such as
# "3x per week" are normalized on input.
# =============================================================================

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from .media import TaskMediaRecord
from .user import UserRecord


class Weekday(str, Enum):
    """Weekday abbreviations, Monday first (matches date.weekday())."""
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return list(cls)[day.weekday()]


class Frequency(str, Enum):
    """
    How often a task should be practiced.

    - daily / 2x/day / as-needed: scheduled every day on the calendar
    - 3x/week: Mon, Wed, Fri
    - 2x/week: Tue, Fri
    - weekly: Mon
    """
    DAILY = "daily"
    TWICE_DAILY = "2x/day"
    THREE_PER_WEEK = "3x/week"
    TWO_PER_WEEK = "2x/week"
    WEEKLY = "weekly"
    AS_NEEDED = "as-needed"

    @classmethod
    def _missing_(cls, value):
        # "3x per week", " Weekly " and friends
        if isinstance(value, str):
            normalized = " ".join(value.strip().lower().split()).replace(" per ", "/")
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @classmethod
    def parse(cls, value: str | None) -> "Frequency | None":
        """Lenient parse for stored rows; unknown strings give None."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class HomeworkTaskRecord(BaseModel):
    """
    A row from the homework_tasks table.

    frequency is kept as stored text so older rows with free-form values
    still load; lib.schedule interprets it.
    """
    id: str
    pet_id: str
    created_by_trainer_id: str
    title: str
    instructions: str
    frequency: str
    expected_duration_mins: int | None = None
    is_active: bool = True
    preferred_days: list[Weekday] | None = None
    created_at: datetime


class HomeworkTaskDetail(HomeworkTaskRecord):
    """Task joined with its trainer and media."""
    trainer: UserRecord | None = None
    media: list[TaskMediaRecord] = Field(default_factory=list)


class TaskCreate(BaseModel):
    """
    Body of POST /api/tasks.

    Example:
        {
            "pet_id": "5d1e...",
            "title": "Loose leash walking",
            "instructions": "10 minutes, reward every 5 steps at your side",
            "frequency": "daily",
            "expected_duration_mins": 10
        }
    """
    pet_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    instructions: str = Field(..., min_length=1)
    frequency: Frequency
    expected_duration_mins: int | None = Field(default=None, ge=1, le=600)


class TaskUpdate(BaseModel):
    """Body of PATCH /api/tasks/{id}. Closing a task sets is_active=false."""
    title: str | None = Field(default=None, min_length=1, max_length=200)
    instructions: str | None = Field(default=None, min_length=1)
    frequency: Frequency | None = None
    expected_duration_mins: int | None = Field(default=None, ge=1, le=600)
    is_active: bool | None = None


class PreferredDaysUpdate(BaseModel):
    """
    Body of PATCH /api/tasks/{id}/preferred-days.

    Values are checked against Weekday by the service so the error names
    the allowed abbreviations. null or [] clears the override.
    """
    preferred_days: list[str] | None = None
