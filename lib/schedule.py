# =============================================================================
# lib/schedule.py - Calendar Scheduling & Day Status
# =============================================================================
# Decides which tasks are scheduled on a given day and classifies the day
# for calendar color-coding. Everything here is a pure function of its
# arguments: no I/O and no clock reads ("today" is always passed in).
#
# Scheduling rule:
#   1. preferred_days set and non-empty -> exactly those weekdays
#   2. otherwise the task frequency's default weekdays
#      (3x/week: Mon/Wed/Fri, 2x/week: Tue/Fri, weekly: Mon, else every day)
#
# Status precedence for a day:
#   none (nothing scheduled) -> future (after today) -> complete/partial/missed
# =============================================================================

from calendar import monthrange
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Protocol, Sequence

from core.models.task import Frequency, Weekday
from core.models.timeline import CalendarDay, DayStatus, MonthCalendar

ALL_DAYS = frozenset(Weekday)

DEFAULT_DAYS: dict[Frequency, frozenset[Weekday]] = {
    Frequency.THREE_PER_WEEK: frozenset({Weekday.MON, Weekday.WED, Weekday.FRI}),
    Frequency.TWO_PER_WEEK: frozenset({Weekday.TUE, Weekday.FRI}),
    Frequency.WEEKLY: frozenset({Weekday.MON}),
}


class SchedulableTask(Protocol):
    id: str
    frequency: str
    preferred_days: list[Weekday] | None


class DatedSubmission(Protocol):
    task_id: str
    submitted_at: datetime


def default_days(frequency: str | Frequency | None) -> frozenset[Weekday]:
    """Weekdays a frequency schedules when no preferred days are set."""
    parsed = frequency if isinstance(frequency, Frequency) else Frequency.parse(frequency)
    if parsed is None:
        return ALL_DAYS
    return DEFAULT_DAYS.get(parsed, ALL_DAYS)


def scheduled_days(task: SchedulableTask) -> frozenset[Weekday]:
    """Weekdays the task is scheduled on."""
    if task.preferred_days:
        return frozenset(Weekday(d) for d in task.preferred_days)
    return default_days(task.frequency)


def is_scheduled(task: SchedulableTask, day: date) -> bool:
    return Weekday.of(day) in scheduled_days(task)


def tasks_for_day(day: date, tasks: Iterable[SchedulableTask]) -> list[SchedulableTask]:
    """Tasks scheduled on `day`, in input order."""
    return [task for task in tasks if is_scheduled(task, day)]


def local_date(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of a timestamp, optionally converted to `tz` first."""
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def submissions_for_day(
    day: date,
    submissions: Iterable[DatedSubmission],
    tz: tzinfo | None = None,
) -> list[DatedSubmission]:
    return [s for s in submissions if local_date(s.submitted_at, tz) == day]


def classify_day(
    day: date,
    tasks: Sequence[SchedulableTask],
    submissions: Sequence[DatedSubmission],
    today: date,
    tz: tzinfo | None = None,
) -> DayStatus:
    """
    Completion status of `day` for a pet's active tasks.

    A scheduled task counts as done when at least one of its submissions
    falls on the same calendar day. Today is never "future".
    """
    return _classify(day, tasks, submissions, today, tz).status


def _classify(
    day: date,
    tasks: Sequence[SchedulableTask],
    submissions: Sequence[DatedSubmission],
    today: date,
    tz: tzinfo | None,
) -> CalendarDay:
    scheduled = tasks_for_day(day, tasks)
    scheduled_ids = [task.id for task in scheduled]

    if not scheduled:
        return CalendarDay(date=day, status=DayStatus.NONE)
    if day > today:
        return CalendarDay(date=day, status=DayStatus.FUTURE, scheduled_task_ids=scheduled_ids)

    submitted_task_ids = {s.task_id for s in submissions_for_day(day, submissions, tz)}
    completed_ids = [task_id for task_id in scheduled_ids if task_id in submitted_task_ids]

    if len(completed_ids) == len(scheduled_ids):
        status = DayStatus.COMPLETE
    elif completed_ids:
        status = DayStatus.PARTIAL
    else:
        status = DayStatus.MISSED

    return CalendarDay(
        date=day,
        status=status,
        scheduled_task_ids=scheduled_ids,
        completed_task_ids=completed_ids,
    )


def build_month_calendar(
    year: int,
    month: int,
    tasks: Sequence[SchedulableTask],
    submissions: Sequence[DatedSubmission],
    today: date,
    tz: tzinfo | None = None,
    pet_id: str | None = None,
) -> MonthCalendar:
    """Classify every day of a month."""
    first = date(year, month, 1)
    days_in_month = monthrange(year, month)[1]
    days = [
        _classify(first + timedelta(days=offset), tasks, submissions, today, tz)
        for offset in range(days_in_month)
    ]
    return MonthCalendar(pet_id=pet_id, year=year, month=month, days=days)
