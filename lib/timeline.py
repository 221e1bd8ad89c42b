# =============================================================================
# lib/timeline.py - Pet Activity Timeline
# =============================================================================
# Flattens a pet's tasks, submissions and trainer comments into one feed,
# newest first, and buckets the feed into Monday-start weeks for display.
#
# Each record contributes exactly one entry, so no deduplication is needed.
# The feed is not paginated: callers get the full history.
# =============================================================================

from datetime import date, timedelta
from typing import Iterable

from core.models.submission import HomeworkSubmissionDetail
from core.models.task import HomeworkTaskDetail
from core.models.timeline import TimelineItem, TimelineItemType, TimelineWeek


def build_timeline(
    tasks: Iterable[HomeworkTaskDetail],
    submissions: Iterable[HomeworkSubmissionDetail],
) -> list[TimelineItem]:
    """
    Merge tasks, submissions and their comments into a date-descending feed.

    Dates used: task.created_at, submission.submitted_at, comment.created_at.
    The sort is stable, so entries with equal dates keep input order
    (tasks first, then each submission followed by its comments).

    Example:
        task at t1, submission at t2 > t1, comment at t3 > t2
        -> [comment, submission, task]
    """
    items: list[TimelineItem] = []

    for task in tasks:
        items.append(TimelineItem(type=TimelineItemType.TASK, date=task.created_at, data=task))

    for submission in submissions:
        items.append(
            TimelineItem(
                type=TimelineItemType.SUBMISSION,
                date=submission.submitted_at,
                data=submission,
            )
        )
        for comment in submission.comments:
            items.append(
                TimelineItem(type=TimelineItemType.COMMENT, date=comment.created_at, data=comment)
            )

    return sorted(items, key=lambda item: item.date, reverse=True)


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing `day`."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def _short(day: date) -> str:
    # "Oct 5", no zero padding
    return f"{day:%b} {day.day}"


def week_label(week_start: date, week_end: date, today: date) -> str:
    """Display label for a week bucket."""
    span = f"{_short(week_start)} - {_short(week_end)}"
    if week_bounds(today)[0] == week_start:
        return f"This Week ({span})"
    return f"Week of {span}"


def group_by_week(items: Iterable[TimelineItem], today: date) -> list[TimelineWeek]:
    """
    Bucket timeline items by the Monday-start week of their date.

    Groups come out in the order their first item appears, so a
    date-descending feed yields newest week first. Items are not copied or
    reordered within a group.
    """
    groups: dict[date, TimelineWeek] = {}

    for item in items:
        start, end = week_bounds(item.date.date())
        group = groups.get(start)
        if group is None:
            group = TimelineWeek(
                label=week_label(start, end, today),
                week_start=start,
                week_end=end,
            )
            groups[start] = group
        group.items.append(item)

    return list(groups.values())
