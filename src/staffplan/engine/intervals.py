"""
Date-window arithmetic shared by every engine component.

All windows are inclusive calendar-date ranges. A None bound on either an
assignment or a window means unbounded on that side.
"""

import math
from datetime import date, timedelta
from typing import List, Optional, Tuple

from staffplan.domain import Assignment, DateWindow

DAYS_PER_WEEK = 7


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end."""
    return (end - start).days


def weeks_between(start: date, end: date) -> int:
    """Weeks covered by a span, rounded up. Never negative."""
    return max(0, math.ceil(days_between(start, end) / DAYS_PER_WEEK))


def weeks_in_window(window: DateWindow) -> int:
    """
    Weeks covered by a window.

    Falls back to a single week when either bound is missing, which is how
    the recommender sizes capacity for an open query.
    """
    if not window.is_bounded:
        return 1
    return weeks_between(window.start, window.end)


def overlaps_window(start: Optional[date], end: Optional[date], window: DateWindow) -> bool:
    """True when [start, end] intersects the window."""
    if window.end is not None and start is not None and start > window.end:
        return False
    if window.start is not None and end is not None and end < window.start:
        return False
    return True


def clip_to_window(
    start: Optional[date],
    end: Optional[date],
    window: DateWindow,
) -> Tuple[Optional[date], Optional[date]]:
    """
    Clip [start, end] to the window.

    An open-ended span extends through the window end.
    """
    effective_start = start if start is not None else window.start
    if window.start is not None and effective_start is not None:
        effective_start = max(effective_start, window.start)

    effective_end = end if end is not None else window.end
    if window.end is not None and effective_end is not None:
        effective_end = min(effective_end, window.end)

    return effective_start, effective_end


def assignment_overlaps(assignment: Assignment, window: DateWindow) -> bool:
    return overlaps_window(assignment.start_date, assignment.end_date, window)


def allocated_hours_in_window(assignment: Assignment, window: DateWindow) -> float:
    """Weekly hours times the clipped weeks the assignment spends in a bounded window."""
    if not window.is_bounded:
        raise ValueError("allocated_hours_in_window needs a bounded window")
    if not assignment_overlaps(assignment, window):
        return 0.0
    effective_start, effective_end = clip_to_window(
        assignment.start_date, assignment.end_date, window
    )
    return weeks_between(effective_start, effective_end) * float(assignment.allocated_hours)


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def week_starts(window: DateWindow) -> List[date]:
    """Monday of every week touched by a bounded window, in order."""
    if not window.is_bounded:
        raise ValueError("week_starts needs a bounded window")
    if window.end < window.start:
        return []
    weeks = []
    current = week_start(window.start)
    while current <= window.end:
        weeks.append(current)
        current += timedelta(days=DAYS_PER_WEEK)
    return weeks
