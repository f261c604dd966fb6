"""Calendar queries: map a year/month/day selector onto a time window.

Months are 0-indexed (0 is January) to match the web client.
"""

import calendar
import logging
from datetime import datetime, timedelta
from typing import Iterable, List, NamedTuple, Optional

from .models import Period, Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)


class CalendarWindow(NamedTuple):
    """Half-open interval [start, end)."""

    start: datetime
    end: datetime


def window_for(year: int, month: int, day: Optional[int] = None) -> Optional[CalendarWindow]:
    """Build the window for a month, or for a single day of it.

    Returns None when the selector names no real date, e.g. April 31st.
    """
    if not 0 <= month <= 11 or not datetime.min.year <= year <= datetime.max.year:
        return None
    month_number = month + 1

    if day is None:
        if month_number == 12:
            if year == datetime.max.year:
                return None
            return CalendarWindow(datetime(year, 12, 1), datetime(year + 1, 1, 1))
        return CalendarWindow(datetime(year, month_number, 1), datetime(year, month_number + 1, 1))

    days_in_month = calendar.monthrange(year, month_number)[1]
    if not 1 <= day <= days_in_month:
        return None
    start = datetime(year, month_number, day)
    if start.date() == datetime.max.date():
        return None
    return CalendarWindow(start, start + timedelta(days=1))


def overlaps(period: Optional[Period], window: CalendarWindow) -> bool:
    """Inclusive-start/exclusive-end intersection. Undated never matches."""
    if period is None:
        return False
    return period.start < window.end and period.end >= window.start


def select_tasks(tasks: Iterable[Task], window: CalendarWindow) -> List[Task]:
    """Keep tasks overlapping ``window``, ordered by period start."""
    matching = [task for task in tasks if overlaps(task.period, window)]
    return sorted(matching, key=lambda t: (t.period.start, t.created_at, t.id))


class CalendarQueryEngine:
    """Resolves calendar selectors against a repository, scoped to an owner."""

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    def find_tasks(
        self,
        owner: str,
        year: int,
        month: int,
        day: Optional[int] = None,
    ) -> List[Task]:
        window = window_for(year, month, day)
        if window is None:
            logger.debug(f"No calendar window for year={year} month={month} day={day}")
            return []
        candidates = self.repository.list_by_owner(owner, window.start, window.end)
        return select_tasks(candidates, window)
