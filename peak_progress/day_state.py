import datetime as dt
from enum import Enum

from peak_progress.climb_log import ClimbLog, day_key


class DayState(Enum):
    COMPLETED = "Completed"
    MISSED = "Missed"
    UNRECORDED_PAST = "UnrecordedPast"
    UNRECORDED_FUTURE = "UnrecordedFuture"
    OUTSIDE_VISIBLE_MONTH = "OutsideVisibleMonth"


def in_month(d: dt.date, view_month: dt.date) -> bool:
    return (d.year, d.month) == (view_month.year, view_month.month)


def is_selectable(d: dt.date, today: dt.date) -> bool:
    return not d > today


def classify(d: dt.date, log: ClimbLog, today: dt.date, view_month: dt.date) -> DayState:
    """Classify one calendar cell. ``view_month`` is any date in the displayed month.

    Unlogged past days are drawn like misses but stay UNRECORDED_PAST so they
    are never mistaken for a stored ``False``.
    """
    if not in_month(d, view_month):
        return DayState.OUTSIDE_VISIBLE_MONTH
    outcome = log.get(day_key(d))
    if outcome is True:
        return DayState.COMPLETED
    if outcome is False:
        return DayState.MISSED
    if d > today:
        return DayState.UNRECORDED_FUTURE
    return DayState.UNRECORDED_PAST
