import datetime as dt
from typing import NamedTuple

from peak_progress.climb_log import ClimbLog, day_key


class Stats(NamedTuple):
    total_completed: int
    current_streak: int


def compute_total_completed(log: ClimbLog) -> int:
    return sum(1 for v in log.values() if v is True)


def compute_current_streak(log: ClimbLog, today: dt.date) -> int:
    """Consecutive climbed days ending today, or yesterday while today is still unlogged."""
    cursor = today
    if day_key(cursor) not in log:
        cursor -= dt.timedelta(days=1)
    streak = 0
    while log.get(day_key(cursor)) is True:
        streak += 1
        cursor -= dt.timedelta(days=1)
    return streak


def compute_stats(log: ClimbLog, today: dt.date) -> Stats:
    return Stats(compute_total_completed(log), compute_current_streak(log, today))
