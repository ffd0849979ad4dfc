from peak_progress.climb_log import STORAGE_KEY, ClimbLog, day_key, load, save, set_day
from peak_progress.controller import UpdateController
from peak_progress.day_state import DayState, classify, is_selectable
from peak_progress.stats import Stats, compute_current_streak, compute_stats, compute_total_completed

__all__ = [
    "STORAGE_KEY",
    "ClimbLog",
    "DayState",
    "Stats",
    "UpdateController",
    "classify",
    "compute_current_streak",
    "compute_stats",
    "compute_total_completed",
    "day_key",
    "is_selectable",
    "load",
    "save",
    "set_day",
]
