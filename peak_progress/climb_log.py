"""Day-keyed climb outcomes and their persistence.

A climb log is a plain ``Dict[str, bool]``: canonical ``YYYY-MM-DD`` day keys
mapped to ``True`` (climbed) or ``False`` (explicitly not climbed). A missing
key means the day was never logged.
"""
import datetime as dt
import json
import logging
import re
from typing import Dict, Union

from peak_progress.errors import LoadFailure, WriteFailure
from peak_progress.stores import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "peak-progress-climbs"
DAY_KEY_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

ClimbLog = Dict[str, bool]
DayLike = Union[dt.date, str]


def day_key(d: dt.date) -> str:
    # Datetimes keep their own wall-clock date; no timezone conversion.
    if isinstance(d, dt.datetime):
        d = d.date()
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_day_key(s: str) -> dt.date:
    if not isinstance(s, str) or not DAY_KEY_RE.fullmatch(s):
        raise ValueError(f"Not a YYYY-MM-DD day key: {s!r}")
    return dt.date(int(s[:4]), int(s[5:7]), int(s[8:10]))


def as_key(day: DayLike) -> str:
    if isinstance(day, str):
        return day_key(parse_day_key(day))
    return day_key(day)


def encode(log: ClimbLog) -> str:
    return json.dumps(log, sort_keys=True, separators=(",", ":"))


def decode(raw: str) -> ClimbLog:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise LoadFailure(f"Climb log is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise LoadFailure(f"Climb log must be a JSON object, got {type(data).__name__}")
    out: ClimbLog = {}
    dropped = 0
    for k, v in data.items():
        try:
            d = parse_day_key(k)
        except ValueError:
            dropped += 1
            continue
        if not isinstance(v, bool):
            dropped += 1
            continue
        out[day_key(d)] = v
    if dropped:
        logger.warning("Dropped %d malformed climb log entries", dropped)
    return out


def load(store: KeyValueStore, key: str = STORAGE_KEY) -> ClimbLog:
    """Hydrate a log from ``store``; any failure yields an empty log."""
    try:
        raw = store.read_raw(key)
    except Exception as ex:
        logger.warning("Could not read climb log %r, starting empty (%s: %s)", key, type(ex).__name__, ex)
        return {}
    if raw is None:
        logger.info("No climb log stored under %r yet, starting empty", key)
        return {}
    try:
        return decode(raw)
    except LoadFailure as ex:
        logger.warning("Ignoring corrupt climb log %r: %s", key, ex)
        return {}


def save(store: KeyValueStore, log: ClimbLog, key: str = STORAGE_KEY) -> bool:
    """Write ``log`` to ``store``. Returns False instead of raising when the write fails."""
    raw = encode(log)
    try:
        if not store.write_raw(key, raw):
            raise WriteFailure(f"store rejected {len(raw)} chars under {key!r}")
    except Exception as ex:
        logger.warning("Climb log not saved, keeping in-memory copy (%s: %s)", type(ex).__name__, ex)
        return False
    logger.debug("Saved %d climb log entries under %r", len(log), key)
    return True


def set_day(log: ClimbLog, day: DayLike, outcome: bool) -> ClimbLog:
    if not isinstance(outcome, bool):
        raise TypeError(f"Climb outcome must be a bool, got {type(outcome).__name__}")
    return {**log, as_key(day): outcome}
