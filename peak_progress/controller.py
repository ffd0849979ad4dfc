import datetime as dt
import logging
from enum import Enum
from typing import Optional

from peak_progress import climb_log
from peak_progress.climb_log import STORAGE_KEY, ClimbLog
from peak_progress.day_state import is_selectable
from peak_progress.stats import Stats, compute_stats
from peak_progress.stores import KeyValueStore

logger = logging.getLogger(__name__)


class ControllerState(Enum):
    IDLE = "Idle"
    AWAITING_DECISION = "AwaitingDecision"


class UpdateController:
    """Owns one session's climb log: select a day, then confirm or cancel.

    Transitions that do not apply to the current state are ignored.
    """

    def __init__(self, store: KeyValueStore, log: Optional[ClimbLog] = None, key: str = STORAGE_KEY) -> None:
        self.store = store
        self.key = key
        self.log: ClimbLog = dict(log) if log is not None else {}
        self.pending: Optional[dt.date] = None
        self.last_save_ok = True

    @classmethod
    def hydrate(cls, store: KeyValueStore, key: str = STORAGE_KEY) -> "UpdateController":
        return cls(store, climb_log.load(store, key), key)

    @property
    def state(self) -> ControllerState:
        return ControllerState.IDLE if self.pending is None else ControllerState.AWAITING_DECISION

    def select(self, d: dt.date, today: dt.date) -> bool:
        if self.pending is not None or not is_selectable(d, today):
            logger.debug("Ignoring selection of %s in state %s", d, self.state.value)
            return False
        self.pending = d
        return True

    def confirm(self, outcome: bool) -> bool:
        if self.pending is None:
            logger.debug("Ignoring confirm with no day selected")
            return False
        self.log = climb_log.set_day(self.log, self.pending, outcome)
        self.last_save_ok = climb_log.save(self.store, self.log, self.key)
        logger.debug("Logged %s as %s", self.pending, outcome)
        self.pending = None
        return True

    def cancel(self) -> bool:
        if self.pending is None:
            return False
        self.pending = None
        return True

    def stats(self, today: dt.date) -> Stats:
        return compute_stats(self.log, today)
