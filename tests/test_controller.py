import datetime as dt

from peak_progress.climb_log import STORAGE_KEY, load
from peak_progress.controller import ControllerState, UpdateController
from peak_progress.stores import MemoryStore

TODAY = dt.date(2024, 6, 10)
DAY = dt.date(2024, 6, 5)


class TestTransitions:
    def test_confirm_records_and_persists(self, store):
        ctl = UpdateController(store)
        assert ctl.select(DAY, TODAY)
        assert ctl.state is ControllerState.AWAITING_DECISION
        assert ctl.pending == DAY

        assert ctl.confirm(True)
        assert ctl.log == {"2024-06-05": True}
        assert ctl.state is ControllerState.IDLE
        assert ctl.pending is None
        assert load(store) == {"2024-06-05": True}
        assert ctl.last_save_ok

    def test_confirm_false_is_stored_as_miss(self, store):
        ctl = UpdateController(store, {"2024-06-05": True})
        ctl.select(DAY, TODAY)
        ctl.confirm(False)
        assert load(store) == {"2024-06-05": False}

    def test_cancel_leaves_log_untouched(self, store):
        ctl = UpdateController(store, {"2024-06-01": True})
        ctl.select(DAY, TODAY)
        assert ctl.cancel()
        assert ctl.state is ControllerState.IDLE
        assert ctl.log == {"2024-06-01": True}
        assert store.read_raw(STORAGE_KEY) is None

    def test_future_selection_is_ignored(self, store):
        ctl = UpdateController(store)
        assert not ctl.select(TODAY + dt.timedelta(days=1), TODAY)
        assert ctl.state is ControllerState.IDLE

    def test_today_is_selectable(self, store):
        ctl = UpdateController(store)
        assert ctl.select(TODAY, TODAY)

    def test_second_selection_while_awaiting_is_ignored(self, store):
        ctl = UpdateController(store)
        ctl.select(DAY, TODAY)
        assert not ctl.select(dt.date(2024, 6, 6), TODAY)
        assert ctl.pending == DAY

    def test_confirm_and_cancel_when_idle_are_no_ops(self, store):
        ctl = UpdateController(store)
        assert not ctl.confirm(True)
        assert not ctl.cancel()
        assert ctl.log == {}
        assert store.data == {}

    def test_cycles_for_the_whole_session(self, store):
        ctl = UpdateController(store)
        for offset, outcome in [(1, True), (2, True), (3, False)]:
            ctl.select(TODAY - dt.timedelta(days=offset), TODAY)
            ctl.confirm(outcome)
        assert ctl.log == {"2024-06-09": True, "2024-06-08": True, "2024-06-07": False}
        assert ctl.stats(TODAY) == (2, 2)


class TestPersistence:
    def test_write_failure_keeps_in_memory_log(self):
        store = MemoryStore(max_chars=5)
        ctl = UpdateController(store)
        ctl.select(DAY, TODAY)
        assert ctl.confirm(True)
        assert ctl.log == {"2024-06-05": True}
        assert not ctl.last_save_ok
        assert ctl.state is ControllerState.IDLE

    def test_next_successful_write_clears_failure(self, store, broken_store):
        ctl = UpdateController(broken_store)
        ctl.select(DAY, TODAY)
        ctl.confirm(True)
        assert not ctl.last_save_ok
        ctl.store = store
        ctl.select(TODAY, TODAY)
        ctl.confirm(True)
        assert ctl.last_save_ok
        assert load(store) == {"2024-06-05": True, "2024-06-10": True}

    def test_hydrate_reads_stored_log(self):
        store = MemoryStore({"climbs": '{"2024-06-01": true}'})
        ctl = UpdateController.hydrate(store, "climbs")
        assert ctl.log == {"2024-06-01": True}
        ctl.select(DAY, TODAY)
        ctl.confirm(True)
        assert load(store, "climbs") == {"2024-06-01": True, "2024-06-05": True}

    def test_hydrate_from_corrupt_store_starts_empty(self):
        ctl = UpdateController.hydrate(MemoryStore({STORAGE_KEY: "[]"}))
        assert ctl.log == {}

    def test_initial_log_is_copied(self, store):
        seed = {"2024-06-01": True}
        ctl = UpdateController(store, seed)
        ctl.select(DAY, TODAY)
        ctl.confirm(True)
        assert seed == {"2024-06-01": True}
