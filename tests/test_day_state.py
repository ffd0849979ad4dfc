import datetime as dt

import pytest

from peak_progress.day_state import DayState, classify, is_selectable

TODAY = dt.date(2024, 6, 15)
JUNE = dt.date(2024, 6, 1)
LOG = {"2024-06-10": True, "2024-06-11": False, "2024-06-20": True, "2024-05-31": True}


class TestClassify:
    @pytest.mark.parametrize(
        "d, expected",
        [
            (dt.date(2024, 6, 10), DayState.COMPLETED),
            (dt.date(2024, 6, 11), DayState.MISSED),
            (dt.date(2024, 6, 12), DayState.UNRECORDED_PAST),
            (TODAY, DayState.UNRECORDED_PAST),
            (dt.date(2024, 6, 16), DayState.UNRECORDED_FUTURE),
        ],
    )
    def test_days_in_displayed_month(self, d, expected):
        assert classify(d, LOG, TODAY, JUNE) is expected

    def test_outside_month_overrides_stored_outcome(self):
        assert classify(dt.date(2024, 5, 31), LOG, TODAY, JUNE) is DayState.OUTSIDE_VISIBLE_MONTH
        assert classify(dt.date(2024, 7, 1), LOG, TODAY, JUNE) is DayState.OUTSIDE_VISIBLE_MONTH

    def test_same_month_of_another_year_is_outside(self):
        assert classify(dt.date(2023, 6, 10), LOG, TODAY, JUNE) is DayState.OUTSIDE_VISIBLE_MONTH

    def test_view_month_can_be_any_day_of_the_month(self):
        assert classify(dt.date(2024, 6, 10), LOG, TODAY, dt.date(2024, 6, 28)) is DayState.COMPLETED

    def test_future_outcome_still_shows_as_stored(self):
        # Only unlogged future days are UNRECORDED_FUTURE.
        assert classify(dt.date(2024, 6, 20), LOG, TODAY, JUNE) is DayState.COMPLETED

    def test_unlogged_past_is_not_stored_as_missed(self):
        log = dict(LOG)
        classify(dt.date(2024, 6, 12), log, TODAY, JUNE)
        assert log == LOG


class TestSelectable:
    def test_today_and_past_are_selectable(self):
        assert is_selectable(TODAY, TODAY)
        assert is_selectable(dt.date(2020, 1, 1), TODAY)

    def test_future_is_never_selectable(self):
        tomorrow = TODAY + dt.timedelta(days=1)
        assert not is_selectable(tomorrow, TODAY)
        assert classify(tomorrow, {}, TODAY, JUNE) is DayState.UNRECORDED_FUTURE
