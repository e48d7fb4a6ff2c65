"""Tests for engine.community.recommend — member recommendations."""

from __future__ import annotations

import pytest

from engine.community.errors import CommunityEngineError, MalformedForecast
from engine.community.recommend import generate, next_best_window, summarize
from engine.community.windows import find_optimal_windows

HOURS_PER_DAY = 24


class TestRunNow:
    def test_surplus_now_is_primary_item(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", 5.0, two_run_forecast, windows, current_hour=11)

        first = rec.items[0]
        assert first.action == "start_now"
        assert first.urgency == "now"
        assert first.window is None
        assert first.confidence_kwh == pytest.approx(5.0)
        assert rec.member_id == "m-1"

    def test_upcoming_window_follows_run_now(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", 2.0, two_run_forecast, windows, current_hour=3)

        assert [i.urgency for i in rec.items] == ["now", "later"]
        assert rec.items[1].window == windows[0]

    def test_only_run_now_when_nothing_upcoming(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", 5.0, two_run_forecast, windows, current_hour=11)
        assert len(rec.items) == 1


class TestWaitForWindow:
    def test_soon_within_three_hours(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", -1.0, two_run_forecast, windows, current_hour=7)

        assert len(rec.items) == 1
        item = rec.items[0]
        assert item.action == "delay"
        assert item.urgency == "soon"
        assert (item.window.start_hour, item.window.end_hour) == (10, 11)
        assert item.confidence_kwh == pytest.approx(10.0)

    def test_later_beyond_three_hours(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", -1.0, two_run_forecast, windows, current_hour=6)
        assert rec.items[0].urgency == "later"

    def test_best_ranked_window_wins_over_earliest(self, two_run_forecast):
        """At 01:00 both windows are ahead; the 10 kWh one is recommended."""
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", -1.0, two_run_forecast, windows, current_hour=1)
        assert rec.items[0].window.start_hour == 10

    def test_window_in_progress_is_not_future(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        assert next_best_window(windows, 10) is None
        assert next_best_window(windows, 9).start_hour == 10


class TestFallback:
    def test_all_zero_forecast(self, zero_forecast):
        windows = find_optimal_windows(zero_forecast)
        assert windows == []

        rec = generate("m-1", 0.0, zero_forecast, windows, current_hour=12)
        assert len(rec.items) == 1
        item = rec.items[0]
        assert item.urgency == "later"
        assert item.window is None
        assert item.confidence_kwh == 0.0
        assert item.action == "no_action"

    def test_all_windows_in_the_past(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", -1.0, two_run_forecast, windows, current_hour=20)
        assert len(rec.items) == 1
        assert rec.items[0].urgency == "later"
        assert rec.items[0].confidence_kwh == 0.0

    @pytest.mark.parametrize("hour", range(HOURS_PER_DAY))
    @pytest.mark.parametrize("surplus", [-3.0, 0.0, 0.5, 6.0])
    def test_never_empty(self, all_deficit_forecast, two_run_forecast, hour, surplus):
        for forecast in (all_deficit_forecast, two_run_forecast):
            windows = find_optimal_windows(forecast)
            rec = generate("m-1", surplus, forecast, windows, current_hour=hour)
            assert len(rec.items) >= 1


class TestValidation:
    def test_bad_hour(self, two_run_forecast):
        with pytest.raises(CommunityEngineError, match="current_hour"):
            generate("m-1", 0.0, two_run_forecast, [], current_hour=24)

    def test_malformed_forecast(self, two_run_forecast):
        with pytest.raises(MalformedForecast):
            generate("m-1", 0.0, two_run_forecast[1:], [], current_hour=3)

    def test_nan_surplus(self, two_run_forecast):
        with pytest.raises(CommunityEngineError, match="finite"):
            generate("m-1", float("nan"), two_run_forecast, [], current_hour=3)


class TestSummaryAndDevices:
    @pytest.mark.parametrize(
        "surplus, fragment",
        [
            (6.0, "Excellent conditions"),
            (2.5, "Good conditions"),
            (1.2, "Moderate surplus"),
            (0.0, "Balanced production and consumption."),
            (-4.0, "4.0 kW deficit"),
        ],
    )
    def test_summary_tiers(self, surplus, fragment):
        assert fragment in summarize(surplus, None)

    def test_balanced_summary_mentions_next_window(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", 0.0, two_run_forecast, windows, current_hour=7)
        assert rec.summary == "Balanced. Better conditions expected at 10:00."

    def test_advice_for_every_device(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        rec = generate("m-1", 0.0, two_run_forecast, windows, current_hour=7)
        assert set(rec.devices) == {
            "ev_charger",
            "battery",
            "washing_machine",
            "dishwasher",
            "heat_pump",
            "generic",
        }

    def test_to_dict_shape(self, two_run_forecast):
        windows = find_optimal_windows(two_run_forecast)
        payload = generate("m-1", -1.0, two_run_forecast, windows, current_hour=7).to_dict()
        assert payload["items"][0]["window"]["start"] == "10:00"
        assert payload["items"][0]["window"]["end"] == "12:00"
        assert payload["devices"]["ev_charger"]["action"] == "delay"
