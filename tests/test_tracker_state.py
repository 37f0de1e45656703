"""Tests for per-symbol running aggregates."""
import pytest

from stockwatch.services.tracker_state import TrackerState


def test_baseline_is_first_price(tracker_state):
    for i, price in enumerate([50.0, 75.0, 25.0, 60.0]):
        tracker_state.record_fetch("X", price, f"t{i}")
        assert tracker_state.baseline("X") == 50.0


def test_previous_price_tracks_latest(tracker_state):
    tracker_state.record_fetch("X", 10.0, "t0")
    tracker_state.record_fetch("X", 12.0, "t1")
    assert tracker_state.get("X").previous_price == 12.0
    assert tracker_state.get("X").baseline_price == 10.0


def test_percent_change_absent_without_baseline(tracker_state):
    assert tracker_state.percent_change_from_baseline("X", 10.0) is None


def test_percent_change_absent_for_zero_baseline(tracker_state):
    tracker_state.record_fetch("X", 0.0, "t0")
    assert tracker_state.percent_change_from_baseline("X", 5.0) is None


@pytest.mark.parametrize("baseline,price", [(100.0, 110.0), (40.0, 30.0), (3.0, 3.0)])
def test_percent_change_formula(tracker_state, baseline, price):
    tracker_state.record_fetch("X", baseline, "t0")
    expected = (price - baseline) / baseline * 100
    assert tracker_state.percent_change_from_baseline("X", price) == expected


def test_average_zero_when_never_fetched(tracker_state):
    assert tracker_state.average("NEVER") == 0.0
    assert tracker_state.get("NEVER") is None
    assert tracker_state.symbols() == []


def test_extremes_and_average():
    state = TrackerState()
    state.record_fetch("X", 100.0, "tick1")
    state.record_fetch("X", 110.0, "tick2")
    state.record_fetch("X", 90.0, "tick4")

    symbol_state = state.get("X")
    assert symbol_state.min_price == 90.0
    assert symbol_state.min_at == "tick4"
    assert symbol_state.max_price == 110.0
    assert symbol_state.max_at == "tick2"
    assert symbol_state.count == 3
    assert state.average("X") == pytest.approx(100.0)


def test_ties_keep_first_timestamp(tracker_state):
    tracker_state.record_fetch("X", 5.0, "first")
    tracker_state.record_fetch("X", 5.0, "second")
    assert tracker_state.get("X").min_at == "first"
    assert tracker_state.get("X").max_at == "first"


def test_symbols_in_first_seen_order(tracker_state):
    tracker_state.record_fetch("B", 1.0, "t0")
    tracker_state.record_fetch("A", 1.0, "t0")
    tracker_state.record_fetch("B", 2.0, "t1")
    assert tracker_state.symbols() == ["B", "A"]
