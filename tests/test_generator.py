"""Tests for the synthetic XAUUSD series generator and session helpers."""

from datetime import datetime, timezone

import pytest

from goldlab.market.generator import BASE_PRICE, START_EPOCH, generate_series
from goldlab.market.models import TIMEFRAME_SECONDS, timeframe_seconds
from goldlab.market.sessions import (
    is_weekend_close,
    session_name,
    session_volatility,
    weekend_gap_seconds,
)


def _utc(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


# ── Series shape ─────────────────────────────────────────────────────────


class TestGenerateSeries:

    @pytest.mark.parametrize("timeframe", list(TIMEFRAME_SECONDS))
    def test_length_time_and_envelope(self, timeframe):
        candles = generate_series(600, timeframe, seed=11)
        assert len(candles) == 600
        for prev, cur in zip(candles, candles[1:]):
            assert cur.time > prev.time
        for c in candles:
            assert c.low <= min(c.open, c.close)
            assert c.high >= max(c.open, c.close)
            assert c.volume >= 0

    def test_zero_count_is_empty(self):
        assert generate_series(0, seed=1) == []

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError, match="count"):
            generate_series(-1, seed=1)

    def test_unknown_timeframe_rejected(self):
        with pytest.raises(ValueError, match="timeframe"):
            generate_series(10, "2h", seed=1)

    def test_same_seed_same_series(self):
        assert generate_series(300, "15m", seed=42) == generate_series(300, "15m", seed=42)

    def test_different_seed_different_series(self):
        assert generate_series(50, seed=1) != generate_series(50, seed=2)

    def test_starts_at_base_price_and_epoch(self):
        first = generate_series(1, seed=5)[0]
        assert first.open == BASE_PRICE
        assert first.time == START_EPOCH
        assert _utc(first.time) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_opens_chain_to_previous_close(self):
        candles = generate_series(200, seed=8)
        for prev, cur in zip(candles, candles[1:]):
            if cur.time - prev.time == 900:
                assert cur.open == pytest.approx(prev.close)

    def test_fixed_step_on_weekdays(self):
        candles = generate_series(100, "15m", seed=3)
        # 2024-01-01 is a Monday; 100 bars end long before Friday night
        steps = {b.time - a.time for a, b in zip(candles, candles[1:])}
        assert steps == {900}

    @pytest.mark.parametrize("timeframe", ["15m", "1h", "4h", "1d"])
    def test_no_bars_during_weekend(self, timeframe):
        candles = generate_series(1500, timeframe, seed=9)
        for c in candles:
            moment = _utc(c.time)
            assert not is_weekend_close(moment.weekday(), moment.hour)

    def test_weekend_gap_jumps_to_monday(self):
        # Friday 22:00 of the first week is 15m bar 4 * 96 + 88 = 472
        candles = generate_series(500, "15m", seed=4)
        times = [_utc(c.time) for c in candles]
        mondays = [t for t in times if t.weekday() == 0 and t.day == 8]
        assert mondays[0] == datetime(2024, 1, 8, tzinfo=timezone.utc)

    def test_higher_timeframe_moves_more(self):
        small = generate_series(400, "1m", seed=21)
        large = generate_series(400, "1d", seed=21)
        small_range = sum(c.high - c.low for c in small) / len(small)
        large_range = sum(c.high - c.low for c in large) / len(large)
        assert large_range > small_range * 5


# ── Timeframes ───────────────────────────────────────────────────────────


class TestTimeframes:

    def test_known_timeframes(self):
        assert timeframe_seconds("1m") == 60
        assert timeframe_seconds("15m") == 900
        assert timeframe_seconds("4h") == 14_400
        assert timeframe_seconds("1d") == 86_400

    def test_unknown_timeframe(self):
        with pytest.raises(ValueError, match="Unknown timeframe"):
            timeframe_seconds("3w")


# ── Sessions ─────────────────────────────────────────────────────────────


class TestSessions:

    @pytest.mark.parametrize(
        "hour,expected",
        [
            (0, 0.7), (6, 0.7), (7, 0.5), (8, 1.6), (12, 1.6),
            (13, 2.4), (17, 2.4), (18, 1.4), (20, 1.4), (21, 0.5), (23, 0.5),
        ],
    )
    def test_session_volatility(self, hour, expected):
        assert session_volatility(hour) == expected

    @pytest.mark.parametrize(
        "hour,expected",
        [(3, "Tokyo"), (8, "Tokyo"), (9, "London"), (16, "London"),
         (17, "New York"), (21, "New York"), (22, ""), (23, "")],
    )
    def test_session_name(self, hour, expected):
        assert session_name(hour) == expected

    def test_weekend_window(self):
        assert not is_weekend_close(4, 21)  # Friday 21:00
        assert is_weekend_close(4, 22)      # Friday 22:00
        assert is_weekend_close(5, 10)      # Saturday
        assert is_weekend_close(6, 23)      # Sunday
        assert not is_weekend_close(0, 0)   # Monday

    def test_weekend_gap_from_friday_night(self):
        friday = datetime(2024, 1, 5, 22, tzinfo=timezone.utc)
        # Matches the 48 + (24 - hour) hour rule
        assert weekend_gap_seconds(friday) == (48 + 2) * 3600

    def test_weekend_gap_from_saturday(self):
        saturday = datetime(2024, 1, 6, 0, tzinfo=timezone.utc)
        assert weekend_gap_seconds(saturday) == 48 * 3600
