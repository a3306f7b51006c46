"""Market data models — typed representations of generated price bars."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Candle:
    """A single candlestick bar. ``time`` is Unix seconds (UTC)."""

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


# ── Timeframes ───────────────────────────────────────────────────────────

TIMEFRAME_SECONDS: dict[str, int] = {
    "1m": 60,
    "5m": 300,
    "15m": 900,
    "1h": 3_600,
    "4h": 14_400,
    "1d": 86_400,
}

# Volatility constants of the generator are calibrated for 15m bars.
REFERENCE_TIMEFRAME_SECONDS = 900


def timeframe_seconds(timeframe: str) -> int:
    """Return the bar duration for *timeframe*.

    Raises ``ValueError`` for an unknown timeframe.
    """
    try:
        return TIMEFRAME_SECONDS[timeframe]
    except KeyError:
        raise ValueError(
            f"Unknown timeframe {timeframe!r}; expected one of "
            f"{', '.join(TIMEFRAME_SECONDS)}"
        ) from None
