"""Synthetic XAUUSD price series — a session-aware random walk.

Produces OHLC bars with London / New York volatility bursts, weekend gaps
and two slow periodic trend components.  Pass *seed* for a reproducible
series; without it every call differs.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Optional

import numpy as np

from goldlab.market.models import (
    REFERENCE_TIMEFRAME_SECONDS,
    Candle,
    timeframe_seconds,
)
from goldlab.market.sessions import (
    is_weekend_close,
    session_volatility,
    weekend_gap_seconds,
)

logger = logging.getLogger("goldlab.market")

BASE_PRICE = 2100.0
START_EPOCH = int(datetime(2024, 1, 1, tzinfo=timezone.utc).timestamp())

_WEEKEND_GAP_RANGE = 12.0
_BASE_VOL_FLOOR = 0.8
_BASE_VOL_SPAN = 1.5
_WICK_FACTOR = 0.6
_VOLUME_SCALE = 8000.0


def generate_series(
    count: int,
    timeframe: str = "15m",
    seed: Optional[int] = None,
) -> list[Candle]:
    """Generate *count* synthetic gold candles.

    Args:
        count: Number of bars to produce (``0`` yields an empty list).
        timeframe: Bar duration key, e.g. ``"15m"`` or ``"4h"``.
        seed: Optional seed for ``numpy.random.default_rng``.

    Returns:
        Candles ordered oldest-first with strictly increasing ``time``.

    Raises:
        ValueError: If *count* is negative or *timeframe* is unknown.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    step = timeframe_seconds(timeframe)

    rng = np.random.default_rng(seed)
    # Random-walk volatility grows with the square root of elapsed time
    scale = math.sqrt(step / REFERENCE_TIMEFRAME_SECONDS)

    price = BASE_PRICE
    time = START_EPOCH
    candles: list[Candle] = []

    for i in range(count):
        moment = datetime.fromtimestamp(time, tz=timezone.utc)
        hour = moment.hour

        if is_weekend_close(moment.weekday(), hour):
            time += weekend_gap_seconds(moment)
            price += (rng.random() - 0.5) * _WEEKEND_GAP_RANGE

        vol_mult = session_volatility(hour)
        base_vol = _BASE_VOL_FLOOR + rng.random() * _BASE_VOL_SPAN
        session_vol = base_vol * vol_mult * scale

        cycle_trend = math.sin(i / 150) * 0.4
        small_trend = math.cos(i / 20) * 0.2

        open_ = price
        change = (rng.random() - 0.5 + cycle_trend + small_trend) * session_vol
        close = price + change
        high = max(open_, close) + rng.random() * (session_vol * _WICK_FACTOR)
        low = min(open_, close) - rng.random() * (session_vol * _WICK_FACTOR)
        volume = rng.random() * _VOLUME_SCALE * vol_mult

        candles.append(
            Candle(
                time=time,
                open=float(open_),
                high=float(high),
                low=float(low),
                close=float(close),
                volume=float(volume),
            )
        )
        price = close
        time += step

    logger.debug(
        "Generated %d %s candles (seed=%s)", len(candles), timeframe, seed,
    )
    return candles
