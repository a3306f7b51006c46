"""Chart-structure detection — pivot levels and supply/demand zones.

Pure functions of the candle sequence, recomputed wholesale on every call.
Zone detection looks *ahead* of each candidate bar, so its output is for
display only and must never feed entry or exit decisions.
"""

from typing import Optional

from goldlab.market.models import Candle
from goldlab.strategy.models import DEMAND, SUPPLY, PivotPoints, SDZone

# Bars inspected after a zone candidate; the last of them must exist.
_FORWARD_BARS = 3
_TAIL_EXCLUSION = 5
_DISPLACEMENT_MULTIPLE = 8.0


def pivot_points(
    candles: list[Candle],
    min_history: int = 50,
    window: int = 100,
) -> Optional[PivotPoints]:
    """Calculate classic pivot points over the trailing *window* candles.

    The range of the window stands in for the prior session's range:

        P  = (H + L + C) / 3
        R1 = 2P - L        S1 = 2P - H
        R2 = P + (H - L)   S2 = P - (H - L)

    Returns ``None`` with fewer than *min_history* candles.
    """
    if min_history <= 0 or window <= 0:
        raise ValueError(
            f"min_history and window must be positive, got {min_history}, {window}"
        )
    if len(candles) < min_history:
        return None

    recent = candles[-window:]
    high = max(c.high for c in recent)
    low = min(c.low for c in recent)
    close = recent[-1].close

    p = (high + low + close) / 3
    return PivotPoints(
        p=p,
        r1=2 * p - low,
        r2=p + (high - low),
        s1=2 * p - high,
        s2=p - (high - low),
    )


def detect_zones(
    candles: list[Candle],
    lookback: int = 5,
    keep: int = 3,
) -> list[SDZone]:
    """Detect rally-base-drop / drop-base-rally zones.

    For each candidate bar *i* the local volatility is the range of the
    preceding *lookback* bars divided by *lookback*.  When the close three
    bars later has moved more than eight times that volatility, the two-bar
    base ``[i-1, i]`` becomes a DEMAND (up move) or SUPPLY (down move) zone.

    Args:
        candles: Candles ordered oldest-first.
        lookback: Bars used for the volatility estimate.
        keep: Number of most recent zones returned; older ones are dropped.

    Returns:
        At most *keep* zones, oldest-first.
    """
    if lookback <= 0:
        raise ValueError(f"lookback must be positive, got {lookback}")
    if keep <= 0:
        raise ValueError(f"keep must be positive, got {keep}")

    zones: list[SDZone] = []
    for i in range(lookback, len(candles) - _TAIL_EXCLUSION):
        base = candles[i - lookback : i]
        volatility = (max(c.high for c in base) - min(c.low for c in base)) / lookback
        move = candles[i + _FORWARD_BARS].close - candles[i].close
        threshold = volatility * _DISPLACEMENT_MULTIPLE

        if move > threshold:
            zone_type = DEMAND
        elif move < -threshold:
            zone_type = SUPPLY
        else:
            continue

        zones.append(
            SDZone(
                type=zone_type,
                price_start=min(candles[i].low, candles[i - 1].low),
                price_end=max(candles[i].high, candles[i - 1].high),
                time_start=candles[i].time,
            )
        )

    return zones[-keep:]
