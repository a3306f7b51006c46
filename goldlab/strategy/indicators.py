"""Technical indicators — SMA, EMA, RSI. Pure functions, no I/O.

Each indicator returns only the values it can compute, so its output is
shorter than the input by the warm-up length:

    SMA / EMA   period - 1
    RSI         period

Use :func:`pad` (or :func:`aligned`) to line a series up index-for-index
with the candles it was computed from.
"""

from typing import Callable, Optional, Sequence


def _check_period(period: int) -> None:
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise ValueError(f"period must be a positive integer, got {period!r}")


def sma(values: Sequence[float], period: int) -> list[float]:
    """Simple moving average of the trailing *period* values.

    Returns ``len(values) - period + 1`` values, or ``[]`` when there is not
    enough data.
    """
    _check_period(period)
    if len(values) < period:
        return []

    window_sum = sum(values[:period])
    result = [window_sum / period]
    for i in range(period, len(values)):
        window_sum += values[i] - values[i - period]
        result.append(window_sum / period)
    return result


def ema(values: Sequence[float], period: int) -> list[float]:
    """Exponential moving average.

    Uses ``EMA_today = value × k + EMA_yesterday × (1 - k)`` with
    ``k = 2 / (period + 1)``, seeded with the SMA of the first *period*
    values.  Returns ``len(values) - period + 1`` values.
    """
    _check_period(period)
    if len(values) < period:
        return []

    k = 2.0 / (period + 1)
    current = sum(values[:period]) / period
    result = [current]
    for value in values[period:]:
        current = value * k + current * (1 - k)
        result.append(current)
    return result


# ── RSI ──────────────────────────────────────────────────────────────────


def _rsi_from_avgs(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        # No movement at all reads as neutral rather than overbought
        return 50.0 if avg_gain == 0 else 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def rsi(values: Sequence[float], period: int = 14) -> list[float]:
    """Wilder's Relative Strength Index.

    Algorithm (Wilder-smoothed):
        1. delta = value[i] - value[i-1]
        2. Separate gains (positive) and losses (|negative|).
        3. Seed average gain/loss = mean of first *period* deltas.
        4. Subsequent: avg = (prev_avg × (period-1) + current) / period
        5. RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    The first value belongs to input index *period*; returns
    ``len(values) - period`` values, or ``[]`` for short input.
    """
    _check_period(period)
    if len(values) < period + 1:
        return []

    deltas = [values[i] - values[i - 1] for i in range(1, len(values))]
    gains = [max(d, 0.0) for d in deltas]
    losses = [abs(min(d, 0.0)) for d in deltas]

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    result = [_rsi_from_avgs(avg_gain, avg_loss)]

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result.append(_rsi_from_avgs(avg_gain, avg_loss))

    return result


# ── Alignment ────────────────────────────────────────────────────────────


def pad(series: Sequence[float], length: int) -> list[Optional[float]]:
    """Left-pad *series* with ``None`` so it spans *length* positions."""
    missing = length - len(series)
    if missing < 0:
        raise ValueError(
            f"series of length {len(series)} does not fit in {length} slots"
        )
    return [None] * missing + list(series)


def aligned(
    values: Sequence[float],
    period: int,
    indicator: Callable[[Sequence[float], int], list[float]],
) -> list[Optional[float]]:
    """Compute *indicator* over *values* and align it with the input."""
    return pad(indicator(values, period), len(values))
