"""Backtest statistics — pure functions for trade-series analysis."""

from typing import Optional, Sequence

from goldlab.backtest.models import EquityPoint
from goldlab.risk.drawdown import DrawdownTracker
from goldlab.strategy.models import CLOSED, Trade


def win_rate(trades: Sequence[Trade]) -> float:
    """Percentage (0–100) of closed trades with a positive profit.

    Returns 0.0 when there are no closed trades.
    """
    closed = [t for t in trades if t.status == CLOSED]
    if not closed:
        return 0.0
    winners = sum(1 for t in closed if t.profit > 0)
    return winners / len(closed) * 100.0


def profit_factor(trades: Sequence[Trade]) -> Optional[float]:
    """Gross profit divided by gross loss; ``None`` without losing trades."""
    closed = [t for t in trades if t.status == CLOSED]
    gross_profit = sum(t.profit for t in closed if t.profit > 0)
    gross_loss = abs(sum(t.profit for t in closed if t.profit <= 0))
    if gross_loss == 0:
        return None
    return gross_profit / gross_loss


def max_drawdown(equity_curve: Sequence[EquityPoint]) -> float:
    """Maximum drawdown, in percent, over the equity curve.

    Single forward pass with a running peak seeded from the first point.
    Returns 0.0 for an empty curve.
    """
    if not equity_curve:
        return 0.0
    tracker = DrawdownTracker(equity_curve[0].value)
    for point in equity_curve[1:]:
        tracker.update(point.value)
    return tracker.max_drawdown_pct


def calculate_stats(
    trades: Sequence[Trade],
    equity_curve: Sequence[EquityPoint],
) -> dict:
    """Compute a summary of a backtest run.

    Returns:
        Dict with ``total_trades``, ``winning_trades``, ``losing_trades``,
        ``win_rate`` (percent), ``profit_factor``, ``max_drawdown``
        (percent) and ``net_pnl``.
    """
    closed = [t for t in trades if t.status == CLOSED]
    winning = sum(1 for t in closed if t.profit > 0)
    pf = profit_factor(closed)

    return {
        "total_trades": len(closed),
        "winning_trades": winning,
        "losing_trades": len(closed) - winning,
        "win_rate": round(win_rate(closed), 4),
        "profit_factor": round(pf, 4) if pf is not None else None,
        "max_drawdown": round(max_drawdown(equity_curve), 4),
        "net_pnl": round(sum(t.profit for t in closed), 2),
    }
