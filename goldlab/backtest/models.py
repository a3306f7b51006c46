"""Backtest result models."""

from dataclasses import dataclass
from typing import Optional

from goldlab.strategy.models import Trade


@dataclass(frozen=True)
class EquityPoint:
    """Account balance sampled at run start or at a trade close."""

    time: int
    value: float

    def to_dict(self) -> dict:
        return {"time": self.time, "value": self.value}


@dataclass(frozen=True)
class BacktestResults:
    """Outcome of a single backtest run.

    ``trades`` holds closed trades only; a position still open when the
    candles run out is reported separately as ``open_trade`` and does not
    count towards profit or balance.  Every trade in ``trades`` is
    closed and rejects field assignment.
    """

    total_trades: int
    win_rate: float
    total_profit: float
    trades: tuple[Trade, ...]
    final_balance: float
    max_drawdown: float
    equity_curve: tuple[EquityPoint, ...]
    open_trade: Optional[Trade] = None
    profit_factor: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "totalTrades": self.total_trades,
            "winRate": self.win_rate,
            "totalProfit": self.total_profit,
            "trades": [t.to_dict() for t in self.trades],
            "finalBalance": self.final_balance,
            "maxDrawdown": self.max_drawdown,
            "equityCurve": [p.to_dict() for p in self.equity_curve],
            "openTrade": self.open_trade.to_dict() if self.open_trade else None,
            "profitFactor": self.profit_factor,
        }
