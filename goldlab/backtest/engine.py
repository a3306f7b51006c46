"""Backtest engine — replays candles through the RSI / SMA / EMA strategy.

Iterates candle data chronologically, holding at most one simulated
position and closing it on stop-loss, take-profit or an EMA trend break.
No state survives between runs: identical inputs give identical results.
"""

import logging
from typing import Optional

from goldlab.backtest.models import BacktestResults, EquityPoint
from goldlab.backtest.stats import max_drawdown, profit_factor, win_rate
from goldlab.market.models import Candle
from goldlab.strategy.indicators import aligned, ema, rsi, sma
from goldlab.strategy.models import LONG, SHORT, StrategyParams, Trade

logger = logging.getLogger("goldlab.backtest")

# Fixed contract size: profit = price delta × POSITION_SIZE
POSITION_SIZE = 50.0
PIP_MULTIPLIER = 100.0

STOP_LOSS = "Stop Loss"
TAKE_PROFIT = "Take Profit"
TREND_EXIT = "Trend Exit"


class BacktestEngine:
    """Simulates the strategy on a candle sequence.

    Args:
        params: Strategy parameters; validated on construction.
    """

    def __init__(self, params: StrategyParams) -> None:
        self._params = params.validate()

    # ── Public API ───────────────────────────────────────────────────────

    def run(self, candles: list[Candle]) -> BacktestResults:
        """Execute a full backtest over *candles* (oldest-first).

        Returns:
            ``BacktestResults`` with closed trades, the equity curve and
            summary metrics.  A position still open at the last candle is
            left unrealised and returned as ``open_trade``.
        """
        params = self._params
        if len(candles) < params.sma_period:
            return self._empty_results()

        closes = [c.close for c in candles]
        rsi_values = aligned(closes, params.rsi_period, rsi)
        sma_values = aligned(closes, params.sma_period, sma)
        ema_values = aligned(closes, params.ema_period, ema)

        balance = params.initial_balance
        open_trade: Optional[Trade] = None
        closed_trades: list[Trade] = []
        equity_curve = [EquityPoint(time=candles[0].time, value=balance)]

        for i in range(1, len(candles)):
            candle = candles[i]
            rsi_now = rsi_values[i]
            sma_now = sma_values[i]
            ema_now = ema_values[i]

            # 1 — Manage the open position; an exit ends this step
            if open_trade is not None:
                reason = self._exit_reason(open_trade, candle, ema_now)
                if reason is None:
                    continue
                profit = self._calc_pnl(open_trade, candle.close)
                open_trade.close(candle.close, candle.time, profit, reason)
                balance += profit
                closed_trades.append(open_trade)
                equity_curve.append(EquityPoint(time=candle.time, value=balance))
                logger.debug(
                    "%s %s closed at %.2f (%s), P&L %.2f",
                    open_trade.id, open_trade.type, candle.close, reason, profit,
                )
                open_trade = None
                continue

            # 2 — Entries need every indicator warmed up
            if rsi_now is None or sma_now is None or ema_now is None:
                continue

            direction = self._entry_direction(candle.close, rsi_now, sma_now)
            if direction is None:
                continue

            open_trade = Trade(
                id=f"T-{i}",
                type=direction,
                entry_price=candle.close,
                entry_time=candle.time,
            )
            logger.debug(
                "%s %s opened at %.2f (RSI %.1f, SMA %.2f)",
                open_trade.id, direction, candle.close, rsi_now, sma_now,
            )

        pf = profit_factor(closed_trades)
        return BacktestResults(
            total_trades=len(closed_trades),
            win_rate=win_rate(closed_trades),
            total_profit=balance - params.initial_balance,
            trades=tuple(closed_trades),
            final_balance=balance,
            max_drawdown=max_drawdown(equity_curve),
            equity_curve=tuple(equity_curve),
            open_trade=open_trade,
            profit_factor=pf,
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    def _empty_results(self) -> BacktestResults:
        return BacktestResults(
            total_trades=0,
            win_rate=0.0,
            total_profit=0.0,
            trades=(),
            final_balance=self._params.initial_balance,
            max_drawdown=0.0,
            equity_curve=(),
        )

    def _entry_direction(
        self, close: float, rsi_now: float, sma_now: float,
    ) -> Optional[str]:
        """LONG on an oversold dip above the SMA, SHORT on the mirror case."""
        if close > sma_now and rsi_now < self._params.rsi_oversold:
            return LONG
        if close < sma_now and rsi_now > self._params.rsi_overbought:
            return SHORT
        return None

    def _exit_reason(
        self, trade: Trade, candle: Candle, ema_now: Optional[float],
    ) -> Optional[str]:
        """Return the exit reason for *trade* at *candle*, or ``None``.

        Precedence: stop-loss, then take-profit, then trend exit.
        """
        pips = self._price_delta(trade, candle.close) * PIP_MULTIPLIER

        if pips <= -self._params.stop_loss_pips:
            return STOP_LOSS
        if pips >= self._params.take_profit_pips:
            return TAKE_PROFIT
        if ema_now is None:
            return None
        if trade.type == LONG and candle.close < ema_now:
            return TREND_EXIT
        if trade.type == SHORT and candle.close > ema_now:
            return TREND_EXIT
        return None

    @staticmethod
    def _price_delta(trade: Trade, price: float) -> float:
        """Favourable price movement of *trade* at *price*."""
        if trade.type == LONG:
            return price - trade.entry_price
        return trade.entry_price - price

    @staticmethod
    def _calc_pnl(trade: Trade, exit_price: float) -> float:
        """Compute P&L for *trade* exiting at *exit_price*."""
        return BacktestEngine._price_delta(trade, exit_price) * POSITION_SIZE


def run_backtest(candles: list[Candle], params: StrategyParams) -> BacktestResults:
    """Run a backtest of *params* over *candles*."""
    return BacktestEngine(params).run(candles)
