"""CLI report — prints a backtest summary to the console."""

from goldlab.backtest.models import BacktestResults
from goldlab.backtest.stats import calculate_stats
from goldlab.strategy.models import StrategyParams


def print_results(results: BacktestResults, params: StrategyParams) -> str:
    """Format and print a backtest summary.

    Args:
        results: Output of ``run_backtest``.
        params: Parameters the run used.

    Returns:
        The formatted string (also printed to stdout).
    """
    stats = calculate_stats(results.trades, results.equity_curve)
    pf = stats["profit_factor"]
    pf_str = f"{pf:.2f}" if pf is not None else "N/A"
    open_trade = results.open_trade
    open_str = (
        f"{open_trade.type} @ {open_trade.entry_price:,.2f}"
        if open_trade is not None else "none"
    )

    lines = [
        "──────────────── GoldLab Backtest ────────────────",
        f"  RSI/SMA/EMA:     {params.rsi_period}/{params.sma_period}/{params.ema_period}",
        f"  SL / TP (pips):  {params.stop_loss_pips:g} / {params.take_profit_pips:g}",
        f"  Trades:          {results.total_trades} "
        f"({stats['winning_trades']} won, {stats['losing_trades']} lost)",
        f"  Win Rate:        {results.win_rate:.1f}%",
        f"  Profit Factor:   {pf_str}",
        f"  Net Profit:      ${results.total_profit:,.2f}",
        f"  Final Balance:   ${results.final_balance:,.2f}",
        f"  Max Drawdown:    {results.max_drawdown:.2f}%",
        f"  Open Position:   {open_str}",
        "──────────────────────────────────────────────────",
    ]
    output = "\n".join(lines)
    print(output)
    return output
