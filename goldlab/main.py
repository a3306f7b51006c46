"""GoldLab — application entry point.

Builds the FastAPI internal server and provides the CLI entry point for
serve and backtest modes.
"""

import logging

from fastapi import FastAPI

from goldlab.api.routers import router

app = FastAPI(title="GoldLab Internal API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("goldlab")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


def build_summarizer(config):
    """Return a ``GeminiSummarizer`` when an API key is configured, else None."""
    from goldlab.analysis.narrative import GeminiSummarizer

    if not config.analysis_enabled:
        logger.info("GEMINI_API_KEY not set — narrative analysis disabled.")
        return None
    return GeminiSummarizer(config.gemini_api_key, model=config.gemini_model)


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli(argv=None) -> None:
    """Parse CLI arguments and dispatch to the appropriate mode."""
    import argparse

    from goldlab.config import load_config
    from goldlab.market.models import TIMEFRAME_SECONDS

    parser = argparse.ArgumentParser(description="GoldLab XAUUSD backtester")
    parser.add_argument(
        "--mode",
        choices=["serve", "backtest"],
        default="backtest",
        help="Run mode (default: backtest)",
    )
    parser.add_argument("--count", type=int, help="Number of candles to generate")
    parser.add_argument(
        "--timeframe",
        choices=list(TIMEFRAME_SECONDS),
        help="Bar duration of the generated series",
    )
    parser.add_argument("--seed", type=int, help="Generator seed")
    args = parser.parse_args(argv)

    config = load_config()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    count = args.count if args.count is not None else config.series_count
    timeframe = args.timeframe or config.series_timeframe
    seed = args.seed if args.seed is not None else config.series_seed

    if args.mode == "serve":
        _run_server(config, count, timeframe, seed)
    else:
        _run_backtest(count, timeframe, seed)


def _run_server(config, count: int, timeframe: str, seed) -> None:
    """Start the API server."""
    import uvicorn

    from goldlab.api.routers import configure_routers

    configure_routers(
        summarizer=build_summarizer(config),
        series_count=count,
        series_timeframe=timeframe,
        series_seed=seed,
    )
    logger.info("GoldLab API available at http://localhost:%d", config.http_port)
    uvicorn.run(app, host="0.0.0.0", port=config.http_port, log_level="info")


def _run_backtest(count: int, timeframe: str, seed) -> None:
    """Generate a series and backtest the default strategy on it."""
    from goldlab.backtest.engine import run_backtest
    from goldlab.cli.report import print_results
    from goldlab.market.generator import generate_series
    from goldlab.strategy.models import StrategyParams

    candles = generate_series(count, timeframe, seed)
    params = StrategyParams()
    results = run_backtest(candles, params)
    logger.info(
        "Backtest complete: %d trades, PnL: $%.2f, Win rate: %.1f%%",
        results.total_trades,
        results.total_profit,
        results.win_rate,
    )
    print_results(results, params)


if __name__ == "__main__":
    _run_cli()
