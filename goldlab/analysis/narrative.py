"""Narrative analysis of backtest results via an injected summarizer.

The summarizer is the only slow, fallible, asynchronous collaborator in the
system.  :func:`analyze_strategy` contains its failures so they never reach
backtest state.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

import httpx

from goldlab.backtest.models import BacktestResults
from goldlab.strategy.models import StrategyParams

logger = logging.getLogger("goldlab.analysis")

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"

FAILED_MESSAGE = "Failed to connect to AI analysis engine."
EMPTY_MESSAGE = "Unable to generate analysis at this time."
DISABLED_MESSAGE = "AI analysis is not configured."


@runtime_checkable
class Summarizer(Protocol):
    """Interface for narrative generators."""

    async def summarize(
        self, results: BacktestResults, params: StrategyParams,
    ) -> str:
        """Return a prose analysis of *results*."""
        ...


def build_prompt(results: BacktestResults, params: StrategyParams) -> str:
    """Render the analyst prompt for *results* and *params*."""
    return (
        "As a senior quantitative analyst, evaluate this XAUUSD (Gold) "
        "backtesting result.\n"
        "Strategy Parameters:\n"
        f"- RSI Period: {params.rsi_period}\n"
        f"- RSI Overbought/Oversold: {params.rsi_overbought:g}/{params.rsi_oversold:g}\n"
        f"- SMA Period: {params.sma_period}\n"
        f"- EMA Period: {params.ema_period}\n"
        f"- Stop Loss / Take Profit: {params.stop_loss_pips:g}/{params.take_profit_pips:g} pips\n"
        f"- Initial Balance: ${params.initial_balance:g}\n"
        "\n"
        "Performance Metrics:\n"
        f"- Total Trades: {results.total_trades}\n"
        f"- Win Rate: {results.win_rate:.2f}%\n"
        f"- Total Profit: ${results.total_profit:.2f}\n"
        f"- Final Balance: ${results.final_balance:.2f}\n"
        f"- Max Drawdown: {results.max_drawdown:.2f}%\n"
        "\n"
        "Provide a concise analysis (max 300 words) focusing on risk "
        "management, strategy robustness, and potential improvements. "
        "Use a professional tone."
    )


class GeminiSummarizer:
    """Async client for the Gemini ``generateContent`` REST endpoint.

    Args:
        api_key: Generative Language API key.
        model: Model name, e.g. ``"gemini-3-flash-preview"``.
        base_url: API root, overridable for tests.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-3-flash-preview",
        base_url: str = GEMINI_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required for GeminiSummarizer")
        self._model = model
        self._url = f"{base_url}/v1beta/models/{model}:generateContent"
        self._headers = {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }
        self._timeout = timeout

    async def summarize(
        self, results: BacktestResults, params: StrategyParams,
    ) -> str:
        """Request an analysis; raises ``httpx.HTTPError`` on failure."""
        payload = {"contents": [{"parts": [{"text": build_prompt(results, params)}]}]}
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                self._url,
                headers=self._headers,
                json=payload,
                timeout=self._timeout,
            )
        resp.raise_for_status()
        return _extract_text(resp.json())


def _extract_text(body: dict) -> str:
    """Join the text parts of the first candidate; empty when absent."""
    candidates = body.get("candidates") or []
    if not candidates:
        return ""
    parts = candidates[0].get("content", {}).get("parts", [])
    return "".join(p.get("text", "") for p in parts)


async def analyze_strategy(
    summarizer: Optional[Summarizer],
    results: BacktestResults,
    params: StrategyParams,
) -> str:
    """Return a narrative for *results*, or a fallback message.

    Calls the summarizer once and never retries.  Any failure is logged and
    reported as "analysis unavailable" text.
    """
    if summarizer is None:
        return DISABLED_MESSAGE
    try:
        text = await summarizer.summarize(results, params)
    except Exception as exc:
        logger.error("Narrative analysis failed: %s", exc)
        return FAILED_MESSAGE
    if not text or not text.strip():
        return EMPTY_MESSAGE
    return text
