"""Internal API routers — /candles, /strategy/params, /backtest, /structure, /analysis.

No business logic. Delegates to the generator, engine, detectors and the
narrative collaborator.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import numpy as np
from fastapi import APIRouter, Query

from goldlab.analysis.narrative import Summarizer, analyze_strategy
from goldlab.backtest.engine import run_backtest
from goldlab.market.generator import generate_series
from goldlab.market.models import Candle
from goldlab.market.sessions import session_name
from goldlab.strategy.models import StrategyParams
from goldlab.strategy.structure import detect_zones, pivot_points

logger = logging.getLogger("goldlab")
router = APIRouter()

_MAX_COUNT = 20_000

# ── Shared state (set during app startup) ────────────────────────────────

_summarizer: Optional[Summarizer] = None  # Set via configure_routers()
_params: StrategyParams = StrategyParams()

# Series settings; the seed is pinned so every endpoint sees the same market
_series_settings: dict = {
    "count": 1500,
    "timeframe": "15m",
    "seed": None,
}


def configure_routers(
    summarizer: Optional[Summarizer] = None,
    params: Optional[StrategyParams] = None,
    series_count: Optional[int] = None,
    series_timeframe: Optional[str] = None,
    series_seed: Optional[int] = None,
) -> None:
    """Inject dependencies from the application startup.

    Args:
        summarizer: Narrative collaborator (``None`` disables analysis).
        params: Initial strategy parameters.
        series_count: Default number of generated candles.
        series_timeframe: Default bar duration key.
        series_seed: Generator seed; a random one is drawn when omitted.
    """
    global _summarizer, _params  # noqa: PLW0603
    _summarizer = summarizer
    if params is not None:
        _params = params.validate()
    if series_count is not None:
        _series_settings["count"] = series_count
    if series_timeframe is not None:
        _series_settings["timeframe"] = series_timeframe
    if series_seed is None:
        series_seed = int(np.random.default_rng().integers(0, 2**31 - 1))
    _series_settings["seed"] = series_seed


def _window(
    count: Optional[int],
    timeframe: Optional[str],
    seed: Optional[int],
    upto: Optional[int],
) -> list[Candle]:
    """Return the visible candle window (first *upto* generated bars)."""
    count = _series_settings["count"] if count is None else count
    if count > _MAX_COUNT:
        raise ValueError(f"count must be <= {_MAX_COUNT}, got {count}")
    timeframe = timeframe or _series_settings["timeframe"]
    seed = _series_settings["seed"] if seed is None else seed
    candles = generate_series(count, timeframe, seed)
    if upto is not None:
        if upto < 0:
            raise ValueError(f"upto must be >= 0, got {upto}")
        candles = candles[:upto]
    return candles


def _error(exc: Exception) -> dict:
    return {"status": "error", "errors": [str(exc)]}


def _parse_run_body(body: dict) -> tuple[StrategyParams, list[Candle]]:
    """Resolve params overrides and the candle window from a request body."""
    overrides = body.get("params") or {}
    if not isinstance(overrides, dict):
        raise ValueError("params must be an object")
    params = StrategyParams.from_dict(overrides, base=_params)
    numbers = {}
    for key in ("count", "seed", "upto"):
        raw = body.get(key)
        if raw is None:
            numbers[key] = None
            continue
        try:
            numbers[key] = int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    candles = _window(
        numbers["count"], body.get("timeframe"), numbers["seed"], numbers["upto"],
    )
    return params, candles


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/candles")
async def get_candles(
    count: Optional[int] = Query(default=None, ge=0, le=_MAX_COUNT),
    timeframe: Optional[str] = Query(default=None),
    seed: Optional[int] = Query(default=None),
    upto: Optional[int] = Query(default=None, ge=0),
):
    """Return the generated candle window with a session label per bar."""
    try:
        candles = _window(count, timeframe, seed, upto)
    except ValueError as exc:
        return _error(exc)
    result = []
    for c in candles:
        hour = datetime.fromtimestamp(c.time, tz=timezone.utc).hour
        result.append({**c.to_dict(), "session": session_name(hour)})
    return {"candles": result, "total": len(result)}


@router.get("/strategy/params")
async def get_params():
    """Return the current strategy parameters."""
    return _params.to_dict()


@router.post("/strategy/params")
async def post_params(body: dict):
    """Update strategy parameters.

    Validates before applying. Returns the updated parameters.
    """
    global _params  # noqa: PLW0603
    try:
        _params = StrategyParams.from_dict(body, base=_params)
    except ValueError as exc:
        return _error(exc)
    logger.info("Strategy params updated: %s", _params)
    return {"status": "ok", **_params.to_dict()}


@router.post("/backtest")
async def post_backtest(body: dict):
    """Run a backtest over the requested window.

    Body keys (all optional): ``params`` overrides, ``count``,
    ``timeframe``, ``seed``, ``upto``.
    """
    try:
        params, candles = _parse_run_body(body)
    except ValueError as exc:
        return _error(exc)
    results = run_backtest(candles, params)
    return {"status": "ok", "results": results.to_dict()}


@router.get("/structure")
async def get_structure(
    count: Optional[int] = Query(default=None, ge=0, le=_MAX_COUNT),
    timeframe: Optional[str] = Query(default=None),
    seed: Optional[int] = Query(default=None),
    upto: Optional[int] = Query(default=None, ge=0),
):
    """Return pivot levels and supply/demand zones for the window."""
    try:
        candles = _window(count, timeframe, seed, upto)
    except ValueError as exc:
        return _error(exc)
    pivots = pivot_points(candles)
    return {
        "pivots": pivots.to_dict() if pivots else None,
        "zones": [z.to_dict() for z in detect_zones(candles)],
    }


@router.post("/analysis")
async def post_analysis(body: dict):
    """Backtest the window, then ask the summarizer for a narrative.

    The narrative is best-effort: failures come back as fallback text.
    """
    try:
        params, candles = _parse_run_body(body)
    except ValueError as exc:
        return _error(exc)
    results = run_backtest(candles, params)
    text = await analyze_strategy(_summarizer, results, params)
    return {"status": "ok", "analysis": text, "results": results.to_dict()}
