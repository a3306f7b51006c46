"""GoldLab — application configuration.

Loads .env variables into a typed config object.
Validates values on startup.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from goldlab.market.models import TIMEFRAME_SECONDS


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    series_count: int
    series_timeframe: str  # key of TIMEFRAME_SECONDS, e.g. "15m"
    series_seed: Optional[int]
    gemini_api_key: Optional[str]
    gemini_model: str
    log_level: str
    http_port: int

    @property
    def analysis_enabled(self) -> bool:
        """Return True when a narrative API key is configured."""
        return bool(self.gemini_api_key)


def _int_var(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the offending variable when
    a value is malformed or out of range.
    """
    load_dotenv(dotenv_path=env_path)

    series_count = _int_var("SERIES_COUNT", "1500")
    if series_count < 0:
        raise ValueError(f"SERIES_COUNT must be >= 0, got {series_count}")

    timeframe = os.environ.get("SERIES_TIMEFRAME", "15m")
    if timeframe not in TIMEFRAME_SECONDS:
        raise ValueError(
            f"SERIES_TIMEFRAME must be one of {', '.join(TIMEFRAME_SECONDS)}, "
            f"got {timeframe!r}"
        )

    seed: Optional[int] = None
    if os.environ.get("SERIES_SEED"):
        seed = _int_var("SERIES_SEED", "0")

    return Config(
        series_count=series_count,
        series_timeframe=timeframe,
        series_seed=seed,
        gemini_api_key=os.environ.get("GEMINI_API_KEY") or None,
        gemini_model=os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        http_port=_int_var("HTTP_PORT", "8080"),
    )
