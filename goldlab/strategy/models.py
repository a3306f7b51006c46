"""Strategy data models — parameters, trades and chart-structure records."""

import math
from dataclasses import FrozenInstanceError, asdict, dataclass, fields
from typing import Optional

LONG = "LONG"
SHORT = "SHORT"
OPEN = "OPEN"
CLOSED = "CLOSED"
SUPPLY = "SUPPLY"
DEMAND = "DEMAND"

# Dashboard (camelCase) key → StrategyParams field
_CAMEL_KEYS: dict[str, str] = {
    "rsiPeriod": "rsi_period",
    "rsiOverbought": "rsi_overbought",
    "rsiOversold": "rsi_oversold",
    "smaPeriod": "sma_period",
    "emaPeriod": "ema_period",
    "initialBalance": "initial_balance",
    "stopLossPips": "stop_loss_pips",
    "takeProfitPips": "take_profit_pips",
    "riskPercent": "risk_percent",
}


@dataclass(frozen=True)
class StrategyParams:
    """RSI / SMA / EMA strategy configuration.

    ``stop_loss_pips`` and ``take_profit_pips`` are price distances in
    hundredths of a dollar.  ``risk_percent`` is carried for display only;
    the engine trades a fixed position size.
    """

    rsi_period: int = 14
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0
    sma_period: int = 50
    ema_period: int = 20
    initial_balance: float = 10_000.0
    stop_loss_pips: float = 50.0
    take_profit_pips: float = 150.0
    risk_percent: float = 1.0

    def validate(self) -> "StrategyParams":
        """Raise ``ValueError`` naming the first invalid field.

        Returns ``self`` so calls can be chained.
        """
        for name in ("rsi_period", "sma_period", "ema_period"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        for name in ("rsi_overbought", "rsi_oversold"):
            value = getattr(self, name)
            if not math.isfinite(value) or not 0.0 <= value <= 100.0:
                raise ValueError(f"{name} must be within 0–100, got {value}")
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError(
                f"rsi_oversold ({self.rsi_oversold}) must be below "
                f"rsi_overbought ({self.rsi_overbought})"
            )
        for name in ("initial_balance", "stop_loss_pips", "take_profit_pips"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be positive and finite, got {value}")
        if not math.isfinite(self.risk_percent) or self.risk_percent < 0:
            raise ValueError(f"risk_percent must be finite and >= 0, got {self.risk_percent}")
        return self

    @classmethod
    def from_dict(cls, data: dict, base: Optional["StrategyParams"] = None) -> "StrategyParams":
        """Build params from snake_case or dashboard camelCase keys.

        Keys absent from *data* are taken from *base* (or the defaults).
        Unknown keys raise ``ValueError``.  The result is validated.
        """
        known = {f.name for f in fields(cls)}
        values = asdict(base) if base is not None else {}
        for key, raw in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown strategy parameter: {key}")
            if isinstance(raw, bool):
                raise ValueError(f"{name} has an invalid value: {raw!r}")
            try:
                if name.endswith("_period"):
                    if isinstance(raw, float) and not raw.is_integer():
                        raise ValueError
                    values[name] = int(raw)
                else:
                    values[name] = float(raw)
            except (TypeError, ValueError):
                raise ValueError(f"{name} has an invalid value: {raw!r}") from None
        return cls(**values).validate()

    def to_dict(self) -> dict:
        snake_to_camel = {v: k for k, v in _CAMEL_KEYS.items()}
        return {snake_to_camel[k]: v for k, v in asdict(self).items()}


@dataclass
class Trade:
    """A simulated position.

    Created ``OPEN`` with zeroed exit fields and closed exactly once.
    A closed trade is read-only: assigning to any field raises
    ``FrozenInstanceError``.
    """

    id: str
    type: str  # LONG or SHORT
    entry_price: float
    entry_time: int
    exit_price: float = 0.0
    exit_time: int = 0
    profit: float = 0.0
    status: str = OPEN
    reason: Optional[str] = None

    def __setattr__(self, name: str, value) -> None:
        if getattr(self, "status", None) == CLOSED:
            raise FrozenInstanceError(f"cannot assign to field {name!r} of closed trade {self.id}")
        super().__setattr__(name, value)

    def close(self, exit_price: float, exit_time: int, profit: float, reason: str) -> None:
        """Record the exit.  Raises ``RuntimeError`` if already closed."""
        if self.status == CLOSED:
            raise RuntimeError(f"Trade {self.id} is already closed")
        self.exit_price = exit_price
        self.exit_time = exit_time
        self.profit = profit
        self.reason = reason
        self.status = CLOSED

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type,
            "entryPrice": self.entry_price,
            "entryTime": self.entry_time,
            "exitPrice": self.exit_price,
            "exitTime": self.exit_time,
            "profit": self.profit,
            "status": self.status,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        return data


@dataclass(frozen=True)
class PivotPoints:
    """Classic floor-trader pivot levels."""

    p: float
    r1: float
    r2: float
    s1: float
    s2: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SDZone:
    """A supply or demand price band that preceded a strong move."""

    type: str  # SUPPLY or DEMAND
    price_start: float
    price_end: float
    time_start: int
    time_end: Optional[int] = None  # ongoing when None

    def to_dict(self) -> dict:
        data = {
            "type": self.type,
            "priceStart": self.price_start,
            "priceEnd": self.price_end,
            "timeStart": self.time_start,
        }
        if self.time_end is not None:
            data["timeEnd"] = self.time_end
        return data
