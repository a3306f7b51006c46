"""Drawdown tracking — pure math, no I/O.

Tracks peak equity, the current drawdown percentage and the deepest
drawdown seen so far.
"""


class DrawdownTracker:
    """Tracks equity peaks and computes drawdown metrics.

    Args:
        initial_equity: First equity observation; it seeds the peak.
    """

    def __init__(self, initial_equity: float) -> None:
        self._peak_equity: float = initial_equity
        self._current_equity: float = initial_equity
        self._max_drawdown_pct: float = 0.0

    # ── Mutation ─────────────────────────────────────────────────────────

    def update(self, equity: float) -> None:
        """Update with the latest equity value.

        If *equity* exceeds the current peak, the peak is raised.
        """
        self._current_equity = equity
        if equity > self._peak_equity:
            self._peak_equity = equity
        dd = self.drawdown_pct
        if dd > self._max_drawdown_pct:
            self._max_drawdown_pct = dd

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def peak_equity(self) -> float:
        """Highest equity recorded."""
        return self._peak_equity

    @property
    def current_equity(self) -> float:
        """Most recently recorded equity."""
        return self._current_equity

    @property
    def drawdown_pct(self) -> float:
        """Current drawdown as a percentage of peak equity.

        A non-positive peak has no meaningful percentage and reports 0.
        """
        if self._peak_equity <= 0:
            return 0.0
        return (
            (self._peak_equity - self._current_equity) / self._peak_equity
        ) * 100.0

    @property
    def max_drawdown_pct(self) -> float:
        """Deepest drawdown observed since construction."""
        return self._max_drawdown_pct
