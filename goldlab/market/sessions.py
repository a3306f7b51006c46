"""Trading-session helpers — pure functions keyed on UTC time."""

from datetime import datetime, timedelta

_FRIDAY = 4  # datetime.weekday()
_WEEKEND_CLOSE_HOUR = 22


def session_volatility(utc_hour: int) -> float:
    """Return the volatility multiplier for bars opening at *utc_hour*.

    Buckets:
        13–17  London / New York overlap   2.4
        08–12  London                      1.6
        18–20  New York afternoon          1.4
        00–06  Asian                       0.7
        other  off-hours                   0.5
    """
    if 13 <= utc_hour <= 17:
        return 2.4
    if 8 <= utc_hour < 13:
        return 1.6
    if 17 < utc_hour < 21:
        return 1.4
    if 0 <= utc_hour < 7:
        return 0.7
    return 0.5


def session_name(utc_hour: int) -> str:
    """Return the session label shaded on the chart for *utc_hour*.

    Tokyo wins the 08:00 overlap and London wins 13:00–16:00, matching the
    dashboard's shading order.  Returns an empty string after 22:00.
    """
    if 0 <= utc_hour < 9:
        return "Tokyo"
    if 8 <= utc_hour < 17:
        return "London"
    if 13 <= utc_hour < 22:
        return "New York"
    return ""


def is_weekend_close(weekday: int, utc_hour: int) -> bool:
    """Return True while the market is shut (Fri 22:00 UTC until Monday)."""
    if weekday == _FRIDAY:
        return utc_hour >= _WEEKEND_CLOSE_HOUR
    return weekday > _FRIDAY


def weekend_gap_seconds(moment: datetime) -> int:
    """Seconds from *moment* to the Monday 00:00 UTC reopen."""
    days_ahead = 7 - moment.weekday()
    reopen = (moment + timedelta(days=days_ahead)).replace(
        hour=0, minute=0, second=0, microsecond=0,
    )
    return int((reopen - moment).total_seconds())
