# src/journal/trade_helpers.py
"""Time-of-day and formatting helpers shared by the trade calculators."""
from datetime import datetime
from zoneinfo import ZoneInfo

from src.config.thresholds import MARKET_TIMEZONE
from src.journal.models import Direction, Trade
from src.journal.settings import TradingPlan, to_minutes


MARKET_TZ = ZoneInfo(MARKET_TIMEZONE)

# (start minute, end minute, zone) in New York time, end exclusive
IPDA_ZONES: tuple[tuple[int, int, str], ...] = (
    (0, 180, "Judas swing"),
    (180, 300, "London open Killzone"),
    (300, 480, "Pre New York"),
    (480, 510, "NewYork open"),
    (510, 660, "New York Killzone"),
    (660, 720, "London Close Killzone"),
    (720, 1020, "Rest of day"),
    (1020, 1440, "Asian Range"),
)


def market_clock(moment: datetime, timezone: str = MARKET_TIMEZONE) -> datetime:
    """Return the New York wall-clock time of a moment.

    Naive datetimes are wall-clock times in `timezone`. They are returned
    unchanged when that is already New York.
    """
    if moment.tzinfo is None:
        if timezone == MARKET_TIMEZONE:
            return moment
        moment = moment.replace(tzinfo=ZoneInfo(timezone))
    return moment.astimezone(MARKET_TZ)


def minute_of_day(moment: datetime, timezone: str = MARKET_TIMEZONE) -> int:
    """Minutes since New York midnight."""
    return to_minutes(market_clock(moment, timezone).time())


def resolve_session(moment: datetime, plan: TradingPlan) -> str:
    """Name the session a trade was opened in.

    An enabled kill zone wins over the market sessions. Overlapping sessions
    are joined with " / ".
    """
    minutes = minute_of_day(moment, plan.timezone)
    for zone in plan.kill_zones:
        if zone.enabled and zone.contains(minutes):
            return zone.name

    active = [
        name for name, window in plan.session_timings.items() if window.contains(minutes)
    ]
    return " / ".join(active) if active else "N/A"


def ipda_zone(moment: datetime, timezone: str = MARKET_TIMEZONE) -> str:
    minutes = minute_of_day(moment, timezone)
    for start, end, zone in IPDA_ZONES:
        if start <= minutes < end:
            return zone
    return "N/A"


def in_any_window(moment: datetime, windows, timezone: str = MARKET_TIMEZONE) -> bool:
    minutes = minute_of_day(moment, timezone)
    return any(window.contains(minutes) for window in windows)


def timeframe_minutes(timeframe: str) -> int:
    """Convert a timeframe label to minutes.

    Accepts "HH:MM", suffixed chart labels ("5m", "1H", "D", "1W") and
    prefixed ones ("M15", "H4", "D1"). Unknown labels count as one day.
    """
    label = timeframe.strip()
    if ":" in label:
        hours, _, minutes = label.partition(":")
        if hours.isdigit() and minutes.isdigit():
            return int(hours) * 60 + int(minutes)
        return 24 * 60

    units = {"m": 1, "h": 60, "d": 24 * 60, "w": 7 * 24 * 60}
    if label[:1].lower() in units and label[1:].isdigit():
        return units[label[:1].lower()] * int(label[1:])

    unit = units.get(label[-1:].lower())
    count = label[:-1] or "1"
    if unit is None or not count.isdigit():
        return 24 * 60
    return int(count) * unit


def signed_price_move(direction: Direction, entry: float, exit_price: float) -> float:
    """Price move in the trade's favour."""
    if direction == Direction.BUY:
        return exit_price - entry
    return entry - exit_price


def format_holding_time(minutes: float) -> str:
    """Format a holding time as "1d 2h 5m"."""
    days = int(minutes // 1440)
    hours = int((minutes % 1440) // 60)
    mins = int(minutes % 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if mins > 0 or not parts:
        parts.append(f"{mins}m")
    return " ".join(parts)


def format_duration(minutes: float) -> str:
    """Compact duration used by aggregate views."""
    if minutes < 1:
        return "<1m"
    if minutes < 60:
        return f"{minutes:.0f}m"
    if minutes < 1440:
        return f"{minutes / 60:.1f}h"
    return f"{minutes / 1440:.1f}d"


def trading_day(trade: Trade, timezone: str = MARKET_TIMEZONE) -> str:
    """ISO date of the New York trading day a trade was opened on."""
    return market_clock(trade.open_time, timezone).date().isoformat()


def trading_week(trade: Trade, timezone: str = MARKET_TIMEZONE) -> tuple[int, int]:
    """ISO (year, week) a trade was opened in."""
    year, week, _ = market_clock(trade.open_time, timezone).date().isocalendar()
    return year, week
