# tests/journal/test_trade_helpers.py
"""Tests for time-of-day and formatting helpers."""
from datetime import datetime, timezone

import pytest

from src.journal.models import Direction, Trade
from src.journal.settings import KillZone, TradingPlan
from src.journal.trade_helpers import (
    format_duration,
    format_holding_time,
    ipda_zone,
    market_clock,
    resolve_session,
    signed_price_move,
    timeframe_minutes,
    trading_day,
    trading_week,
)


def make_trade(open_time: datetime) -> Trade:
    return Trade(
        id="t1",
        pair="EURUSD",
        direction=Direction.BUY,
        lot_size=1.0,
        entry_price=1.1,
        open_time=open_time,
    )


class TestFormatting:
    """Tests for duration formatting."""

    @pytest.mark.parametrize(
        "minutes,expected",
        [(0, "0m"), (45, "45m"), (60, "1h"), (125, "2h 5m"), (1565, "1d 2h 5m"), (2880, "2d")],
    )
    def test_format_holding_time(self, minutes, expected):
        """Test zero-valued parts are dropped."""
        assert format_holding_time(minutes) == expected

    @pytest.mark.parametrize(
        "minutes,expected",
        [(0.5, "<1m"), (42, "42m"), (90, "1.5h"), (2160, "1.5d")],
    )
    def test_format_duration(self, minutes, expected):
        """Test the compact aggregate format."""
        assert format_duration(minutes) == expected


class TestTimeframeMinutes:
    """Tests for timeframe label parsing."""

    @pytest.mark.parametrize(
        "label,minutes",
        [
            ("M15", 15),
            ("H4", 240),
            ("D1", 1440),
            ("5m", 5),
            ("1H", 60),
            ("D", 1440),
            ("1W", 10080),
            ("04:00", 240),
            (" H1 ", 60),
        ],
    )
    def test_known_labels(self, label, minutes):
        """Test prefixed, suffixed and clock labels."""
        assert timeframe_minutes(label) == minutes

    @pytest.mark.parametrize("label", ["weird", "ab:cd"])
    def test_unknown_labels_count_as_a_day(self, label):
        """Test unparseable labels fall back to one day."""
        assert timeframe_minutes(label) == 1440


class TestMarketClock:
    """Tests for New York wall-clock conversion."""

    def test_naive_is_unchanged(self):
        """Test naive datetimes are already New York time."""
        moment = datetime(2024, 3, 4, 9, 30)

        assert market_clock(moment) == moment

    def test_utc_in_winter(self):
        """Test EST applies before the March DST switch."""
        moment = datetime(2024, 3, 4, 14, 30, tzinfo=timezone.utc)

        local = market_clock(moment)

        assert (local.hour, local.minute) == (9, 30)

    def test_utc_in_summer(self):
        """Test EDT applies in July."""
        moment = datetime(2024, 7, 1, 14, 30, tzinfo=timezone.utc)

        assert market_clock(moment).hour == 10

    def test_trading_day_uses_new_york_date(self):
        """Test a late UTC trade belongs to the previous New York day."""
        trade = make_trade(datetime(2024, 3, 5, 2, 0, tzinfo=timezone.utc))

        assert trading_day(trade) == "2024-03-04"

    def test_trading_week(self):
        """Test Sunday closes the ISO week."""
        assert trading_week(make_trade(datetime(2024, 3, 10, 12, 0))) == (2024, 10)
        assert trading_week(make_trade(datetime(2024, 3, 11, 12, 0))) == (2024, 11)

    def test_naive_in_other_timezone(self):
        """Test naive datetimes are read in the given timezone."""
        local = market_clock(datetime(2024, 3, 4, 14, 30), "Europe/London")

        assert (local.hour, local.minute) == (9, 30)

    def test_trading_day_in_other_timezone(self):
        """Test a Tokyo morning falls on the previous New York day."""
        trade = make_trade(datetime(2024, 3, 5, 8, 0))

        assert trading_day(trade) == "2024-03-05"
        assert trading_day(trade, "Asia/Tokyo") == "2024-03-04"

    def test_trading_week_in_other_timezone(self):
        """Test a Monday morning in Sydney is still the previous New York week."""
        trade = make_trade(datetime(2024, 3, 11, 7, 0))

        assert trading_week(trade, "Australia/Sydney") == (2024, 10)


class TestSessions:
    """Tests for session and IPDA zone resolution."""

    @pytest.mark.parametrize(
        "hour,minute,session",
        [(3, 15, "Asian / London"), (18, 0, "Sydney"), (2, 0, "Asian"), (9, 0, "London / New York")],
    )
    def test_default_sessions(self, hour, minute, session):
        """Test overlapping sessions are joined."""
        moment = datetime(2024, 3, 4, hour, minute)

        assert resolve_session(moment, TradingPlan()) == session

    def test_kill_zone_wins(self):
        """Test an enabled kill zone names the session."""
        plan = TradingPlan(kill_zones=[KillZone(name="NY AM", start="09:30", end="11:00")])

        assert resolve_session(datetime(2024, 3, 4, 10, 0), plan) == "NY AM"

    def test_disabled_kill_zone_ignored(self):
        """Test a disabled kill zone falls back to the sessions."""
        plan = TradingPlan(
            kill_zones=[KillZone(name="NY AM", start="09:30", end="11:00", enabled=False)]
        )

        assert resolve_session(datetime(2024, 3, 4, 10, 0), plan) == "London / New York"

    def test_session_in_plan_timezone(self):
        """Test the plan timezone moves a naive time into New York hours."""
        moment = datetime(2024, 3, 4, 14, 30)
        london = TradingPlan(timezone="Europe/London")

        assert resolve_session(moment, TradingPlan()) == "New York"
        assert resolve_session(moment, london) == "London / New York"

    def test_ipda_zone_in_other_timezone(self):
        """Test IPDA zones are resolved on the New York clock."""
        moment = datetime(2024, 3, 4, 14, 30)

        assert ipda_zone(moment) == "Rest of day"
        assert ipda_zone(moment, "Europe/London") == "New York Killzone"

    def test_no_session(self):
        """Test a gap between sessions."""
        plan = TradingPlan(session_timings={})

        assert resolve_session(datetime(2024, 3, 4, 10, 0), plan) == "N/A"

    @pytest.mark.parametrize(
        "hour,minute,zone",
        [
            (2, 0, "Judas swing"),
            (4, 0, "London open Killzone"),
            (8, 15, "NewYork open"),
            (9, 30, "New York Killzone"),
            (11, 30, "London Close Killzone"),
            (18, 0, "Asian Range"),
        ],
    )
    def test_ipda_zone(self, hour, minute, zone):
        """Test zone boundaries in New York time."""
        assert ipda_zone(datetime(2024, 3, 4, hour, minute)) == zone


class TestSignedPriceMove:
    """Tests for direction-aware price moves."""

    def test_buy(self):
        """Test a rising price favours a buy."""
        assert signed_price_move(Direction.BUY, 1.1, 1.2) == pytest.approx(0.1)

    def test_sell(self):
        """Test a rising price goes against a sell."""
        assert signed_price_move(Direction.SELL, 1.1, 1.2) == pytest.approx(-0.1)
