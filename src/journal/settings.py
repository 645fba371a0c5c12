# src/journal/settings.py
"""Trading plan and rule settings for a journal."""
from datetime import time
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


AmountUnit = Literal["%", "$"]
SessionName = Literal["Sydney", "Asian", "London", "New York"]


def to_minutes(value: time) -> int:
    """Minutes since midnight for a time of day."""
    return value.hour * 60 + value.minute


class TimeWindow(BaseModel):
    """A time-of-day window written as "HH:MM" bounds.

    Windows whose end is before their start wrap past midnight.
    """

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_clock(cls, v: str) -> str:
        """Validate that the bound is a HH:MM clock time."""
        try:
            hours, minutes = (int(part) for part in v.split(":"))
        except ValueError:
            raise ValueError(f"Invalid time: {v}. Expected HH:MM")
        if not (0 <= hours < 24 and 0 <= minutes < 60):
            raise ValueError(f"Invalid time: {v}. Expected HH:MM")
        return v

    @staticmethod
    def _parse(value: str) -> int:
        hours, minutes = (int(part) for part in value.split(":"))
        return hours * 60 + minutes

    def contains(self, minutes: int) -> bool:
        """Check if a minute-of-day falls inside the window (end exclusive)."""
        start = self._parse(self.start)
        end = self._parse(self.end)
        if end < start:
            return minutes >= start or minutes < end
        return start <= minutes < end


class KillZone(TimeWindow):
    name: str
    enabled: bool = True


def default_session_timings() -> dict[str, TimeWindow]:
    """Market sessions in New York time."""
    return {
        "Sydney": TimeWindow(start="16:00", end="01:00"),
        "Asian": TimeWindow(start="20:00", end="05:00"),
        "London": TimeWindow(start="03:00", end="12:00"),
        "New York": TimeWindow(start="08:00", end="17:00"),
    }


class TradingPlan(BaseModel):
    """The user's declared trading plan.

    Attributes:
        timezone: IANA timezone naive trade times are recorded in.
        instruments: Pairs the plan allows. Empty means any pair.
        risk_per_trade: Planned risk per trade, in risk_unit.
        risk_unit: "%" of capital or "$" amount.
        min_risk_to_reward: Minimum planned R:R. 0 disables the check.
        daily_loss_limit: Daily loss limit as % of capital. 0 disables it.
        weekly_loss_limit: Weekly loss limit as % of capital. 0 disables it.
        max_trades_per_day: Maximum trades per day. 0 disables it.
        daily_target: Daily profit target, in daily_target_unit. 0 disables it.
        no_trade_zones: Windows the plan forbids trading in.
        kill_zones: Named windows that take precedence over sessions.
        session_timings: Session windows keyed by session name.
    """

    timezone: str = "America/New_York"
    instruments: list[str] = Field(default_factory=list)

    risk_per_trade: float = Field(default=1.0, ge=0)
    risk_unit: AmountUnit = "%"
    min_risk_to_reward: float = Field(default=0.0, ge=0)

    daily_loss_limit: float = Field(default=0.0, ge=0)
    weekly_loss_limit: float = Field(default=0.0, ge=0)
    max_trades_per_day: int = Field(default=0, ge=0)
    daily_target: float = Field(default=0.0, ge=0)
    daily_target_unit: AmountUnit = "%"

    no_trade_zones: list[TimeWindow] = Field(default_factory=list)
    kill_zones: list[KillZone] = Field(default_factory=list)
    session_timings: dict[SessionName, TimeWindow] = Field(
        default_factory=default_session_timings
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate that the timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    def max_risk_amount(self, capital: float) -> float:
        """Planned risk per trade in account currency."""
        if self.risk_unit == "%":
            return capital * self.risk_per_trade / 100
        return self.risk_per_trade

    def daily_target_amount(self, capital: float) -> float:
        if self.daily_target_unit == "%":
            return capital * self.daily_target / 100
        return self.daily_target


class DrawdownRule(BaseModel):
    type: Literal["amount", "percent"] = "percent"
    value: float = Field(default=10.0, ge=0)

    def limit(self, capital: float) -> float:
        """Drawdown limit in account currency."""
        if self.type == "amount":
            return self.value
        return capital * self.value / 100


class JournalRules(BaseModel):
    """Account rules a journal is evaluated against."""

    max_drawdown: DrawdownRule = Field(default_factory=DrawdownRule)
