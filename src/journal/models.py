# src/journal/models.py
"""Data models for the trading journal."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

from src.journal.settings import JournalRules, TradingPlan
from src.scoring.models import DisciplineScore, TiltmeterScore


class Direction(str, Enum):
    """Trade direction enumeration."""

    BUY = "Buy"
    SELL = "Sell"


class Outcome(str, Enum):
    WIN = "Win"
    LOSS = "Loss"
    NEUTRAL = "Neutral"


class TradeResult(str, Enum):
    """How a trade was closed."""

    TP = "TP"
    SL = "SL"
    BE = "BE"
    STOP = "Stop"
    RUNNING = "Running"


class TradeStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"


class BreakevenType(str, Enum):
    NONE = "No Break Even"
    BREAK_EVEN = "Break Even"
    TRAIL_SL = "Trail SL"


class NewsImpact(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    HOLIDAY = "Holiday"

    @property
    def rank(self) -> int:
        return {"High": 3, "Medium": 2, "Low": 1, "Holiday": 0}[self.value]


class JournalType(str, Enum):
    PERSONAL = "Personal"
    FUNDED = "Funded"
    COMPETITION = "Competition"


@dataclass
class PartialClose:
    """Part of the position closed before the final exit."""

    lot_size: float
    price: float


@dataclass
class Sentiments:
    """Sentiment tags logged before, during and after a trade."""

    before: list[str] = field(default_factory=list)
    during: list[str] = field(default_factory=list)
    after: list[str] = field(default_factory=list)

    def all(self) -> list[str]:
        return [*self.before, *self.during, *self.after]


@dataclass
class NewsEvent:
    name: str
    impact: NewsImpact | None = None


@dataclass
class RuleCombination:
    """Analysis rules required on one timeframe, keyed by sub-category id."""

    timeframe: str
    selected_rules: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class Setup:
    name: str
    rules: list[RuleCombination] = field(default_factory=list)


@dataclass
class Strategy:
    """A named strategy with its rule checklist and setups."""

    name: str
    rules: list[RuleCombination] = field(default_factory=list)
    setups: list[Setup] = field(default_factory=list)
    description: str = ""

    @property
    def rule_ids(self) -> set[str]:
        """Every checklist rule id across the strategy's rule combinations."""
        return {
            rule_id
            for combination in self.rules
            for rule_ids in combination.selected_rules.values()
            for rule_id in rule_ids
        }


CustomValue = Union[str, float, list[str]]


@dataclass
class AutoCalculated:
    """Fields derived from a trade's user-entered values and configuration."""

    status: TradeStatus
    result: TradeResult
    outcome: Outcome

    pips: float
    pl: float
    r_multiple: float
    rr: float
    risk_amount: float
    risk_percent: float
    gain_percent: float

    holding_time: str
    duration_minutes: float

    session: str
    ipda_zone: str
    news_impact: str

    mfe_pips: float
    mae_pips: float
    spread_cost: float
    commission_cost: float
    swap_cost: float

    matched_setups: list[str]
    score: DisciplineScore
    tiltmeter: TiltmeterScore
    xp: int


@dataclass
class Trade:
    """A single logged trade.

    Everything except `auto` is user-entered. `auto` is filled by the
    TradeCalculator and is never edited by hand.
    """

    id: str
    pair: str
    direction: Direction
    lot_size: float
    entry_price: float
    open_time: datetime

    # Exit details
    close_time: datetime | None = None
    closing_price: float | None = None
    stop_loss: float = 0.0
    take_profit: float = 0.0
    partials: list[PartialClose] = field(default_factory=list)
    breakeven: BreakevenType = BreakevenType.NONE

    # Costs
    commission: float = 0.0
    swap: float = 0.0
    extra_spread: float = 0.0

    # Context
    strategy: str | None = None
    tag: str | None = None
    entry_reasons: list[str] = field(default_factory=list)
    selected_rule_ids: list[str] = field(default_factory=list)
    analysis_selections: dict[str, dict[str, list[str]]] = field(default_factory=dict)
    custom_stats: dict[str, CustomValue] = field(default_factory=dict)
    news_events: list[NewsEvent] = field(default_factory=list)

    # Manual review
    sentiments: Sentiments = field(default_factory=Sentiments)
    notes: str = ""
    lessons_learned: str = ""
    image_count: int = 0
    mfe: float | None = None
    mae: float | None = None

    # Running averages at the time the trade was logged
    avg_score_at_time: float | None = None
    avg_pl_at_time: float | None = None

    is_missing: bool = False
    auto: AutoCalculated | None = None

    @property
    def is_open(self) -> bool:
        """Check if the trade is still open."""
        return (
            self.close_time is None
            or self.closing_price is None
            or self.closing_price <= 0
        )

    @property
    def has_partials(self) -> bool:
        return bool(self.partials)

    @property
    def computed(self) -> AutoCalculated:
        """Return the derived fields, failing if the trade was never calculated."""
        if self.auto is None:
            raise ValueError(f"Trade {self.id} has no calculated fields")
        return self.auto


@dataclass
class Journal:
    """A trading account's journal: plan, strategies and trades."""

    id: str
    name: str
    capital: float
    plan: TradingPlan = field(default_factory=TradingPlan)
    rules: JournalRules = field(default_factory=JournalRules)
    type: JournalType = JournalType.PERSONAL
    initial_deposit: float | None = None
    created_at: datetime | None = None
    strategies: list[Strategy] = field(default_factory=list)
    trades: list[Trade] = field(default_factory=list)

    def find_strategy(self, name: str | None) -> Strategy | None:
        if not name:
            return None
        return next((s for s in self.strategies if s.name == name), None)

    @property
    def logged_trades(self) -> list[Trade]:
        """Trades that were actually taken, in chronological order."""
        return sorted(
            (t for t in self.trades if not t.is_missing), key=lambda t: t.open_time
        )

    @property
    def starting_balance(self) -> float:
        return self.initial_deposit if self.initial_deposit is not None else self.capital

    @property
    def balance(self) -> float:
        """Starting balance plus the P/L of every calculated trade."""
        return self.starting_balance + sum(
            t.auto.pl for t in self.logged_trades if t.auto is not None
        )


@dataclass
class GroupMetrics:
    """Aggregate performance of one bucket of trades."""

    trades: int
    win_count: int
    loss_count: int
    win_rate: float  # 0-100

    gross_profit: float
    gross_loss: float
    total_pl: float
    gain_percent: float
    avg_pl: float
    avg_win: float
    avg_loss: float

    total_r: float
    avg_r: float
    profit_factor: float
    expectancy: float

    max_win_streak: int
    max_loss_streak: int

    avg_lot_size: float
    avg_duration_minutes: float
    avg_duration: str
    avg_score: float
    avg_win_score: float
    avg_loss_score: float


@dataclass
class Streak:
    outcome: Outcome | None
    count: int


@dataclass
class OverallStats:
    """Journal-wide statistics for the dashboard header."""

    total_trades: int
    win_count: int
    loss_count: int
    gross_win_pl: float
    gross_loss_pl: float
    total_pl: float
    day_count: int
    avg_pl: float
    per_day_pl: float
    avg_duration: str
    avg_trade_distance: str
    best_time: str
    avg_score: float
    highest_score: float
    lowest_score: float
    current_streak: Streak
    max_win_streak: int
    max_loss_streak: int


@dataclass
class MdScore:
    """Composite 0-100 rating of a journal."""

    total_score: float
    profitability_score: float
    consistency_score: float
    risk_management_score: float
    discipline_score: float
    feedback: str


@dataclass
class ReportRow:
    """One row of a nested group report."""

    key: str
    label: str
    level: int
    criteria: list[tuple[str, str]]
    metrics: GroupMetrics
    sub_rows: list["ReportRow"] = field(default_factory=list)
