# src/gamification/history.py
"""Read-only view over a journal's calculated trade history."""
import calendar
from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Iterable

from src.config.settings import AppSettings
from src.journal.models import Direction, Journal, Outcome, Trade
from src.journal.trade_helpers import market_clock

TradePredicate = Callable[[Trade], bool]


def longest_run(trades: Iterable[Trade], predicate: TradePredicate) -> int:
    """Length of the longest run of consecutive trades matching a predicate."""
    best = current = 0
    for trade in trades:
        current = current + 1 if predicate(trade) else 0
        best = max(best, current)
    return best


def open_date(trade: Trade) -> date:
    return market_clock(trade.open_time).date()


class TradeHistory:
    """Chronological, calculated trade history of one journal.

    Milestone predicates receive this view, so every predicate works from
    the full history on each evaluation.

    Attributes:
        journal: The journal being evaluated.
        settings: Application settings (analysis configuration).
        as_of: Date the evaluation is made on. Weeks and months ending on or
            after it are still in progress.
        trades: Non-missed trades, oldest first.
        closed: The closed subset of trades.
    """

    def __init__(self, journal: Journal, settings: AppSettings, as_of: date):
        self.journal = journal
        self.settings = settings
        self.as_of = as_of
        self.trades = journal.logged_trades

        uncalculated = [t.id for t in self.trades if t.auto is None]
        if uncalculated:
            raise ValueError(f"Trades not calculated yet: {', '.join(uncalculated)}")
        self.closed = [t for t in self.trades if not t.is_open]

    # Counting helpers

    def count(self, predicate: TradePredicate, closed_only: bool = True) -> int:
        trades = self.closed if closed_only else self.trades
        return sum(1 for t in trades if predicate(t))

    def any(self, predicate: TradePredicate, closed_only: bool = True) -> bool:
        trades = self.closed if closed_only else self.trades
        return any(predicate(t) for t in trades)

    def run(self, predicate: TradePredicate) -> int:
        """Longest streak of closed trades matching a predicate."""
        return longest_run(self.closed, predicate)

    @property
    def wins(self) -> list[Trade]:
        return [t for t in self.closed if t.computed.outcome == Outcome.WIN]

    @property
    def total_pl(self) -> float:
        return sum(t.computed.pl for t in self.closed)

    # Calendar grouping

    def by_day(self, trades: list[Trade] | None = None) -> dict[date, list[Trade]]:
        groups: dict[date, list[Trade]] = defaultdict(list)
        for trade in self.trades if trades is None else trades:
            groups[open_date(trade)].append(trade)
        return dict(groups)

    def by_week(self, trades: list[Trade] | None = None) -> dict[tuple[int, int], list[Trade]]:
        groups: dict[tuple[int, int], list[Trade]] = defaultdict(list)
        for trade in self.trades if trades is None else trades:
            year, week, _ = open_date(trade).isocalendar()
            groups[(year, week)].append(trade)
        return dict(groups)

    def by_month(self, trades: list[Trade] | None = None) -> dict[tuple[int, int], list[Trade]]:
        groups: dict[tuple[int, int], list[Trade]] = defaultdict(list)
        for trade in self.trades if trades is None else trades:
            opened = open_date(trade)
            groups[(opened.year, opened.month)].append(trade)
        return dict(groups)

    def completed_weeks(self) -> dict[tuple[int, int], list[Trade]]:
        """Weeks with trades that ended before as_of."""
        return {
            key: trades
            for key, trades in self.by_week().items()
            if date.fromisocalendar(key[0], key[1], 7) < self.as_of
        }

    def completed_months(self) -> dict[tuple[int, int], list[Trade]]:
        """Months with trades that ended before as_of."""
        return {
            key: trades
            for key, trades in self.by_month().items()
            if date(key[0], key[1], calendar.monthrange(key[0], key[1])[1]) < self.as_of
        }

    @staticmethod
    def weekdays_of_month(year: int, month: int) -> set[date]:
        days = calendar.monthrange(year, month)[1]
        return {
            date(year, month, day)
            for day in range(1, days + 1)
            if date(year, month, day).weekday() < 5
        }

    @staticmethod
    def weekdays_of_week(year: int, week: int) -> set[date]:
        monday = date.fromisocalendar(year, week, 1)
        return {monday + timedelta(days=offset) for offset in range(5)}

    def longest_weekday_run(self) -> int:
        """Most consecutive weekdays that each have at least one trade."""
        traded = sorted(d for d in self.by_day() if d.weekday() < 5)
        best = current = 0
        previous: date | None = None
        for day in traded:
            gap = (day - previous).days if previous else None
            # Friday to Monday is still consecutive
            consecutive = gap == 1 or (gap == 3 and day.weekday() == 0)
            current = current + 1 if consecutive else 1
            best = max(best, current)
            previous = day
        return best

    def peak_balance(self) -> float:
        """Highest balance reached over the closed trades."""
        balance = peak = self.journal.starting_balance
        for trade in self.closed:
            balance += trade.computed.pl
            peak = max(peak, balance)
        return peak

    # Trade classification

    def _selected_values(self, trade: Trade, sub_category_id: str) -> list[str]:
        sub_category = self.settings.find_sub_category(sub_category_id)
        if sub_category is None:
            return []
        values = []
        for selections in trade.analysis_selections.values():
            for option_id in selections.get(sub_category_id, []):
                option = sub_category.find_option(option_id)
                if option is not None:
                    values.append(option.value)
        return values

    def zones(self, trade: Trade) -> set[str]:
        return set(self._selected_values(trade, "zone"))

    def is_zone_aligned(self, trade: Trade) -> bool:
        """Buy from a discount zone or sell from a premium zone."""
        wanted = "Discount" if trade.direction == Direction.BUY else "Premium"
        return wanted in self.zones(trade)

    def is_bias_aligned(self, trade: Trade) -> bool:
        """Every selected bias agrees with the trade direction."""
        biases = self._selected_values(trade, "bias")
        wanted = "Bullish" if trade.direction == Direction.BUY else "Bearish"
        return bool(biases) and all(bias == wanted for bias in biases)

    def risk_within_plan(self, trade: Trade) -> bool:
        plan = self.journal.plan
        auto = trade.computed
        if plan.risk_unit == "%":
            return auto.risk_percent <= plan.risk_per_trade
        return auto.risk_amount <= plan.risk_per_trade

    def is_fully_logged(self, trade: Trade) -> bool:
        """Every optional journaling input was filled in."""
        sentiments = trade.sentiments
        return all(
            (
                trade.strategy,
                trade.tag,
                trade.entry_reasons,
                trade.selected_rule_ids,
                trade.analysis_selections,
                trade.custom_stats,
                sentiments.before,
                sentiments.during,
                sentiments.after,
                trade.notes,
                trade.lessons_learned,
                trade.stop_loss > 0,
                trade.take_profit > 0,
                trade.image_count > 0,
                trade.mfe,
                trade.mae,
            )
        )
