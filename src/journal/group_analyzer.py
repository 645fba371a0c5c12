# src/journal/group_analyzer.py
"""Analyzer for grouping trades into buckets and pivot reports."""
import math
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Union

import pandas as pd

from src.config.settings import AppSettings
from src.config.thresholds import PLAN_ADHERENCE_SCORE
from src.journal.metrics_calculator import MetricsCalculator, closed_trades
from src.journal.models import Direction, GroupMetrics, ReportRow, Trade
from src.journal.trade_helpers import market_clock


class GroupKey(str, Enum):
    """Built-in grouping criteria."""

    OUTCOME = "Outcome"
    RESULT = "Result"
    DIRECTION = "Direction"
    PAIR = "Pair"
    TAG = "Tag"
    MONTH = "Month"
    WEEK_OF_MONTH = "Week of Month"
    DAY_OF_WEEK = "Day of Week"
    DAY_OF_MONTH = "Day of Month"
    HOUR_OF_DAY = "Hour of Day"
    SESSION = "Session"
    IPDA_ZONE = "IPDA Zone"
    STRATEGY = "Strategy"
    SETUP = "Setup"
    NEWS = "News"
    SENTIMENT = "Sentiments"
    PLAN_ADHERENCE = "Plan Adherence"
    R_MULTIPLE = "RR"
    SCORE = "Score"
    LOT_SIZE = "Lot Size"
    RISK_PERCENT = "Risk %"
    HOLDING_TIME = "Holding Time"
    ALIGNMENT = "Alignment"


@dataclass(frozen=True)
class CustomFieldCriterion:
    """Group by the value(s) of a user-defined custom field."""

    field_id: str


@dataclass(frozen=True)
class AnalysisCriterion:
    """Group by the options selected in one analysis category."""

    category_id: str


Criterion = Union[GroupKey, CustomFieldCriterion, AnalysisCriterion]

NOT_AVAILABLE = "N/A"


def week_of_month(day: date) -> int:
    """Week number within the month, weeks starting on Sunday."""
    first = day.replace(day=1)
    offset = (first.weekday() + 1) % 7
    return (day.day + offset - 1) // 7 + 1


def r_multiple_bucket(r_multiple: float) -> str:
    rounded = math.floor(r_multiple + 0.5)
    if rounded < -5:
        return "< -5R"
    if rounded > 10:
        return "> 10R"
    return f"{rounded}R"


def score_grade(score: float) -> str:
    if score >= 90:
        return "A+ (90-100)"
    if score >= 80:
        return "A (80-89)"
    if score >= 70:
        return "B (70-79)"
    if score >= 60:
        return "C (60-69)"
    if score >= 50:
        return "D (50-59)"
    return "F (< 50)"


def lot_size_bucket(lot_size: float) -> str:
    if lot_size <= 0.05:
        return "Micro (<=0.05)"
    if lot_size <= 0.1:
        return "Mini (0.06-0.10)"
    if lot_size <= 0.5:
        return "Small (0.11-0.50)"
    if lot_size <= 1.0:
        return "Standard (0.51-1.00)"
    return "Heavy (>1.00)"


def risk_percent_bucket(percent: float) -> str:
    if percent <= 0.5:
        return "0 - 0.5%"
    if percent <= 1:
        return "0.51 - 1%"
    if percent <= 2:
        return "1.01 - 2%"
    if percent <= 5:
        return "2.01 - 5%"
    return "> 5%"


def holding_time_bucket(minutes: float) -> str:
    if minutes < 5:
        return "< 5 min"
    if minutes <= 15:
        return "5-15 min"
    if minutes <= 30:
        return "15-30 min"
    if minutes <= 60:
        return "30-60 min"
    if minutes <= 240:
        return "1-4 hr"
    if minutes <= 1440:
        return "4-24 hr"
    return "> 1 day"


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class GroupAnalyzer:
    """Buckets calculated trades by a criterion and aggregates each bucket.

    A trade with several values for a criterion (sentiments, news, setups,
    multi-select custom fields, analysis selections) is counted in every
    bucket it belongs to.
    """

    def __init__(
        self,
        settings: AppSettings,
        metrics_calculator: MetricsCalculator | None = None,
    ):
        self._settings = settings
        self._metrics = metrics_calculator or MetricsCalculator()

    def criterion_label(self, criterion: Criterion) -> str:
        """Display name of a criterion."""
        if isinstance(criterion, CustomFieldCriterion):
            definition = self._settings.find_custom_field(criterion.field_id)
            return definition.title if definition else criterion.field_id
        if isinstance(criterion, AnalysisCriterion):
            category = self._settings.find_analysis_category(criterion.category_id)
            return category.title if category else criterion.category_id
        return criterion.value

    def criterion_values(self, trade: Trade, criterion: Criterion) -> list[str]:
        """Return every bucket label a calculated trade belongs to."""
        if isinstance(criterion, CustomFieldCriterion):
            return self._custom_field_values(trade, criterion.field_id)
        if isinstance(criterion, AnalysisCriterion):
            return self._analysis_values(trade, criterion.category_id)

        auto = trade.computed
        opened = market_clock(trade.open_time)

        if criterion == GroupKey.OUTCOME:
            return [auto.outcome.value]
        if criterion == GroupKey.RESULT:
            return [auto.result.value]
        if criterion == GroupKey.DIRECTION:
            return [trade.direction.value]
        if criterion == GroupKey.PAIR:
            return [trade.pair]
        if criterion == GroupKey.TAG:
            return [trade.tag or "Untagged"]
        if criterion == GroupKey.MONTH:
            return [opened.strftime("%B")]
        if criterion == GroupKey.WEEK_OF_MONTH:
            return [f"Week {week_of_month(opened.date())}"]
        if criterion == GroupKey.DAY_OF_WEEK:
            return [opened.strftime("%A")]
        if criterion == GroupKey.DAY_OF_MONTH:
            return [str(opened.day)]
        if criterion == GroupKey.HOUR_OF_DAY:
            return [f"{opened.hour}:00"]
        if criterion == GroupKey.SESSION:
            return [auto.session]
        if criterion == GroupKey.IPDA_ZONE:
            return [auto.ipda_zone or NOT_AVAILABLE]
        if criterion == GroupKey.STRATEGY:
            return [trade.strategy or "Unspecified"]
        if criterion == GroupKey.SETUP:
            return list(auto.matched_setups) or ["No Setup"]
        if criterion == GroupKey.NEWS:
            return _unique([event.name for event in trade.news_events]) or ["No News"]
        if criterion == GroupKey.SENTIMENT:
            return _unique(trade.sentiments.all()) or [NOT_AVAILABLE]
        if criterion == GroupKey.PLAN_ADHERENCE:
            compliant = auto.score.value >= PLAN_ADHERENCE_SCORE
            return ["Compliant" if compliant else "Non-Compliant"]
        if criterion == GroupKey.R_MULTIPLE:
            return [r_multiple_bucket(auto.r_multiple)]
        if criterion == GroupKey.SCORE:
            return [score_grade(auto.score.value)]
        if criterion == GroupKey.LOT_SIZE:
            return [lot_size_bucket(trade.lot_size)]
        if criterion == GroupKey.RISK_PERCENT:
            return [risk_percent_bucket(auto.risk_percent)]
        if criterion == GroupKey.HOLDING_TIME:
            return [holding_time_bucket(auto.duration_minutes)]
        if criterion == GroupKey.ALIGNMENT:
            return self._alignment_values(trade)
        raise ValueError(f"Unsupported grouping criterion: {criterion}")

    def _custom_field_values(self, trade: Trade, field_id: str) -> list[str]:
        value = trade.custom_stats.get(field_id)
        if value is None or value == "" or value == []:
            return [NOT_AVAILABLE]
        if isinstance(value, list):
            return _unique([str(v) for v in value])
        if isinstance(value, float):
            return [f"{value:g}"]
        return [str(value)]

    def _analysis_values(self, trade: Trade, category_id: str) -> list[str]:
        category = self._settings.find_analysis_category(category_id)
        if category is None:
            return [NOT_AVAILABLE]

        values = []
        for timeframe, selections in trade.analysis_selections.items():
            for sub_category in category.sub_categories:
                for option_id in selections.get(sub_category.id, []):
                    option = sub_category.find_option(option_id)
                    if option is not None:
                        values.append(f"{timeframe}: {option.value}")
        return _unique(values) or [NOT_AVAILABLE]

    def _alignment_values(self, trade: Trade) -> list[str]:
        bias = self._settings.find_sub_category("bias")
        if bias is None:
            return [NOT_AVAILABLE]

        values = []
        for timeframe, selections in trade.analysis_selections.items():
            chosen = selections.get("bias", [])
            option = bias.find_option(chosen[0]) if chosen else None
            if option is None:
                continue
            aligned = (trade.direction == Direction.BUY and option.value == "Bullish") or (
                trade.direction == Direction.SELL and option.value == "Bearish"
            )
            values.append(f"{timeframe}: {'Aligned' if aligned else 'Misaligned'}")
        return _unique(values) or [NOT_AVAILABLE]

    def group_by(self, trades: list[Trade], criterion: Criterion) -> dict[str, list[Trade]]:
        """Bucket closed trades by a criterion, in order of first appearance.

        Args:
            trades: Trades to bucket. Open and missed trades are left out.
            criterion: What to bucket by.

        Returns:
            Bucket label -> trades in chronological order.
        """
        groups: dict[str, list[Trade]] = defaultdict(list)
        for trade in closed_trades(trades):
            for value in self.criterion_values(trade, criterion):
                groups[value].append(trade)
        return dict(groups)

    def analyze(
        self, trades: list[Trade], criterion: Criterion, capital: float = 0.0
    ) -> dict[str, GroupMetrics]:
        """Calculate GroupMetrics for every bucket of a criterion."""
        return {
            label: self._metrics.calculate(group, capital)
            for label, group in self.group_by(trades, criterion).items()
        }

    def build_report(
        self,
        trades: list[Trade],
        criteria: list[Criterion],
        capital: float = 0.0,
    ) -> list[ReportRow]:
        """Build a nested report, one level per criterion.

        Args:
            trades: Trades to report on.
            criteria: Ordered criteria, outermost first.
            capital: Account capital used for gain percentages.

        Returns:
            Top-level rows, each holding the rows of the next criterion.
        """
        return self._build_rows(trades, criteria, capital, level=0, parent=[])

    def _build_rows(
        self,
        trades: list[Trade],
        criteria: list[Criterion],
        capital: float,
        level: int,
        parent: list[tuple[str, str]],
    ) -> list[ReportRow]:
        if not criteria:
            return []

        criterion, *remaining = criteria
        label_name = self.criterion_label(criterion)
        rows = []
        for label, group in self.group_by(trades, criterion).items():
            path = [*parent, (label_name, label)]
            rows.append(
                ReportRow(
                    key=f"{level}-" + "/".join(value for _, value in path),
                    label=label,
                    level=level,
                    criteria=path,
                    metrics=self._metrics.calculate(group, capital),
                    sub_rows=self._build_rows(group, remaining, capital, level + 1, path),
                )
            )
        return rows

    @staticmethod
    def to_frame(rows: list[ReportRow]) -> pd.DataFrame:
        """Flatten a nested report into a DataFrame, parents before children."""
        records = []

        def visit(row: ReportRow) -> None:
            record = {"key": row.key, "level": row.level, "label": row.label}
            record.update({name: value for name, value in row.criteria})
            record.update(asdict(row.metrics))
            records.append(record)
            for sub_row in row.sub_rows:
                visit(sub_row)

        for row in rows:
            visit(row)
        return pd.DataFrame.from_records(records)
