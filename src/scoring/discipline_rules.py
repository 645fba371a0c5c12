# src/scoring/discipline_rules.py
"""Ordered rule table for trade discipline scoring.

Each rule inspects a ScoringContext and returns zero or more
(penalty, remark) pairs. Rules are evaluated in table order and every
applicable rule applies, so remarks come out in a fixed order.
"""
import re
from dataclasses import dataclass
from typing import Callable

from src.config.settings import AppSettings, KeywordType, OptionCustomField
from src.config.thresholds import (
    PENALTY_DAILY_LOSS_LIMIT,
    PENALTY_DAILY_TARGET_REACHED,
    PENALTY_DAILY_TRADE_LIMIT,
    PENALTY_INCOMPLETE_CHECKLIST,
    PENALTY_INSTRUMENT_NOT_IN_PLAN,
    PENALTY_MISSING_CHECKLIST,
    PENALTY_MOST_NEGATIVE_CUSTOM_FIELD,
    PENALTY_MOST_NEGATIVE_TAG,
    PENALTY_NEGATIVE_CUSTOM_FIELD,
    PENALTY_NEGATIVE_TAG,
    PENALTY_NO_TRADE_ZONE,
    PENALTY_PROFIT_LEFT_ON_TABLE,
    PENALTY_RISK_EXCEEDED,
    PENALTY_RR_BELOW_MINIMUM,
    PENALTY_STOP_LOSS_NOT_HONORED,
    PENALTY_WEEKLY_LOSS_LIMIT,
    RISK_TOLERANCE,
    TIMEFRAME_POINTS,
    TIMEFRAME_POINTS_DEFAULT,
)
from src.journal.models import Direction, Journal, Outcome, Trade, TradeResult
from src.journal.trade_helpers import (
    in_any_window,
    timeframe_minutes,
    trading_day,
    trading_week,
)
from src.scoring.models import Impact


Finding = tuple[float, str]


@dataclass
class ScoringContext:
    """Everything a discipline rule may look at.

    Attributes:
        trade: The trade being scored.
        journal: Journal the trade belongs to (plan, strategies, other trades).
        settings: Active application settings.
        result: How the trade was closed.
        outcome: Win / Loss / Neutral from the net P/L.
        risk_amount: Account-currency amount at risk, 0 without a stop-loss.
        rr: Planned reward-to-risk ratio, 0 when undefined.
    """

    trade: Trade
    journal: Journal
    settings: AppSettings
    result: TradeResult
    outcome: Outcome
    risk_amount: float
    rr: float

    def earlier_trades(self) -> list[Trade]:
        """Other calculated trades of the journal opened before this one."""
        return [
            t
            for t in self.journal.logged_trades
            if t.id != self.trade.id
            and t.auto is not None
            and t.open_time < self.trade.open_time
        ]

    def same_day_trades(self) -> list[Trade]:
        timezone = self.journal.plan.timezone
        day = trading_day(self.trade, timezone)
        return [t for t in self.earlier_trades() if trading_day(t, timezone) == day]

    def same_week_trades(self) -> list[Trade]:
        timezone = self.journal.plan.timezone
        week = trading_week(self.trade, timezone)
        return [t for t in self.earlier_trades() if trading_week(t, timezone) == week]


@dataclass(frozen=True)
class DisciplineRule:
    """One entry in the discipline rule table."""

    rule_id: str
    description: str
    evaluate: Callable[[ScoringContext], list[Finding]]


def _tag_penalty(impact: Impact | None) -> float:
    if impact == Impact.MOST_NEGATIVE:
        return PENALTY_MOST_NEGATIVE_TAG
    if impact == Impact.NEGATIVE:
        return PENALTY_NEGATIVE_TAG
    return 0.0


def _risk_exceeded(ctx: ScoringContext) -> list[Finding]:
    capital = ctx.journal.capital
    max_risk = ctx.journal.plan.max_risk_amount(capital)
    if max_risk <= 0 or ctx.risk_amount <= max_risk * (1 + RISK_TOLERANCE):
        return []

    if capital > 0:
        actual = ctx.risk_amount / capital * 100
        planned = max_risk / capital * 100
        remark = f"Exceeded max risk: risked {actual:.2f}% vs planned {planned:.2f}%"
    else:
        remark = f"Exceeded max risk: risked {ctx.risk_amount:.2f} vs planned {max_risk:.2f}"
    return [(PENALTY_RISK_EXCEEDED, remark)]


def _rr_below_minimum(ctx: ScoringContext) -> list[Finding]:
    minimum = ctx.journal.plan.min_risk_to_reward
    if minimum <= 0 or ctx.rr <= 0 or ctx.rr >= minimum:
        return []
    return [
        (
            PENALTY_RR_BELOW_MINIMUM,
            f"R:R {ctx.rr:.2f} below plan minimum {minimum:.2f}",
        )
    ]


def _stop_loss_not_honored(ctx: ScoringContext) -> list[Finding]:
    if ctx.outcome == Outcome.LOSS and ctx.result != TradeResult.SL:
        return [(PENALTY_STOP_LOSS_NOT_HONORED, "Didn't honor stop loss")]
    return []


def _profit_left_on_table(ctx: ScoringContext) -> list[Finding]:
    if (
        ctx.outcome == Outcome.WIN
        and ctx.result != TradeResult.TP
        and ctx.trade.take_profit > 0
    ):
        return [(PENALTY_PROFIT_LEFT_ON_TABLE, "Left profit on the table")]
    return []


def _negative_sentiment(ctx: ScoringContext) -> list[Finding]:
    impacts = ctx.settings.keyword_impacts(KeywordType.SENTIMENT)
    findings = []
    for tag in ctx.trade.sentiments.all():
        penalty = _tag_penalty(impacts.get(tag.lower()))
        if penalty:
            findings.append((penalty, f"Negative sentiment: {tag}"))
    return findings


def _negative_note_keyword(ctx: ScoringContext) -> list[Finding]:
    text = f"{ctx.trade.notes} {ctx.trade.lessons_learned}".lower()
    if not text.strip():
        return []

    findings = []
    for keyword, impact in ctx.settings.keyword_impacts(KeywordType.KEYWORD).items():
        penalty = _tag_penalty(impact)
        if penalty and re.search(rf"\b{re.escape(keyword)}\b", text):
            findings.append((penalty, f"Negative keyword in notes: {keyword}"))
    return findings


def _checked_rules(ctx: ScoringContext) -> tuple[set[str], set[str]] | None:
    """Return (strategy rules, checked strategy rules), None without a strategy."""
    if not ctx.trade.strategy:
        return None
    strategy = ctx.journal.find_strategy(ctx.trade.strategy)
    selected = set(ctx.trade.selected_rule_ids)
    if strategy is None or not strategy.rule_ids:
        return set(), selected
    return strategy.rule_ids, selected & strategy.rule_ids


def _missing_rule_checklist(ctx: ScoringContext) -> list[Finding]:
    checklist = _checked_rules(ctx)
    if checklist is None or checklist[1]:
        return []
    return [
        (
            PENALTY_MISSING_CHECKLIST,
            f"No rules checked for strategy {ctx.trade.strategy}",
        )
    ]


def _incomplete_rule_checklist(ctx: ScoringContext) -> list[Finding]:
    checklist = _checked_rules(ctx)
    if checklist is None:
        return []
    required, checked = checklist
    if not checked or checked >= required:
        return []
    missed = len(required - checked)
    return [
        (
            PENALTY_INCOMPLETE_CHECKLIST,
            f"Missed {missed} of {len(required)} strategy rules",
        )
    ]


def _instrument_not_in_plan(ctx: ScoringContext) -> list[Finding]:
    instruments = ctx.journal.plan.instruments
    if not instruments or ctx.trade.pair in instruments:
        return []
    return [(PENALTY_INSTRUMENT_NOT_IN_PLAN, f"Pair not in plan: {ctx.trade.pair}")]


def _no_trade_zone(ctx: ScoringContext) -> list[Finding]:
    plan = ctx.journal.plan
    if in_any_window(ctx.trade.open_time, plan.no_trade_zones, plan.timezone):
        return [(PENALTY_NO_TRADE_ZONE, "Traded in no-trade zone")]
    return []


def timeframe_points(timeframe: str) -> float:
    """Weight of an analysis selection made on a timeframe."""
    minutes = timeframe_minutes(timeframe)
    for max_minutes, points in TIMEFRAME_POINTS:
        if minutes <= max_minutes:
            return points
    return TIMEFRAME_POINTS_DEFAULT


def _analysis_conflict(ctx: ScoringContext) -> list[Finding]:
    is_buy = ctx.trade.direction == Direction.BUY
    findings = []
    for timeframe, selections in ctx.trade.analysis_selections.items():
        points = timeframe_points(timeframe)
        for sub_category_id, option_ids in selections.items():
            sub_category = ctx.settings.find_sub_category(sub_category_id)
            if sub_category is None:
                continue
            for option_id in option_ids:
                option = sub_category.find_option(option_id)
                if option is None:
                    continue

                value = option.value
                if sub_category.id == "bias":
                    against = (is_buy and value == "Bearish") or (
                        not is_buy and value == "Bullish"
                    )
                    if against:
                        findings.append(
                            (points, f"Traded against {timeframe} {value} bias")
                        )
                elif sub_category.id == "volatility":
                    if value == "Low":
                        findings.append(
                            (points, f"Traded in low volatility on {timeframe}")
                        )
                elif sub_category.id == "zone":
                    opposing = (is_buy and value == "Premium") or (
                        not is_buy and value == "Discount"
                    )
                    if opposing:
                        findings.append(
                            (points, f"Traded from opposing {value} zone on {timeframe}")
                        )
    return findings


def _custom_field_impact(ctx: ScoringContext) -> list[Finding]:
    findings = []
    for field_id, raw in ctx.trade.custom_stats.items():
        definition = ctx.settings.find_custom_field(field_id)
        if not isinstance(definition, OptionCustomField):
            continue
        values = raw if isinstance(raw, list) else [raw]
        for value in values:
            option = next((o for o in definition.options if o.value == value), None)
            if option is None:
                continue
            if option.impact == Impact.MOST_NEGATIVE:
                penalty = PENALTY_MOST_NEGATIVE_CUSTOM_FIELD
            elif option.impact == Impact.NEGATIVE:
                penalty = PENALTY_NEGATIVE_CUSTOM_FIELD
            else:
                continue
            findings.append((penalty, f"{definition.title}: {value}"))
    return findings


def _daily_trade_limit(ctx: ScoringContext) -> list[Finding]:
    limit = ctx.journal.plan.max_trades_per_day
    if limit <= 0 or len(ctx.same_day_trades()) < limit:
        return []
    return [(PENALTY_DAILY_TRADE_LIMIT, "Exceeded daily trade limit")]


def _daily_loss_limit(ctx: ScoringContext) -> list[Finding]:
    limit_percent = ctx.journal.plan.daily_loss_limit
    if limit_percent <= 0:
        return []
    day_pl = sum(t.auto.pl for t in ctx.same_day_trades())
    if day_pl >= 0 or -day_pl < ctx.journal.capital * limit_percent / 100:
        return []
    return [(PENALTY_DAILY_LOSS_LIMIT, "Traded after hitting daily loss limit")]


def _daily_target_reached(ctx: ScoringContext) -> list[Finding]:
    plan = ctx.journal.plan
    if plan.daily_target <= 0:
        return []
    day_pl = sum(t.auto.pl for t in ctx.same_day_trades())
    if day_pl <= 0 or day_pl < plan.daily_target_amount(ctx.journal.capital):
        return []
    return [(PENALTY_DAILY_TARGET_REACHED, "Traded after hitting daily target")]


def _weekly_loss_limit(ctx: ScoringContext) -> list[Finding]:
    limit_percent = ctx.journal.plan.weekly_loss_limit
    if limit_percent <= 0:
        return []
    week_pl = sum(t.auto.pl for t in ctx.same_week_trades())
    if week_pl >= 0 or -week_pl < ctx.journal.capital * limit_percent / 100:
        return []
    return [(PENALTY_WEEKLY_LOSS_LIMIT, "Traded after hitting weekly loss limit")]


DISCIPLINE_RULES: tuple[DisciplineRule, ...] = (
    DisciplineRule(
        "risk_exceeded",
        "Risk taken is more than 10% above the planned risk per trade",
        _risk_exceeded,
    ),
    DisciplineRule(
        "rr_below_minimum",
        "Planned reward-to-risk is below the plan minimum",
        _rr_below_minimum,
    ),
    DisciplineRule(
        "stop_loss_not_honored",
        "Losing trade not closed at its stop-loss",
        _stop_loss_not_honored,
    ),
    DisciplineRule(
        "profit_left_on_table",
        "Winning trade not closed at its take-profit",
        _profit_left_on_table,
    ),
    DisciplineRule(
        "negative_sentiment",
        "Negative sentiment tags logged on the trade",
        _negative_sentiment,
    ),
    DisciplineRule(
        "negative_note_keyword",
        "Negative keywords found in the trade notes",
        _negative_note_keyword,
    ),
    DisciplineRule(
        "missing_rule_checklist",
        "Strategy assigned but none of its rules checked",
        _missing_rule_checklist,
    ),
    DisciplineRule(
        "incomplete_rule_checklist",
        "Only some of the strategy's rules checked",
        _incomplete_rule_checklist,
    ),
    DisciplineRule(
        "instrument_not_in_plan",
        "Pair is not one of the plan's instruments",
        _instrument_not_in_plan,
    ),
    DisciplineRule(
        "no_trade_zone",
        "Trade opened inside a plan no-trade zone",
        _no_trade_zone,
    ),
    DisciplineRule(
        "analysis_conflict",
        "Analysis selections contradict the trade direction",
        _analysis_conflict,
    ),
    DisciplineRule(
        "custom_field_impact",
        "Custom field options with a negative impact",
        _custom_field_impact,
    ),
    DisciplineRule(
        "daily_trade_limit",
        "Maximum trades per day already reached",
        _daily_trade_limit,
    ),
    DisciplineRule(
        "daily_loss_limit",
        "Daily loss limit already reached",
        _daily_loss_limit,
    ),
    DisciplineRule(
        "daily_target_reached",
        "Daily profit target already reached",
        _daily_target_reached,
    ),
    DisciplineRule(
        "weekly_loss_limit",
        "Weekly loss limit already reached",
        _weekly_loss_limit,
    ),
)
