# src/gamification/milestones.py
"""Achievement, badge and quest tables.

Every entry pairs a display name with a predicate over the full
TradeHistory. Entries are evaluated independently and in table order.
"""
from datetime import timedelta

from src.config.settings import KeywordType
from src.config.thresholds import (
    BASE_SCORE,
    DAY_TRADE_MAX_MINUTES,
    LONG_TERM_MIN_MINUTES,
    MONEY_MAKER_PL,
    NO_VIOLATION_SCORE,
    PERCENT_MASTER_GAIN,
    PIPS_KING_PIPS,
    PROFIT_CREATOR_PL,
    SCALP_MAX_MINUTES,
    SWING_MIN_MINUTES,
    ZERO_VIOLATION_QUEST_SCORE,
)
from src.gamification.history import TradeHistory, longest_run, open_date
from src.gamification.models import Milestone
from src.journal.models import BreakevenType, Direction, Outcome, Trade, TradeResult
from src.journal.trade_helpers import market_clock


def _is_win(trade: Trade) -> bool:
    return trade.computed.outcome == Outcome.WIN


def _is_loss(trade: Trade) -> bool:
    return trade.computed.outcome == Outcome.LOSS


def _is_clean(trade: Trade) -> bool:
    return trade.computed.score.value > NO_VIOLATION_SCORE


def _in_session(name: str):
    return lambda trade: name in trade.computed.session


def _rule_ids(trade: Trade) -> set[str]:
    return {v.rule_id for v in trade.computed.score.violations}


def _all_phases_logged(trade: Trade) -> bool:
    sentiments = trade.sentiments
    return bool(sentiments.before and sentiments.during and sentiments.after)


def _trade_count_milestone(count: int) -> Milestone:
    return Milestone(
        name=f"{count} Trades Logged",
        category="Trade Count Milestones",
        description=f"Log a total of {count} trades.",
        predicate=lambda h: len(h.trades) >= count,
    )


# Discipline helpers


def _clean_completed_week(h: TradeHistory) -> bool:
    return any(
        all(t.computed.score.is_clean for t in trades)
        for trades in h.completed_weeks().values()
    )


def _clean_completed_month(h: TradeHistory) -> bool:
    return any(
        all(t.computed.score.is_clean for t in trades)
        for trades in h.completed_months().values()
    )


def _planned_pairs_week(h: TradeHistory) -> bool:
    instruments = h.journal.plan.instruments
    if not instruments:
        return False
    return any(
        all(t.pair in instruments for t in trades)
        for trades in h.completed_weeks().values()
    )


def _strategy_fully_checked(h: TradeHistory, trade: Trade) -> bool:
    if not trade.entry_reasons:
        return False
    strategy = h.journal.find_strategy(trade.strategy)
    if strategy is None or not strategy.rule_ids:
        return False
    return strategy.rule_ids <= set(trade.selected_rule_ids)


# Performance helpers


def _profitable_period(groups: dict[tuple[int, int], list[Trade]]) -> bool:
    return any(sum(t.computed.pl for t in trades) > 0 for trades in groups.values())


def _month_gain(h: TradeHistory, percent: float) -> bool:
    start = h.journal.starting_balance
    if start <= 0:
        return False
    return any(
        sum(t.computed.pl for t in trades) / start * 100 >= percent
        for trades in h.by_month(h.closed).values()
    )


def _account_up(percent: float):
    def predicate(h: TradeHistory) -> bool:
        start = h.journal.starting_balance
        return start > 0 and h.peak_balance() >= start * (1 + percent / 100)

    return predicate


def _profitable_month_streak(h: TradeHistory, months: int) -> bool:
    monthly = h.by_month(h.closed)
    profitable = sorted(key for key, trades in monthly.items() if sum(t.computed.pl for t in trades) > 0)
    best = current = 0
    previous = None
    for year, month in profitable:
        index = year * 12 + month
        current = current + 1 if previous is not None and index == previous + 1 else 1
        best = max(best, current)
        previous = index
    return best >= months


def _comeback_month(h: TradeHistory) -> bool:
    return any(
        sum(t.computed.pl for t in trades) > 0 and longest_run(trades, _is_loss) >= 3
        for trades in h.by_month(h.closed).values()
    )


# Frequency helpers


def _day_with_trades(h: TradeHistory, count: int) -> bool:
    return any(len(trades) >= count for trades in h.by_day().values())


def _full_month_daily(h: TradeHistory) -> bool:
    traded = set(h.by_day())
    return any(
        h.weekdays_of_month(year, month) <= traded for year, month in h.completed_months()
    )


def _full_week_daily(h: TradeHistory) -> bool:
    traded = set(h.by_day())
    return any(
        h.weekdays_of_week(year, week) <= traded for year, week in h.completed_weeks()
    )


def _new_pair_traded(h: TradeHistory) -> bool:
    return len({t.pair for t in h.trades}) >= 2


# Emotional helpers


def _cold_blooded(trade: Trade) -> bool:
    calm = {"calm", "focused"}
    sentiments = trade.sentiments
    return all(
        any(tag.lower() in calm for tag in phase)
        for phase in (sentiments.before, sentiments.during, sentiments.after)
    )


def _negative_but_disciplined(h: TradeHistory):
    impacts = h.settings.keyword_impacts(KeywordType.SENTIMENT)

    def predicate(trade: Trade) -> bool:
        has_negative = any(
            impacts.get(tag.lower()) is not None and impacts[tag.lower()].is_negative
            for tag in trade.sentiments.all()
        )
        return has_negative and _rule_ids(trade) <= {"negative_sentiment"}

    return predicate


def _revenge_trades(h: TradeHistory) -> list[tuple[Trade, Trade]]:
    """(losing trade, next trade) pairs, closed trades in order."""
    return [
        (previous, current)
        for previous, current in zip(h.closed, h.closed[1:])
        if _is_loss(previous)
    ]


def _took_revenge_trade(h: TradeHistory) -> bool:
    return any(
        current.open_time - previous.close_time < timedelta(hours=1)
        and not current.computed.score.is_clean
        for previous, current in _revenge_trades(h)
    )


def _avoided_revenge_trade(h: TradeHistory) -> bool:
    return any(
        current.open_time - previous.close_time >= timedelta(hours=1)
        for previous, current in _revenge_trades(h)
    )


def _comebacker(h: TradeHistory) -> bool:
    losses = 0
    for trade in h.closed:
        if _is_win(trade) and losses >= 3:
            return True
        losses = losses + 1 if _is_loss(trade) else 0
    return False


def _session_week(h: TradeHistory) -> bool:
    sessions = ("London", "New York", "Asian")
    return any(
        all(any(name in t.computed.session for t in trades) for name in sessions)
        for trades in h.by_week().values()
    )


def _all_rounder(h: TradeHistory) -> bool:
    return any(
        len({t.pair for t in trades if _is_win(t)}) >= 5
        for trades in h.by_month(h.closed).values()
    )


def _strategy_named(word: str):
    return lambda trade: _is_win(trade) and word in (trade.strategy or "").lower()


def _profitable_strategies(h: TradeHistory) -> int:
    pl_by_strategy: dict[str, float] = {}
    for trade in h.closed:
        if trade.strategy:
            pl_by_strategy[trade.strategy] = pl_by_strategy.get(trade.strategy, 0.0) + trade.computed.pl
    return sum(1 for pl in pl_by_strategy.values() if pl > 0)


def _perfect_month(h: TradeHistory) -> bool:
    return any(
        all(t.computed.score.value >= BASE_SCORE for t in trades)
        for trades in h.completed_months().values()
    )


def _mindful(h: TradeHistory):
    impacts = h.settings.keyword_impacts(KeywordType.SENTIMENT)

    def predicate(trade: Trade) -> bool:
        tags = trade.sentiments.all()
        return (
            trade.computed.score.value >= 95
            and bool(tags)
            and all(
                impacts.get(tag.lower()) is not None and impacts[tag.lower()].is_positive
                for tag in tags
            )
        )

    return predicate


def _last_losses(h: TradeHistory, count: int) -> list[Trade]:
    return [t for t in h.closed if _is_loss(t)][-count:]


def _new_timeframe_trades(h: TradeHistory) -> int:
    seen: set[str] = set()
    count = 0
    for trade in h.trades:
        timeframes = set(trade.analysis_selections)
        if seen and timeframes - seen:
            count += 1
        seen |= timeframes
    return count


def _paired_off(h: TradeHistory) -> bool:
    if not h.trades:
        return False
    first_pair = h.trades[0].pair
    counts: dict[str, int] = {}
    for trade in h.trades:
        if trade.pair != first_pair:
            counts[trade.pair] = counts.get(trade.pair, 0) + 1
    return any(count >= 5 for count in counts.values())


def _full_month_challenge(h: TradeHistory) -> bool:
    weekly = h.by_week()
    for year, month in h.completed_months():
        weeks = {
            day.isocalendar()[:2] for day in h.weekdays_of_month(year, month)
        }
        if all(len(weekly.get(week, [])) >= 10 for week in weeks):
            return True
    return False


def _over_trading_stopper(h: TradeHistory) -> bool:
    limit = h.journal.plan.max_trades_per_day
    if limit <= 0:
        return False
    return any(
        all(len(day_trades) <= limit for day_trades in h.by_day(trades).values())
        for trades in h.completed_weeks().values()
    )


TRADE_COUNTS = (10, 25, 50, 100, 250, 500, 1000, 2500, 5000)

ACHIEVEMENTS: tuple[Milestone, ...] = (
    Milestone(
        "First Trade Logged",
        "Trade Count Milestones",
        "Log your very first trade.",
        lambda h: len(h.trades) >= 1,
    ),
    *(_trade_count_milestone(count) for count in TRADE_COUNTS),
    Milestone(
        "First Perfect Trade",
        "Discipline & Plan Adherence",
        "Achieve a 100 Discipline Score on a trade.",
        lambda h: h.any(lambda t: t.computed.score.value >= BASE_SCORE),
    ),
    Milestone(
        "10 Perfect Trades",
        "Discipline & Plan Adherence",
        "Achieve a 100 Discipline Score on 10 different trades.",
        lambda h: h.count(lambda t: t.computed.score.value >= BASE_SCORE) >= 10,
    ),
    Milestone(
        "First Week of Zero Plan Violations",
        "Discipline & Plan Adherence",
        "Complete a full week with no rule violations.",
        _clean_completed_week,
    ),
    Milestone(
        "First Month of Zero Plan Violations",
        "Discipline & Plan Adherence",
        "Complete a full month with no rule violations.",
        _clean_completed_month,
    ),
    Milestone(
        "10 Consecutive Trades with No Plan Violations",
        "Discipline & Plan Adherence",
        "Log 10 trades in a row without breaking any rules.",
        lambda h: h.run(_is_clean) >= 10,
    ),
    Milestone(
        "25 Consecutive Trades with No Plan Violations",
        "Discipline & Plan Adherence",
        "Log 25 trades in a row without breaking any rules.",
        lambda h: h.run(_is_clean) >= 25,
    ),
    Milestone(
        "First Trade with No Partial Closes",
        "Discipline & Plan Adherence",
        "Complete a trade without taking partial profits.",
        lambda h: h.any(lambda t: not t.partials),
    ),
    Milestone(
        "First Trade with No SL Management Adjustments",
        "Discipline & Plan Adherence",
        "Let a trade play out without moving your Stop Loss.",
        lambda h: h.any(lambda t: t.stop_loss > 0 and t.breakeven == BreakevenType.NONE),
    ),
    Milestone(
        "First Week of Trading Only Planned Pairs",
        "Discipline & Plan Adherence",
        "Trade only the pairs defined in your plan for a week.",
        _planned_pairs_week,
    ),
    Milestone(
        "First Trade with All Inputs Completed",
        "Discipline & Plan Adherence",
        "Fill out every single field for one trade log.",
        lambda h: h.any(h.is_fully_logged, closed_only=False),
    ),
    Milestone(
        "First Winning Trade",
        "Performance Milestones",
        "Log your first profitable trade.",
        lambda h: len(h.wins) >= 1,
    ),
    Milestone(
        "10 Winning Trades",
        "Performance Milestones",
        "Achieve 10 profitable trades.",
        lambda h: len(h.wins) >= 10,
    ),
    Milestone(
        "5 Consecutive Winning Trades",
        "Performance Milestones",
        "Win 5 trades in a row.",
        lambda h: h.run(_is_win) >= 5,
    ),
    Milestone(
        "10 Consecutive Winning Trades",
        "Performance Milestones",
        "Win 10 trades in a row.",
        lambda h: h.run(_is_win) >= 10,
    ),
    Milestone(
        "First Trade with an R:R of 3:1",
        "Performance Milestones",
        "Win a trade with a risk-to-reward ratio of 3:1 or greater.",
        lambda h: h.any(lambda t: _is_win(t) and t.computed.rr >= 3),
    ),
    Milestone(
        "First Trade with an R:R of 5:1",
        "Performance Milestones",
        "Win a trade with a risk-to-reward ratio of 5:1 or greater.",
        lambda h: h.any(lambda t: _is_win(t) and t.computed.rr >= 5),
    ),
    Milestone(
        "First Trade with an R:R of 10:1",
        "Performance Milestones",
        "Win a trade with a risk-to-reward ratio of 10:1 or greater.",
        lambda h: h.any(lambda t: _is_win(t) and t.computed.rr >= 10),
    ),
    Milestone(
        "First Profitable Week",
        "Performance Milestones",
        "End a trading week with a positive P/L.",
        lambda h: _profitable_period(h.by_week(h.closed)),
    ),
    Milestone(
        "First Profitable Month",
        "Performance Milestones",
        "End a trading month with a positive P/L.",
        lambda h: _profitable_period(h.by_month(h.closed)),
    ),
    Milestone(
        "First Month with 10%+ Gain",
        "Performance Milestones",
        "Achieve a 10% or greater gain in a single month.",
        lambda h: _month_gain(h, 10.0),
    ),
    Milestone(
        "First Time Account is up 5%",
        "Performance Milestones",
        "Grow your account balance by 5%.",
        _account_up(5.0),
    ),
    Milestone(
        "First Time Account is up 10%",
        "Performance Milestones",
        "Grow your account balance by 10%.",
        _account_up(10.0),
    ),
    Milestone(
        "First Trade from a Discount Zone",
        "Strategic & Analytical Milestones",
        "Enter a trade from a confirmed discount zone.",
        lambda h: h.any(lambda t: "Discount" in h.zones(t), closed_only=False),
    ),
    Milestone(
        "First Trade from a Premium Zone",
        "Strategic & Analytical Milestones",
        "Enter a trade from a confirmed premium zone.",
        lambda h: h.any(lambda t: "Premium" in h.zones(t), closed_only=False),
    ),
    Milestone(
        "First Trade with All Confirmation Reasons Filled",
        "Strategic & Analytical Milestones",
        "Detail all your entry reasons for a trade.",
        lambda h: h.any(lambda t: _strategy_fully_checked(h, t), closed_only=False),
    ),
    Milestone(
        "First Trade in the London Session",
        "Strategic & Analytical Milestones",
        "Log your first trade during London market hours.",
        lambda h: h.any(_in_session("London"), closed_only=False),
    ),
    Milestone(
        "First Trade in the New York Session",
        "Strategic & Analytical Milestones",
        "Log your first trade during New York market hours.",
        lambda h: h.any(_in_session("New York"), closed_only=False),
    ),
    Milestone(
        "First Trade in the Asia Session",
        "Strategic & Analytical Milestones",
        "Log your first trade during Asian market hours.",
        lambda h: h.any(_in_session("Asian"), closed_only=False),
    ),
    Milestone(
        "First Trade with a News Event Logged",
        "Strategic & Analytical Milestones",
        "Log a trade taken during a major news event.",
        lambda h: h.any(lambda t: bool(t.news_events), closed_only=False),
    ),
    Milestone(
        "First Time Logging Sentiments",
        "Strategic & Analytical Milestones",
        "Log your Before, During, and After sentiments for a trade.",
        lambda h: h.any(_all_phases_logged, closed_only=False),
    ),
    Milestone(
        "First Trade under 15 minutes (Scalper)",
        "Duration & Frequency Milestones",
        "Complete a trade in under 15 minutes.",
        lambda h: h.any(lambda t: t.computed.duration_minutes < SCALP_MAX_MINUTES),
    ),
    Milestone(
        "First Trade over 24 hours (Swing Trader)",
        "Duration & Frequency Milestones",
        "Hold a trade for more than 24 hours.",
        lambda h: h.any(lambda t: t.computed.duration_minutes > SWING_MIN_MINUTES),
    ),
    Milestone(
        "First Day with 5 Trades Logged",
        "Duration & Frequency Milestones",
        "Log 5 trades in a single day.",
        lambda h: _day_with_trades(h, 5),
    ),
    Milestone(
        "First Full Month with Daily Trading",
        "Duration & Frequency Milestones",
        "Log at least one trade every day for a full month.",
        _full_month_daily,
    ),
    Milestone(
        "First Time Logging a Long Position",
        "Duration & Frequency Milestones",
        "Log your first 'Buy' trade.",
        lambda h: h.any(lambda t: t.direction == Direction.BUY, closed_only=False),
    ),
    Milestone(
        "First Time Logging a Short Position",
        "Duration & Frequency Milestones",
        "Log your first 'Sell' trade.",
        lambda h: h.any(lambda t: t.direction == Direction.SELL, closed_only=False),
    ),
    Milestone(
        "First Time Trading a New Pair",
        "Duration & Frequency Milestones",
        "Log a trade on a currency pair you've never traded before.",
        _new_pair_traded,
    ),
)


BADGES: tuple[Milestone, ...] = (
    Milestone(
        "The Planner",
        "General Trading Expertise",
        "For completing a trading plan for the first time.",
        lambda h: bool(h.journal.plan.instruments),
    ),
    Milestone(
        "The Journaler",
        "General Trading Expertise",
        "For logging 100 total trades.",
        lambda h: len(h.trades) >= 100,
    ),
    Milestone(
        "The Analyzer",
        "General Trading Expertise",
        "For completing every input field on a trade log for the first time.",
        lambda h: h.any(h.is_fully_logged, closed_only=False),
    ),
    Milestone(
        "The Strategist",
        "General Trading Expertise",
        "For having 5 profitable strategies logged.",
        lambda h: _profitable_strategies(h) >= 5,
    ),
    Milestone(
        "The Disciplinarian",
        "General Trading Expertise",
        "For a month with a perfect average discipline score.",
        _perfect_month,
    ),
    Milestone(
        "Sniper",
        "Performance-Based Badges",
        "For a trade with an R:R > 10.",
        lambda h: h.any(lambda t: t.computed.rr >= 10),
    ),
    Milestone(
        "The Streak",
        "Performance-Based Badges",
        "For 5 consecutive winning trades.",
        lambda h: h.run(_is_win) >= 5,
    ),
    Milestone(
        "The Money Maker",
        "Performance-Based Badges",
        "For a single trade with a profit of $1,000+.",
        lambda h: h.any(lambda t: t.computed.pl >= MONEY_MAKER_PL),
    ),
    Milestone(
        "The Consistent",
        "Performance-Based Badges",
        "For 3 consecutive profitable months.",
        lambda h: _profitable_month_streak(h, 3),
    ),
    Milestone(
        "The Comeback Kid",
        "Performance-Based Badges",
        "For turning a losing streak into a profitable month.",
        _comeback_month,
    ),
    Milestone(
        "Trend Follower",
        "Strategy & Technical Analysis Badges",
        "For 10 consecutive winning trades where direction matched higher timeframe bias.",
        lambda h: h.run(lambda t: _is_win(t) and h.is_bias_aligned(t)) >= 10,
    ),
    Milestone(
        "The Scalper",
        "Strategy & Technical Analysis Badges",
        "For logging 50 trades with duration < 15 minutes.",
        lambda h: h.count(lambda t: t.computed.duration_minutes < SCALP_MAX_MINUTES) >= 50,
    ),
    Milestone(
        "The Swing Trader",
        "Strategy & Technical Analysis Badges",
        "For logging 10 trades with duration > 24 hours.",
        lambda h: h.count(lambda t: t.computed.duration_minutes > SWING_MIN_MINUTES) >= 10,
    ),
    Milestone(
        "The Breakout King",
        "Strategy & Technical Analysis Badges",
        "For 10 winning trades based on a breakout strategy.",
        lambda h: h.count(_strategy_named("breakout")) >= 10,
    ),
    Milestone(
        "The Pullback Pro",
        "Strategy & Technical Analysis Badges",
        "For 10 winning trades based on a pullback strategy.",
        lambda h: h.count(_strategy_named("pullback")) >= 10,
    ),
    Milestone(
        "The Zone Trader",
        "Strategy & Technical Analysis Badges",
        "For 10 winning trades from a Discount or Premium zone.",
        lambda h: h.count(lambda t: _is_win(t) and h.is_zone_aligned(t)) >= 10,
    ),
    Milestone(
        "The News Caster",
        "Strategy & Technical Analysis Badges",
        "For correctly trading around a major news event.",
        lambda h: h.any(lambda t: _is_win(t) and t.computed.news_impact == "High"),
    ),
    Milestone(
        "Risk Manager",
        "Risk Management Badges",
        "For 50 trades with risk % within the plan's limit.",
        lambda h: h.count(h.risk_within_plan, closed_only=False) >= 50,
    ),
    Milestone(
        "The Break Even Master",
        "Risk Management Badges",
        "For 10 trades where SL management was used successfully to move SL to break-even.",
        lambda h: h.count(
            lambda t: t.breakeven != BreakevenType.NONE
            and t.computed.outcome != Outcome.LOSS
        )
        >= 10,
    ),
    Milestone(
        "The Protector",
        "Risk Management Badges",
        "For 100 trades where a stop loss was always used and respected.",
        lambda h: h.count(
            lambda t: t.stop_loss > 0 and "stop_loss_not_honored" not in _rule_ids(t)
        )
        >= 100,
    ),
    Milestone(
        "The Partial Close King",
        "Risk Management Badges",
        "For successfully using partial closes to lock in profits 10 times.",
        lambda h: h.count(lambda t: bool(t.partials) and _is_win(t)) >= 10,
    ),
    Milestone(
        "The Safe Trader",
        "Risk Management Badges",
        "For 50 consecutive trades where the max risk per trade was below 1%.",
        lambda h: h.run(lambda t: t.computed.risk_percent < 1) >= 50,
    ),
    Milestone(
        "London Session Specialist",
        "Market & Session Badges",
        "For 25 profitable trades during the London Session.",
        lambda h: h.count(lambda t: _is_win(t) and "London" in t.computed.session) >= 25,
    ),
    Milestone(
        "New York Session Specialist",
        "Market & Session Badges",
        "For 25 profitable trades during the New York Session.",
        lambda h: h.count(lambda t: _is_win(t) and "New York" in t.computed.session) >= 25,
    ),
    Milestone(
        "Asia Session Specialist",
        "Market & Session Badges",
        "For 25 profitable trades during the Asia Session.",
        lambda h: h.count(lambda t: _is_win(t) and "Asian" in t.computed.session) >= 25,
    ),
    Milestone(
        "The EUR/USD Expert",
        "Market & Session Badges",
        "For 50 profitable trades on the EUR/USD pair.",
        lambda h: h.count(lambda t: _is_win(t) and t.pair == "EURUSD") >= 50,
    ),
    Milestone(
        "The Gold Miner",
        "Market & Session Badges",
        "For 25 profitable trades on XAU/USD.",
        lambda h: h.count(lambda t: _is_win(t) and t.pair == "XAUUSD") >= 25,
    ),
    Milestone(
        "The Crypto King",
        "Market & Session Badges",
        "For 10 profitable trades on BTC/USD.",
        lambda h: h.count(lambda t: _is_win(t) and t.pair == "BTCUSD") >= 10,
    ),
    Milestone(
        "The Session Hunter",
        "Market & Session Badges",
        "For taking trades in all 3 major sessions in a single week.",
        _session_week,
    ),
    Milestone(
        "The Cold-Blooded",
        "Emotional & Psychological Badges",
        "For logging a trade with sentiments of 'calm' or 'focused' before, during, and after.",
        lambda h: h.any(_cold_blooded, closed_only=False),
    ),
    Milestone(
        "The Emotional Master",
        "Emotional & Psychological Badges",
        "For identifying a negative emotion but still adhering to the plan.",
        lambda h: h.any(_negative_but_disciplined(h)),
    ),
    Milestone(
        "The Revenger",
        "Emotional & Psychological Badges",
        "For taking a revenge trade and immediately logging it as a plan violation.",
        _took_revenge_trade,
    ),
    Milestone(
        "The Comebacker",
        "Emotional & Psychological Badges",
        "For logging a profitable trade immediately after a losing streak of 3 or more.",
        _comebacker,
    ),
    Milestone(
        "The Early Bird",
        "Miscellaneous Badges",
        "For logging a trade before 6 AM.",
        lambda h: h.any(lambda t: market_clock(t.open_time).hour < 6, closed_only=False),
    ),
    Milestone(
        "The Night Owl",
        "Miscellaneous Badges",
        "For logging a trade after 10 PM.",
        lambda h: h.any(lambda t: market_clock(t.open_time).hour >= 22, closed_only=False),
    ),
    Milestone(
        "The Weekend Warrior",
        "Miscellaneous Badges",
        "For a profitable trade logged on a weekend.",
        lambda h: h.any(lambda t: _is_win(t) and open_date(t).weekday() >= 5),
    ),
    Milestone(
        "The Multi-Tasker",
        "Miscellaneous Badges",
        "For a week with trades in all three major sessions.",
        _session_week,
    ),
    Milestone(
        "The All-Rounder",
        "Miscellaneous Badges",
        "For successfully trading 5 different pairs in a single month.",
        _all_rounder,
    ),
    Milestone(
        "The Long-Term Investor",
        "Miscellaneous Badges",
        "For a trade duration of over one month.",
        lambda h: h.any(lambda t: t.computed.duration_minutes > LONG_TERM_MIN_MINUTES),
    ),
    Milestone(
        "The Pips King",
        "Miscellaneous Badges",
        "For a single trade that earned over 200 pips.",
        lambda h: h.any(lambda t: t.computed.pips > PIPS_KING_PIPS),
    ),
    Milestone(
        "The Percent Master",
        "Miscellaneous Badges",
        "For a single trade that earned over 10% gain.",
        lambda h: h.any(lambda t: t.computed.gain_percent > PERCENT_MASTER_GAIN),
    ),
    Milestone(
        "The Daily Grind",
        "Miscellaneous Badges",
        "For logging a trade every day for 10 consecutive trading days.",
        lambda h: h.longest_weekday_run() >= 10,
    ),
    Milestone(
        "The Profit Creator",
        "Miscellaneous Badges",
        "For a total profit of $10,000 across all trades.",
        lambda h: h.total_pl >= PROFIT_CREATOR_PL,
    ),
)


QUESTS: tuple[Milestone, ...] = (
    Milestone(
        "The Safe Trader",
        "Discipline & Risk Management Quests",
        "Complete 5 consecutive trades with a risk percent below your planned maximum.",
        lambda h: len(h.closed) >= 5 and all(h.risk_within_plan(t) for t in h.closed[-5:]),
    ),
    Milestone(
        "The Zero-Violation Challenge",
        "Discipline & Risk Management Quests",
        "Log 10 trades without a single plan violation.",
        lambda h: len(h.closed) >= 10
        and all(t.computed.score.value >= ZERO_VIOLATION_QUEST_SCORE for t in h.closed[-10:]),
    ),
    Milestone(
        "The SL Protector",
        "Discipline & Risk Management Quests",
        "For your next 3 losing trades, ensure your stop-loss was used and not moved.",
        lambda h: len(_last_losses(h, 3)) == 3
        and all(t.computed.result == TradeResult.SL for t in _last_losses(h, 3)),
    ),
    Milestone(
        "The Break-Even Challenge",
        "Discipline & Risk Management Quests",
        "Successfully move your SL to break-even on 5 winning trades.",
        lambda h: h.count(lambda t: _is_win(t) and t.breakeven != BreakevenType.NONE) >= 5,
    ),
    Milestone(
        "The Mindful Trader",
        "Discipline & Risk Management Quests",
        "Log 5 trades with a discipline score of 95+ and positive sentiments.",
        lambda h: h.count(_mindful(h)) >= 5,
    ),
    Milestone(
        "The Discount Zone Challenge",
        "Strategy & Technical Quests",
        "Find and log 3 winning trades originating from a discount zone.",
        lambda h: h.count(lambda t: _is_win(t) and "Discount" in h.zones(t)) >= 3,
    ),
    Milestone(
        "The 3:1 R:R Quest",
        "Strategy & Technical Quests",
        "Achieve a trade with an R:R of at least 3:1.",
        lambda h: h.any(lambda t: t.computed.rr >= 3),
    ),
    Milestone(
        "The New Strategy Builder",
        "Strategy & Technical Quests",
        "Log 10 trades using a new strategy and analyze its performance.",
        lambda h: any(
            sum(1 for t in h.trades if t.strategy == s.name) >= 10
            for s in h.journal.strategies
        ),
    ),
    Milestone(
        "The Timeframe Explorer",
        "Strategy & Technical Quests",
        "Log 5 trades using a confirmation timeframe you haven't used before.",
        lambda h: _new_timeframe_trades(h) >= 5,
    ),
    Milestone(
        "The News Catcher",
        "Strategy & Technical Quests",
        "Log and analyze a trade taken during a major news event.",
        lambda h: h.any(lambda t: bool(t.news_events) and bool(t.lessons_learned)),
    ),
    Milestone(
        "The Day Trader",
        "Strategy & Technical Quests",
        "Complete 10 trades with a duration of less than 4 hours.",
        lambda h: h.count(lambda t: t.computed.duration_minutes < DAY_TRADE_MAX_MINUTES) >= 10,
    ),
    Milestone(
        "The Trend Follower",
        "Strategy & Technical Quests",
        "Log 5 consecutive winning trades that follow the higher-timeframe bias.",
        lambda h: h.run(lambda t: _is_win(t) and h.is_bias_aligned(t)) >= 5,
    ),
    Milestone(
        "The Self-Coach",
        "Learning & Analytical Quests",
        "For your next 3 losing trades, complete all the journaling prompts.",
        lambda h: len(_last_losses(h, 3)) == 3
        and all(t.notes and t.lessons_learned for t in _last_losses(h, 3)),
    ),
    Milestone(
        "The Sentiment Tracker",
        "Learning & Analytical Quests",
        "Log 10 trades and carefully fill out the sentiments field for each one.",
        lambda h: h.count(_all_phases_logged, closed_only=False) >= 10,
    ),
    Milestone(
        "The Paired-Off",
        "Learning & Analytical Quests",
        "Trade and log a minimum of 5 trades on a pair you've never traded before.",
        _paired_off,
    ),
    Milestone(
        "The Daily Grind",
        "Frequency & Consistency Quests",
        "Log at least one trade every trading day for a full week.",
        _full_week_daily,
    ),
    Milestone(
        "The 5-Trade Week",
        "Frequency & Consistency Quests",
        "Log exactly 5 trades in a single week.",
        lambda h: any(len(trades) == 5 for trades in h.completed_weeks().values()),
    ),
    Milestone(
        "The Perfect Week",
        "Frequency & Consistency Quests",
        "Log a full week's worth of trades with a discipline score of 95+.",
        lambda h: any(
            all(t.computed.score.value >= 95 for t in trades)
            for trades in h.completed_weeks().values()
        ),
    ),
    Milestone(
        "The Full-Month Challenge",
        "Frequency & Consistency Quests",
        "Log at least 10 trades every week for a full month.",
        _full_month_challenge,
    ),
    Milestone(
        "The Revenge Stopper",
        "Emotional & Psychological Quests",
        "After a losing trade, take a one-hour break and avoid a revenge trade.",
        _avoided_revenge_trade,
    ),
    Milestone(
        "The Over-Trading Stopper",
        "Emotional & Psychological Quests",
        "For one full week, do not exceed your max trades per day limit.",
        _over_trading_stopper,
    ),
)
