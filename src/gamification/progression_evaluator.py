# src/gamification/progression_evaluator.py
"""Evaluator for levels, milestones, progress and leaderboard."""
import logging
from datetime import date

from src.config.settings import AppSettings
from src.config.thresholds import MONTHLY_GROWTH_TARGET, WIN_RATE_GOAL
from src.gamification.history import TradeHistory, open_date
from src.gamification.leaderboard import LeaderboardGenerator, user_points
from src.gamification.levels import level_for, next_level
from src.gamification.milestones import ACHIEVEMENTS, BADGES, QUESTS
from src.gamification.models import (
    GamificationState,
    LeaderboardEntry,
    Milestone,
    ProgressValue,
)
from src.journal.metrics_calculator import MetricsCalculator
from src.journal.models import Journal
from src.journal.trade_helpers import market_clock

logger = logging.getLogger(__name__)


def _add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


class ProgressionEvaluator:
    """Derives a journal's gamification state from its full trade history.

    Nothing is carried between calls: levels, milestones, progress and the
    user's leaderboard entry are recomputed from the trades every time.

    Attributes:
        settings: Application settings.
        achievements: Achievement table.
        badges: Badge table.
        quests: Quest table.
    """

    def __init__(
        self,
        settings: AppSettings,
        achievements: tuple[Milestone, ...] = ACHIEVEMENTS,
        badges: tuple[Milestone, ...] = BADGES,
        quests: tuple[Milestone, ...] = QUESTS,
        metrics_calculator: MetricsCalculator | None = None,
        leaderboard: LeaderboardGenerator | None = None,
    ):
        self._settings = settings
        self._achievements = achievements
        self._badges = badges
        self._quests = quests
        self._metrics = metrics_calculator or MetricsCalculator()
        self._leaderboard = leaderboard or LeaderboardGenerator()

    def evaluate(self, journal: Journal, as_of: date) -> GamificationState:
        """Evaluate a journal's progression.

        Args:
            journal: Journal whose trades have all been calculated.
            as_of: Date to evaluate on. Sets which weeks and months are
                complete and how far the account growth target has compounded.

        Returns:
            GamificationState for the journal.
        """
        history = TradeHistory(journal, self._settings, as_of)
        trade_count = len(history.trades)
        current = level_for(trade_count)
        upcoming = next_level(current)

        metrics = self._metrics.calculate(history.trades, journal.capital)
        xp = sum(t.computed.xp for t in history.trades)

        progress = {
            "account_growth": ProgressValue(
                value=round(self._balance_as_of(history), 2),
                target=round(self._growth_target(history), 2),
            ),
            "discipline_score": ProgressValue(value=metrics.avg_score, target=upcoming.avg_score),
            "win_rate": ProgressValue(value=metrics.win_rate, target=WIN_RATE_GOAL),
            "level_up": ProgressValue(value=trade_count, target=upcoming.min_trades),
        }

        user = LeaderboardEntry(
            rank=0,
            name="You",
            country="",
            total_trades=trade_count,
            xp=xp,
            avg_gain=round(metrics.avg_win, 2),
            avg_loss=round(metrics.avg_loss, 2),
            win_rate=round(metrics.win_rate, 2),
            avg_grade=round(metrics.avg_score, 2),
            total_points=user_points(metrics, trade_count),
            is_user=True,
        )
        leaderboard = self._leaderboard.rank(user, current)

        state = GamificationState(
            current_level=current,
            next_level=upcoming,
            xp=xp,
            unlocked_achievements=self._unlocked(self._achievements, history),
            unlocked_badges=self._unlocked(self._badges, history),
            completed_quests=self._unlocked(self._quests, history),
            progress=progress,
            total_pl=metrics.total_pl,
            avg_discipline_score=metrics.avg_score,
            leaderboard_entry=user,
            leaderboard=leaderboard,
        )
        logger.debug(
            f"Journal {journal.id}: level {current.level}, {xp} XP, "
            f"{len(state.unlocked_achievements)} achievements, rank {user.rank}"
        )
        return state

    @staticmethod
    def _unlocked(table: tuple[Milestone, ...], history: TradeHistory) -> set[str]:
        return {milestone.name for milestone in table if milestone.predicate(history)}

    @staticmethod
    def _balance_as_of(history: TradeHistory) -> float:
        closed_by_then = [
            t for t in history.closed if market_clock(t.close_time).date() <= history.as_of
        ]
        return history.journal.starting_balance + sum(t.computed.pl for t in closed_by_then)

    @staticmethod
    def _growth_target(history: TradeHistory) -> float:
        """Balance target compounding 25% of each month's opening balance.

        Counts whole calendar months from the journal's creation month (or
        its first trade) up to as_of.
        """
        journal = history.journal
        if journal.created_at is not None:
            start = market_clock(journal.created_at).date()
        elif history.trades:
            start = open_date(history.trades[0])
        else:
            start = history.as_of
        start = start.replace(day=1)

        months_passed = (history.as_of.year - start.year) * 12 + history.as_of.month - start.month
        target = journal.starting_balance
        for i in range(1, months_passed + 1):
            month_start = _add_months(start, i)
            opening_balance = journal.starting_balance + sum(
                t.computed.pl
                for t in history.closed
                if market_clock(t.close_time).date() < month_start
            )
            target += opening_balance * MONTHLY_GROWTH_TARGET
        return target
