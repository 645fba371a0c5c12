# src/gamification/leaderboard.py
"""Leaderboard of the user against synthetic competitors."""
import random

from src.config.thresholds import LEADERBOARD_PROFIT_FACTOR_CAP
from src.gamification.models import LeaderboardEntry, Level
from src.journal.models import GroupMetrics


COMPETITOR_POOL: tuple[tuple[str, str], ...] = (
    ("Aarav Sharma", "India"),
    ("Fatima Al-Fassi", "Saudi Arabia"),
    ("Chen Wei", "China"),
    ("John Smith", "USA"),
    ("Olivia Williams", "UK"),
    ("Liam Tremblay", "Canada"),
    ("Chloe Wilson", "Australia"),
    ("Kenji Tanaka", "Japan"),
    ("Zainab Khan", "Pakistan"),
    ("Ahmed Al-Mansoori", "UAE"),
    ("Lia Taylor", "New Zealand"),
    ("Yara Zayyad", "Palestine"),
    ("Noam Cohen", "Israel"),
    ("Maria Garcia", "Spain"),
    ("Sergei Ivanov", "Russia"),
    ("Ana Silva", "Brazil"),
    ("Sophie Dubois", "France"),
    ("Lukas Schmidt", "Germany"),
    ("Santiago Rodriguez", "Mexico"),
    ("Aisha Adebayo", "Nigeria"),
)


def user_points(metrics: GroupMetrics, total_trades: int) -> int:
    """Leaderboard points of the user, from freshly aggregated metrics."""
    profit_factor = min(metrics.profit_factor, LEADERBOARD_PROFIT_FACTOR_CAP)
    return round(
        total_trades / 50
        + metrics.avg_r * 20
        + profit_factor * 10
        + metrics.win_rate
        + metrics.avg_score
    )


class LeaderboardGenerator:
    """Generates competitor entries and ranks them with the user.

    Competitors are seeded from the user's level and trade count only, so
    the same inputs always give the same table.
    """

    def __init__(self, pool: tuple[tuple[str, str], ...] = COMPETITOR_POOL):
        self._pool = pool

    def competitors(self, level: Level, trade_count: int) -> list[LeaderboardEntry]:
        """Generate the synthetic competitors for a level.

        Args:
            level: The user's current level, sets the number of competitors.
            trade_count: The user's logged trade count.

        Returns:
            Unranked competitor entries.
        """
        rng = random.Random(level.level * 1_000_003 + trade_count)
        pool = list(self._pool)
        rng.shuffle(pool)

        entries = []
        for i in range(level.competitors):
            name, country = pool[i % len(pool)]
            win_rate = rng.uniform(40, 75)
            avg_gain = rng.uniform(50, 300)
            avg_loss = rng.uniform(30, 150)
            avg_grade = rng.uniform(60, 95)
            total_trades = max(1, trade_count + int(rng.uniform(-5, 10)))
            xp = int(rng.uniform(100, 5000))

            rr = avg_gain / avg_loss
            points = round(xp / 5000 * 100 + rr * 50 + (1 / rr) * 50 + win_rate + avg_grade)

            entries.append(
                LeaderboardEntry(
                    rank=0,
                    name=name,
                    country=country,
                    total_trades=total_trades,
                    xp=xp,
                    avg_gain=round(avg_gain, 2),
                    avg_loss=round(avg_loss, 2),
                    win_rate=round(win_rate, 2),
                    avg_grade=round(avg_grade, 2),
                    total_points=points,
                )
            )
        return entries

    def rank(self, user: LeaderboardEntry, level: Level) -> list[LeaderboardEntry]:
        """Rank the user among the level's competitors by total points.

        Args:
            user: Freshly computed user entry.
            level: The user's current level.

        Returns:
            Every entry sorted by points, ranks starting at 1. Ties keep the
            user ahead.
        """
        entries = [user, *self.competitors(level, user.total_trades)]
        entries.sort(key=lambda e: e.total_points, reverse=True)
        for rank, entry in enumerate(entries, start=1):
            entry.rank = rank
        return entries
