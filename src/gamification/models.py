# src/gamification/models.py
"""Data models for levels, milestones and the leaderboard."""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from src.gamification.history import TradeHistory


@dataclass(frozen=True)
class Level:
    """One rung of the level ladder.

    Attributes:
        level: 1-based level number.
        name: Display name.
        min_trades: Fewest logged trades for the level.
        max_trades: Most logged trades for the level, None for the top level.
        avg_score: Average discipline score the level aims for.
        competitors: Number of leaderboard bots at this level.
    """

    level: int
    name: str
    min_trades: int
    max_trades: int | None
    avg_score: float
    competitors: int


@dataclass(frozen=True)
class Milestone:
    """An achievement, badge or quest with the predicate that unlocks it."""

    name: str
    category: str
    description: str
    predicate: Callable[["TradeHistory"], bool]


@dataclass
class ProgressValue:
    value: float
    target: float

    @property
    def ratio(self) -> float:
        """Progress towards the target, capped at 1."""
        if self.target <= 0:
            return 1.0
        return max(0.0, min(1.0, self.value / self.target))


@dataclass
class LeaderboardEntry:
    rank: int
    name: str
    country: str
    total_trades: int
    xp: int
    avg_gain: float
    avg_loss: float
    win_rate: float
    avg_grade: float
    total_points: int
    is_user: bool = False


@dataclass
class GamificationState:
    """Everything the progress and achievements views show for a journal."""

    current_level: Level
    next_level: Level
    xp: int
    unlocked_achievements: set[str] = field(default_factory=set)
    unlocked_badges: set[str] = field(default_factory=set)
    completed_quests: set[str] = field(default_factory=set)
    progress: dict[str, ProgressValue] = field(default_factory=dict)
    total_pl: float = 0.0
    avg_discipline_score: float = 0.0
    leaderboard_entry: LeaderboardEntry | None = None
    leaderboard: list[LeaderboardEntry] = field(default_factory=list)
