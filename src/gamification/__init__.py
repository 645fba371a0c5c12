# src/gamification/__init__.py
"""Gamification module: levels, achievements, badges, quests and leaderboard."""

from .models import GamificationState, LeaderboardEntry, Level, Milestone, ProgressValue

__all__ = [
    "GamificationState",
    "LeaderboardEntry",
    "Level",
    "Milestone",
    "ProgressValue",
]
