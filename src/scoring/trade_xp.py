# src/scoring/trade_xp.py
"""Experience points awarded per trade."""
from src.config.thresholds import (
    BASE_SCORE,
    XP_BASE,
    XP_ENTRY_REASONS,
    XP_LOSS,
    XP_PERFECT_SCORE,
    XP_RR_3,
    XP_RR_5,
    XP_WIN,
)
from src.journal.models import Outcome


def calculate_trade_xp(
    outcome: Outcome, score: float, rr: float, has_entry_reasons: bool
) -> int:
    """Return the XP a calculated trade is worth."""
    xp = XP_BASE
    if outcome == Outcome.WIN:
        xp += XP_WIN
    elif outcome == Outcome.LOSS:
        xp += XP_LOSS
    if score >= BASE_SCORE:
        xp += XP_PERFECT_SCORE
    if rr >= 3:
        xp += XP_RR_3
    if rr >= 5:
        xp += XP_RR_5
    if has_entry_reasons:
        xp += XP_ENTRY_REASONS
    return xp
