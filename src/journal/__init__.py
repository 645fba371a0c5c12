# src/journal/__init__.py
"""Journal module for trades, plans and performance metrics."""

from .models import (
    AutoCalculated,
    Direction,
    GroupMetrics,
    Journal,
    MdScore,
    Outcome,
    OverallStats,
    ReportRow,
    Strategy,
    Trade,
    TradeResult,
    TradeStatus,
)
from .settings import JournalRules, TradingPlan

__all__ = [
    "AutoCalculated",
    "Direction",
    "GroupMetrics",
    "Journal",
    "JournalRules",
    "MdScore",
    "Outcome",
    "OverallStats",
    "ReportRow",
    "Strategy",
    "Trade",
    "TradeResult",
    "TradeStatus",
    "TradingPlan",
]
