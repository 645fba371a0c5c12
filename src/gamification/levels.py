# src/gamification/levels.py
"""Level ladder keyed by logged trade count."""
from src.gamification.models import Level


LEVELS: tuple[Level, ...] = (
    Level(1, "Novice Trader", 0, 10, 50.0, 20),
    Level(2, "Apprentice Trader", 11, 25, 55.0, 30),
    Level(3, "Journeyman Trader", 26, 50, 60.0, 50),
    Level(4, "Professional Trader", 51, 100, 65.0, 70),
    Level(5, "Master Trader", 101, 150, 70.0, 100),
    Level(6, "Elite Trader", 151, 200, 75.0, 150),
    Level(7, "Market Wizard", 201, 250, 80.0, 200),
    Level(8, "Trading Guru", 251, 500, 85.0, 300),
    Level(9, "Grandmaster Trader", 501, 999, 92.0, 500),
    Level(10, "The Legend", 1000, None, 96.5, 1000),
)


def level_for(trade_count: int) -> Level:
    """Return the highest level whose threshold the trade count meets."""
    current = LEVELS[0]
    for level in LEVELS:
        if trade_count >= level.min_trades:
            current = level
    return current


def next_level(level: Level) -> Level:
    """Return the level after the given one, or the top level itself."""
    index = LEVELS.index(level)
    return LEVELS[min(index + 1, len(LEVELS) - 1)]
