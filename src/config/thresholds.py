# src/config/thresholds.py
"""Named thresholds used by the trade metrics engine.

Every literal that changes a computed number lives here so the values can be
audited in one place.
"""

# Per-trade calculation
PRICE_MATCH_TOLERANCE_PIPS = 2
FALLBACK_PAIR = "Other"
ROUND_DIGITS = 2
MARKET_TIMEZONE = "America/New_York"

# Discipline scoring
BASE_SCORE = 100.0
RISK_TOLERANCE = 0.10
PENALTY_RISK_EXCEEDED = 20.0
PENALTY_RR_BELOW_MINIMUM = 10.0
PENALTY_STOP_LOSS_NOT_HONORED = 20.0
PENALTY_PROFIT_LEFT_ON_TABLE = 10.0
PENALTY_NEGATIVE_TAG = 5.0
PENALTY_MOST_NEGATIVE_TAG = 10.0
PENALTY_MISSING_CHECKLIST = 10.0
PENALTY_INCOMPLETE_CHECKLIST = 5.0
PENALTY_INSTRUMENT_NOT_IN_PLAN = 5.0
PENALTY_NO_TRADE_ZONE = 7.0
PENALTY_NEGATIVE_CUSTOM_FIELD = 3.0
PENALTY_MOST_NEGATIVE_CUSTOM_FIELD = 6.0
PENALTY_DAILY_TRADE_LIMIT = 5.0
PENALTY_DAILY_LOSS_LIMIT = 5.0
PENALTY_DAILY_TARGET_REACHED = 5.0
PENALTY_WEEKLY_LOSS_LIMIT = 5.0
EXCELLENT_REMARK = "Excellent discipline!"

# Analysis selections are weighted by the timeframe they were made on:
# (max timeframe minutes, points)
TIMEFRAME_POINTS: tuple[tuple[int, float], ...] = (
    (10, 3.0),
    (60, 5.0),
    (480, 7.0),
)
TIMEFRAME_POINTS_DEFAULT = 9.0

# Tiltmeter weights
TILT_SCORE_WEIGHT = 0.30
TILT_SENTIMENT_WEIGHT = 0.20
TILT_CUSTOM_FIELD_WEIGHT = 0.20
TILT_R_WEIGHT = 0.10
TILT_RESULT_WEIGHT = 0.10
TILT_PL_WEIGHT = 0.10
TILT_R_FLOOR = -3.0
TILT_R_CEILING = 5.0
TILT_R_PIVOT = 1.5
TILT_DEFAULT_AVG_SCORE = 50.0
TILT_NEUTRAL_RESULT = 0.1

# Trade XP
XP_BASE = 10
XP_WIN = 50
XP_LOSS = 10
XP_PERFECT_SCORE = 100
XP_RR_3 = 50
XP_RR_5 = 100
XP_ENTRY_REASONS = 20

# Aggregation
PROFIT_FACTOR_SENTINEL = 1000.0
PROFIT_FACTOR_NO_TRADES = 1.0
PLAN_ADHERENCE_SCORE = 80.0
MD_SCORE_MIN_TRADES = 5
MD_SCORE_PROFIT_FACTOR_CAP = 3.0

# Gamification
WIN_RATE_GOAL = 70.0
MONTHLY_GROWTH_TARGET = 0.25
SCALP_MAX_MINUTES = 15
SWING_MIN_MINUTES = 24 * 60
DAY_TRADE_MAX_MINUTES = 4 * 60
LONG_TERM_MIN_MINUTES = 30 * 24 * 60
NO_VIOLATION_SCORE = 85.0
ZERO_VIOLATION_QUEST_SCORE = 90.0
MONEY_MAKER_PL = 1000.0
PROFIT_CREATOR_PL = 10000.0
PIPS_KING_PIPS = 200.0
PERCENT_MASTER_GAIN = 10.0
LEADERBOARD_PROFIT_FACTOR_CAP = 5.0
