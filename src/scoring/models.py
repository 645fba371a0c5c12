# src/scoring/models.py
"""Data models for discipline scoring."""
from dataclasses import dataclass, field
from enum import Enum


class Impact(str, Enum):
    """Signed impact a keyword, sentiment or custom-field option has on a trade."""

    MOST_POSITIVE = "Most Positive"
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    MOST_NEGATIVE = "Most Negative"

    @property
    def is_positive(self) -> bool:
        return self in (Impact.MOST_POSITIVE, Impact.POSITIVE)

    @property
    def is_negative(self) -> bool:
        return self in (Impact.MOST_NEGATIVE, Impact.NEGATIVE)


@dataclass
class RuleViolation:
    """A single breach found by a discipline rule.

    Attributes:
        rule_id: Identifier of the rule that fired.
        penalty: Points deducted from the score.
        remark: Human-readable explanation of the breach.
    """

    rule_id: str
    penalty: float
    remark: str


@dataclass
class DisciplineScore:
    """Discipline score of a trade (0-100) with its explanation."""

    value: float
    remark: str
    violations: list[RuleViolation] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """Check if no discipline rule fired for the trade."""
        return not self.violations


@dataclass
class TiltmeterScore:
    """Emotional tilt of a trade, every component in [-1, 1]."""

    final_tilt: float
    score_component: float
    sentiment_component: float
    custom_field_component: float
    r_component: float
    result_component: float
    pl_component: float
