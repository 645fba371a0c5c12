# src/scoring/discipline_scorer.py
"""Discipline scorer driving the ordered rule table."""
from src.config.thresholds import BASE_SCORE, EXCELLENT_REMARK
from src.scoring.discipline_rules import (
    DISCIPLINE_RULES,
    DisciplineRule,
    ScoringContext,
)
from src.scoring.models import DisciplineScore, RuleViolation


class DisciplineScorer:
    """Scores a trade against the user's trading plan.

    Starts from a base of 100 and subtracts the penalty of every violation
    found by the rule table, clamping the result to [0, 100]. Remark
    fragments are joined with ". " in rule order.

    Attributes:
        rules: Ordered rules to evaluate.
    """

    def __init__(self, rules: tuple[DisciplineRule, ...] = DISCIPLINE_RULES):
        self._rules = rules

    @property
    def rules(self) -> tuple[DisciplineRule, ...]:
        return self._rules

    def compute_score(self, context: ScoringContext) -> DisciplineScore:
        """Evaluate every rule for a trade.

        Args:
            context: Trade, journal, settings and derived figures to score.

        Returns:
            DisciplineScore with the clamped value, remark and fired violations.
        """
        violations = [
            RuleViolation(rule_id=rule.rule_id, penalty=penalty, remark=remark)
            for rule in self._rules
            for penalty, remark in rule.evaluate(context)
        ]

        total_penalty = sum(v.penalty for v in violations)
        value = max(0.0, min(BASE_SCORE, BASE_SCORE - total_penalty))

        if violations:
            remark = ". ".join(v.remark for v in violations)
        else:
            remark = EXCELLENT_REMARK

        return DisciplineScore(value=round(value, 2), remark=remark, violations=violations)
