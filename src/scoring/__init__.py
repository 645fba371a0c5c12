"""Scoring module for trade discipline and tilt."""

from .models import DisciplineScore, Impact, RuleViolation, TiltmeterScore

__all__ = [
    "DisciplineScore",
    "Impact",
    "RuleViolation",
    "TiltmeterScore",
]
