"""
Score engine and score input normalization.
"""

from scoring.engine import apply_event, is_attributable, recalculate_match
from scoring.inputs import (
    LegacyScoreInput,
    ScoreEventInput,
    ScoreInput,
    normalize_score_input,
)

__all__ = [
    "apply_event",
    "is_attributable",
    "recalculate_match",
    "LegacyScoreInput",
    "ScoreEventInput",
    "ScoreInput",
    "normalize_score_input",
]
