"""
Post-match awards: achievement rules and certificate issuance.
Runs once per completed match; the lifecycle controller guards re-runs.
"""

from awards.achievements import derive_achievements, impact_score, pick_player_of_the_match
from awards.certificates import certificate_hash, issue_certificates

__all__ = [
    "certificate_hash",
    "derive_achievements",
    "impact_score",
    "issue_certificates",
    "pick_player_of_the_match",
]
