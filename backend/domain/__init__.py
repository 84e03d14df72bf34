"""
Domain types for the match core: matches and events, awards, feed entries and the
people-related inputs the core receives from its collaborators.
"""

from domain.awards import Achievement, Certificate, CertificateMetadata
from domain.feed import FeedItem
from domain.match import (
    Dismissal,
    Extras,
    LiveState,
    Match,
    Participant,
    PlayerStats,
    ScoreEvent,
    Squad,
    Toss,
)
from domain.people import CurrentUser, MatchScorer, PlayerProfile, Team, TeamMember

__all__ = [
    "Achievement",
    "Certificate",
    "CertificateMetadata",
    "CurrentUser",
    "Dismissal",
    "Extras",
    "FeedItem",
    "LiveState",
    "Match",
    "MatchScorer",
    "Participant",
    "PlayerProfile",
    "PlayerStats",
    "ScoreEvent",
    "Squad",
    "Team",
    "TeamMember",
    "Toss",
]
