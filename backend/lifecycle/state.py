"""
Explicit application state owned by the match lifecycle controller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from domain.awards import Achievement, Certificate
from domain.feed import FeedItem
from domain.match import Match
from domain.people import MatchScorer


@dataclass
class AppState:
    """Everything the controller knows. Matches keep insertion order; add_match puts new ones first."""

    matches: Dict[str, Match] = field(default_factory=dict)
    achievements: List[Achievement] = field(default_factory=list)
    certificates: List[Certificate] = field(default_factory=list)
    feed: List[FeedItem] = field(default_factory=list)
    scorers: List[MatchScorer] = field(default_factory=list)
    followed_matches: Set[str] = field(default_factory=set)

    def put_match(self, match: Match, front: bool = False) -> None:
        if front and match.id not in self.matches:
            self.matches = {match.id: match, **self.matches}
        else:
            self.matches[match.id] = match

    def has_achievements_for(self, match_id: str) -> bool:
        return any(a.match_id == match_id for a in self.achievements)

    def scorers_for(self, match_id: str) -> List[MatchScorer]:
        return [s for s in self.scorers if s.match_id == match_id]
