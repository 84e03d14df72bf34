"""
Persistence port for the match lifecycle.

The controller only talks to this protocol; the SQLAlchemy-backed implementation
lives in services/. Implementations raise PersistenceError on failure.
InMemoryMatchStore keeps everything in dicts and never fails.
"""

from __future__ import annotations

from typing import Any, Dict, List, Protocol

from domain.awards import Achievement, Certificate
from domain.feed import FeedItem
from domain.match import Match
from domain.people import MatchScorer


class MatchPersistence(Protocol):
    """Protocol for loading and writing match lifecycle state."""

    async def load_matches(self) -> List[Match]:
        ...

    async def load_achievements(self) -> List[Achievement]:
        ...

    async def load_scorers(self) -> List[MatchScorer]:
        ...

    async def load_certificates(self) -> List[Certificate]:
        ...

    async def create_match(self, match: Match) -> None:
        ...

    async def save_match_update(self, match_id: str, partial: Dict[str, Any]) -> None:
        """Write the given top-level Match fields (JSON-ready values) onto an existing match."""
        ...

    async def create_achievement(self, achievement: Achievement) -> None:
        ...

    async def create_certificate(self, certificate: Certificate) -> None:
        ...

    async def create_feed_item(self, item: FeedItem) -> None:
        ...

    async def create_scorer(self, scorer: MatchScorer) -> None:
        ...

    async def delete_scorer(self, scorer_id: str) -> None:
        ...


class InMemoryMatchStore:
    """Dict-backed MatchPersistence. Stored objects are copies, as a database would hold."""

    def __init__(self, matches: List[Match] | None = None) -> None:
        self.matches: Dict[str, Match] = {m.id: m.model_copy(deep=True) for m in matches or []}
        self.achievements: Dict[str, Achievement] = {}
        self.certificates: Dict[str, Certificate] = {}
        self.feed: List[FeedItem] = []
        self.scorers: Dict[str, MatchScorer] = {}

    async def load_matches(self) -> List[Match]:
        return [m.model_copy(deep=True) for m in self.matches.values()]

    async def load_achievements(self) -> List[Achievement]:
        return list(self.achievements.values())

    async def load_scorers(self) -> List[MatchScorer]:
        return list(self.scorers.values())

    async def load_certificates(self) -> List[Certificate]:
        return list(self.certificates.values())

    async def create_match(self, match: Match) -> None:
        self.matches[match.id] = match.model_copy(deep=True)

    async def save_match_update(self, match_id: str, partial: Dict[str, Any]) -> None:
        current = self.matches.get(match_id)
        if current is None:
            return
        data = current.model_dump(mode="json")
        data.update(partial)
        self.matches[match_id] = Match.model_validate(data)

    async def create_achievement(self, achievement: Achievement) -> None:
        self.achievements[achievement.id] = achievement

    async def create_certificate(self, certificate: Certificate) -> None:
        self.certificates[certificate.id] = certificate

    async def create_feed_item(self, item: FeedItem) -> None:
        self.feed.append(item)

    async def create_scorer(self, scorer: MatchScorer) -> None:
        self.scorers[scorer.id] = scorer

    async def delete_scorer(self, scorer_id: str) -> None:
        self.scorers.pop(scorer_id, None)

