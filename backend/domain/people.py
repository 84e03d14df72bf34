"""
Inputs supplied by the identity, roster and player-directory collaborators.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    id: str
    role: Literal["admin", "organizer", "player", "fan"] = "player"
    name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class TeamMember(BaseModel):
    player_id: str
    role: Literal["captain", "vice-captain", "member"] = "member"


class Team(BaseModel):
    """Roster as known to the roster collaborator."""

    id: str
    name: str
    sport_id: Optional[str] = None
    members: List[TeamMember] = Field(default_factory=list)


class PlayerProfile(BaseModel):
    id: str
    first_name: str
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class MatchScorer(BaseModel):
    """A user allowed to score a match they did not create."""

    id: str
    match_id: str
    user_id: str
    assigned_by: str
    assigned_at: str
