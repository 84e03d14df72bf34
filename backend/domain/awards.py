"""
Post-match awards: achievements and the certificates issued from them.

Both are immutable once created. Certificate metadata is a snapshot taken at
issue time and is never re-derived from the live match.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AchievementType = Literal["player_of_the_match", "century", "half_century", "five_wickets", "hat_trick"]
CertificateType = Literal["participation", "achievement"]


class Achievement(BaseModel):
    """A milestone one player reached in one match."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: AchievementType
    title: str
    player_id: str
    match_id: str
    date: str
    description: str = ""


class CertificateMetadata(BaseModel):
    """Denormalized display fields captured when the certificate is issued."""

    model_config = ConfigDict(frozen=True)

    match_name: Optional[str] = None
    sport_name: Optional[str] = None
    location: Optional[str] = None
    organizer_name: Optional[str] = None
    team_name: Optional[str] = None


class Certificate(BaseModel):
    """Printable record of participation in, or an achievement at, a match."""

    model_config = ConfigDict(frozen=True)

    id: str
    template_id: str = "default"
    type: CertificateType
    recipient_id: str
    recipient_name: str
    match_id: Optional[str] = None
    tournament_id: Optional[str] = None
    achievement_id: Optional[str] = None
    title: str
    description: str = ""
    date: str
    issue_date: str
    issuer_id: str = "system"
    verification_hash: str = Field(..., description="SHA-256 of the stable certificate fields")
    status: Literal["draft", "issued", "revoked"] = "issued"
    metadata: CertificateMetadata = Field(default_factory=CertificateMetadata)
