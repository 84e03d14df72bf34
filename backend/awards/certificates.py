"""
Certificate issuance at match completion.

One participation certificate per squad player of either side, one achievement
certificate per awarded achievement (linked by achievement_id). Metadata is
captured here once and carried verbatim afterwards.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

from domain.awards import Achievement, Certificate, CertificateMetadata
from domain.match import Match
from domain.sports import sport_name


def certificate_hash(fields: Dict[str, Any]) -> str:
    """SHA-256 hex over the canonical JSON of the stable certificate fields (no hash, no status)."""
    canonical = json.dumps(fields, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _build(
    cert_id: str,
    cert_type: str,
    recipient_id: str,
    recipient_name: str,
    match: Match,
    title: str,
    description: str,
    issued_at: str,
    issuer_id: str,
    metadata: CertificateMetadata,
    achievement_id: Optional[str] = None,
) -> Certificate:
    stable: Dict[str, Any] = {
        "id": cert_id,
        "type": cert_type,
        "recipient_id": recipient_id,
        "recipient_name": recipient_name,
        "match_id": match.id,
        "tournament_id": match.tournament_id,
        "achievement_id": achievement_id,
        "title": title,
        "description": description,
        "date": match.date,
        "issue_date": issued_at,
        "issuer_id": issuer_id,
        "metadata": metadata.model_dump(mode="json"),
    }
    return Certificate(
        id=cert_id,
        type=cert_type,
        recipient_id=recipient_id,
        recipient_name=recipient_name,
        match_id=match.id,
        tournament_id=match.tournament_id,
        achievement_id=achievement_id,
        title=title,
        description=description,
        date=match.date,
        issue_date=issued_at,
        issuer_id=issuer_id,
        verification_hash=certificate_hash(stable),
        metadata=metadata,
    )


def issue_certificates(
    match: Match,
    home_player_ids: Sequence[str],
    away_player_ids: Sequence[str],
    achievements: Sequence[Achievement],
    issued_at: str,
    player_names: Optional[Mapping[str, str]] = None,
    organizer_name: Optional[str] = None,
    issuer_id: str = "system",
) -> List[Certificate]:
    """Participation certificates for both squads, then one per achievement."""
    names = player_names or {}
    team_of: Dict[str, str] = {}
    for pid in home_player_ids:
        team_of.setdefault(pid, match.home_participant.name)
    for pid in away_player_ids:
        team_of.setdefault(pid, match.away_participant.name)

    def _metadata(player_id: str) -> CertificateMetadata:
        return CertificateMetadata(
            match_name=match.display_name,
            sport_name=sport_name(match.sport_id),
            location=match.location or None,
            organizer_name=organizer_name,
            team_name=team_of.get(player_id),
        )

    certificates: List[Certificate] = []
    for player_id in team_of:
        certificates.append(_build(
            cert_id=f"{match.id}:participation:{player_id}",
            cert_type="participation",
            recipient_id=player_id,
            recipient_name=names.get(player_id, player_id),
            match=match,
            title="Match Participation Certificate",
            description=f"For participating in {match.display_name}",
            issued_at=issued_at,
            issuer_id=issuer_id,
            metadata=_metadata(player_id),
        ))

    for achievement in achievements:
        certificates.append(_build(
            cert_id=f"{achievement.id}:certificate",
            cert_type="achievement",
            recipient_id=achievement.player_id,
            recipient_name=names.get(achievement.player_id, achievement.player_id),
            match=match,
            title=achievement.title,
            description=achievement.description,
            issued_at=issued_at,
            issuer_id=issuer_id,
            metadata=_metadata(achievement.player_id),
            achievement_id=achievement.id,
        ))
    return certificates
