"""
Command inputs and outcomes for the match lifecycle controller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel

from domain.match import Match

RejectReason = Literal[
    "not_found",
    "invalid_status",
    "already_ended",
    "no_events",
    "forbidden",
    "duplicate",
]


class InitialAssignments(BaseModel):
    """Opening striker, non-striker and bowler chosen when a cricket match starts."""

    striker_id: str
    non_striker_id: str
    bowler_id: str


@dataclass
class CommandResult:
    """
    Outcome of a mutating command.

    applied=False with a reason: the command was a no-op (nothing changed).
    error set: a persistence write failed; with optimistic updates the local
    state still holds the new value.
    """

    match: Optional[Match]
    applied: bool
    error: Optional[str] = None
    reason: Optional[RejectReason] = None

    @classmethod
    def rejected(cls, reason: RejectReason, match: Optional[Match] = None) -> "CommandResult":
        return cls(match=match, applied=False, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match": self.match.model_dump(mode="json") if self.match is not None else None,
            "applied": self.applied,
            "error": self.error,
            "reason": self.reason,
        }
