"""
Errors raised across the match core. Stores raise PersistenceError; callers decide
whether it reaches the user (add_match) or is logged and carried in a CommandResult.
"""

from __future__ import annotations


class PersistenceError(Exception):
    """Raised by a persistence collaborator when a read or write fails."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}")


class MatchCreationError(Exception):
    """Raised by add_match when the new match could not be stored."""

    def __init__(self, match_id: str, detail: str) -> None:
        self.match_id = match_id
        self.detail = detail
        super().__init__(f"failed to create match {match_id}: {detail}")
