"""
Match lifecycle: commands, state and the persistence port.
The controller itself lives in lifecycle.controller.
"""

from lifecycle.commands import CommandResult, InitialAssignments
from lifecycle.errors import MatchCreationError, PersistenceError
from lifecycle.ports import InMemoryMatchStore, MatchPersistence
from lifecycle.state import AppState

__all__ = [
    "AppState",
    "CommandResult",
    "InMemoryMatchStore",
    "InitialAssignments",
    "MatchCreationError",
    "MatchPersistence",
    "PersistenceError",
]
