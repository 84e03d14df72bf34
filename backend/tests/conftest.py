# Ensure backend is at sys.path[0] when pytest runs (from repo root or from backend dir)
import sys
from pathlib import Path

_tests_dir = Path(__file__).resolve().parent
_backend = _tests_dir.parent
_str_backend = str(_backend)
if sys.path[0:1] != [_str_backend]:
    sys.path.insert(0, _str_backend)

from typing import Callable, List, Optional  # noqa: E402

import pytest  # noqa: E402

from domain.match import Match, Participant, PlayerStats  # noqa: E402

FIXED_NOW = "2025-03-01T12:00:00+00:00"


def build_match(
    match_id: str = "m1",
    sport_id: str = "s1",
    status: str = "draft",
    home_score: int = 0,
    away_score: int = 0,
    home_players: Optional[List[PlayerStats]] = None,
    away_players: Optional[List[PlayerStats]] = None,
    date: str = "2025-03-01T10:00:00+00:00",
    location: str = "Riverside Ground",
    **extra,
) -> Match:
    """Lions (h1) vs Tigers (a1) with optional scores and player stats."""
    return Match(
        id=match_id,
        sport_id=sport_id,
        date=date,
        location=location,
        status=status,
        home_participant=Participant(id="h1", name="Lions", score=home_score, players=home_players or []),
        away_participant=Participant(id="a1", name="Tigers", score=away_score, players=away_players or []),
        **extra,
    )


@pytest.fixture
def make_match() -> Callable[..., Match]:
    return build_match


@pytest.fixture
def fixed_clock() -> Callable[[], str]:
    return lambda: FIXED_NOW
