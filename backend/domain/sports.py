"""Sport identifiers known to the core. Anything that is not football scores like cricket."""

from __future__ import annotations

from typing import Dict

CRICKET = "s1"
KABADDI = "s2"
FOOTBALL = "s3"

SPORT_NAMES: Dict[str, str] = {
    CRICKET: "Cricket",
    KABADDI: "Kabaddi",
    FOOTBALL: "Football",
}


def is_football(sport_id: str) -> bool:
    return sport_id == FOOTBALL


def sport_name(sport_id: str) -> str:
    return SPORT_NAMES.get(sport_id, sport_id)
