"""GET /api/v1/stats: aggregated player and team statistics, with optional leaderboard."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.dependencies import get_match_controller
from lifecycle.controller import MatchController
from stats.filters import StatsFilters
from stats.leaderboard import LEADERBOARD_CATEGORIES, sort_leaderboard

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", summary="Aggregate stats over live and completed matches")
def get_stats(
    sport_id: str = Query(..., description="Sport id, e.g. s1 (cricket) or s3 (football)"),
    time_range: str = Query("all_time", description="all_time | last_12_months | custom"),
    tournament_id: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None, description="custom range start (inclusive)"),
    date_to: Optional[datetime] = Query(None, description="custom range end (inclusive)"),
    category: Optional[str] = Query(None, description="BAT | BOWL | FIELD | GOALS | ASSISTS"),
    controller: MatchController = Depends(get_match_controller),
) -> dict:
    if time_range not in ("all_time", "last_12_months", "custom"):
        raise HTTPException(status_code=422, detail=f"unknown time_range {time_range!r}")
    if category is not None and category not in LEADERBOARD_CATEGORIES:
        raise HTTPException(status_code=422, detail=f"unknown category {category!r}")

    filters = StatsFilters(
        sport_id=sport_id,
        time_range=time_range,
        tournament_id=tournament_id,
        date_from=date_from,
        date_to=date_to,
    )
    report = controller.compute_stats(filters)
    out = report.to_dict()
    if category is not None:
        out["leaderboard"] = [asdict(row) for row in sort_leaderboard(report, category)]
    return out
