"""Match lifecycle endpoints under /api/v1/matches."""

from __future__ import annotations

from typing import Annotated, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from core.dependencies import get_current_user, get_match_controller
from domain.match import Match
from domain.people import CurrentUser, PlayerProfile, Team
from lifecycle.commands import CommandResult, InitialAssignments
from lifecycle.controller import MatchController
from lifecycle.errors import MatchCreationError
from scoring.inputs import LegacyScoreInput, ScoreEventInput

router = APIRouter(prefix="/matches", tags=["matches"])

ScoreBody = Annotated[Union[LegacyScoreInput, ScoreEventInput], Field(discriminator="kind")]


class StartBody(BaseModel):
    initial: Optional[InitialAssignments] = None


class EndBody(BaseModel):
    """Rosters for both sides; players are optional and only used for certificate names."""

    teams: List[Team] = Field(default_factory=list)
    players: List[PlayerProfile] = Field(default_factory=list)


class ScorerBody(BaseModel):
    user_id: str


def _command_response(result: CommandResult) -> dict:
    """404 for a missing match, 409 for any other rejected command."""
    if result.reason == "not_found":
        raise HTTPException(status_code=404, detail="match not found")
    if result.reason is not None:
        raise HTTPException(status_code=409, detail=result.reason)
    return result.to_dict()


def _require_match(controller: MatchController, match_id: str) -> Match:
    match = controller.get_match(match_id)
    if match is None:
        raise HTTPException(status_code=404, detail="match not found")
    return match


@router.get("", summary="List matches")
def list_matches(controller: MatchController = Depends(get_match_controller)) -> List[dict]:
    return [m.model_dump(mode="json") for m in controller.list_matches()]


@router.post("", status_code=201, summary="Create a match")
async def create_match(
    body: Match,
    controller: MatchController = Depends(get_match_controller),
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> dict:
    try:
        created = await controller.add_match(body, user=user)
    except MatchCreationError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return created.model_dump(mode="json")


@router.get("/{match_id}", summary="Get one match")
def get_match(match_id: str, controller: MatchController = Depends(get_match_controller)) -> dict:
    return _require_match(controller, match_id).model_dump(mode="json")


@router.get("/{match_id}/awards", summary="Achievements and certificates issued for a match")
def get_awards(match_id: str, controller: MatchController = Depends(get_match_controller)) -> dict:
    _require_match(controller, match_id)
    return {
        "achievements": [a.model_dump(mode="json") for a in controller.achievements_for(match_id)],
        "certificates": [c.model_dump(mode="json") for c in controller.certificates_for(match_id)],
    }


@router.post("/{match_id}/start", summary="Start a match")
async def start_match(
    match_id: str,
    body: Optional[StartBody] = None,
    controller: MatchController = Depends(get_match_controller),
) -> dict:
    initial = body.initial if body is not None else None
    return _command_response(await controller.start(match_id, initial))


@router.post("/{match_id}/score", summary="Record one scoring event")
async def score_match(
    match_id: str,
    body: ScoreBody,
    controller: MatchController = Depends(get_match_controller),
) -> dict:
    return _command_response(await controller.score(match_id, body))


@router.post("/{match_id}/undo", summary="Undo the most recent scoring event")
async def undo_match_event(match_id: str, controller: MatchController = Depends(get_match_controller)) -> dict:
    return _command_response(await controller.undo(match_id))


@router.post("/{match_id}/end", summary="Complete a match and issue awards")
async def end_match(
    match_id: str,
    body: EndBody,
    controller: MatchController = Depends(get_match_controller),
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> dict:
    return _command_response(await controller.end(match_id, body.teams, body.players, user=user))


@router.get("/{match_id}/scorers", summary="Users assigned to score a match")
def list_scorers(match_id: str, controller: MatchController = Depends(get_match_controller)) -> List[dict]:
    return [s.model_dump(mode="json") for s in controller.get_match_scorers(match_id)]


@router.post("/{match_id}/scorers", status_code=201, summary="Assign a scorer (admin only)")
async def assign_scorer(
    match_id: str,
    body: ScorerBody,
    controller: MatchController = Depends(get_match_controller),
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> dict:
    _require_match(controller, match_id)
    if user is None or not user.is_admin:
        raise HTTPException(status_code=403, detail="admin only")
    scorer = await controller.assign_scorer(match_id, body.user_id, by=user)
    if scorer is None:
        raise HTTPException(status_code=409, detail="scorer not assigned")
    return scorer.model_dump(mode="json")


@router.delete("/{match_id}/scorers/{user_id}", summary="Remove a scorer (admin only)")
async def remove_scorer(
    match_id: str,
    user_id: str,
    controller: MatchController = Depends(get_match_controller),
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> dict:
    if user is None or not user.is_admin:
        raise HTTPException(status_code=403, detail="admin only")
    removed = await controller.remove_scorer(match_id, user_id, by=user)
    if not removed:
        raise HTTPException(status_code=404, detail="scorer not found")
    return {"removed": True}


@router.post("/{match_id}/follow", summary="Follow or unfollow a match")
def toggle_follow(match_id: str, controller: MatchController = Depends(get_match_controller)) -> dict:
    _require_match(controller, match_id)
    return {"match_id": match_id, "following": controller.toggle_follow_match(match_id)}
