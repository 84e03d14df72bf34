"""
Match lifecycle controller.

Rules:
- Commands on one match run under that match's asyncio.Lock; different matches never block each other.
- New state is computed by the pure score engine, then written through the MatchPersistence port.
- Optimistic mode applies the new state locally before the write is awaited; otherwise only after it succeeds.
- A failed write is logged as an ops event and reported in the CommandResult. Local state is never rolled back.
- Invalid transitions and missing matches are no-ops (applied=False with a reason).
- end() runs the achievement/certificate deriver at most once per match.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from awards.achievements import derive_achievements
from awards.certificates import issue_certificates
from domain.awards import Achievement, Certificate
from domain.feed import FeedItem
from domain.match import STARTABLE_STATUSES, LiveState, Match, Participant, PlayerStats
from domain.people import CurrentUser, MatchScorer, PlayerProfile, Team
from lifecycle.commands import CommandResult, InitialAssignments, RejectReason
from lifecycle.errors import MatchCreationError, PersistenceError
from lifecycle.ports import MatchPersistence
from lifecycle.state import AppState
from notifications.center import NotificationCenter
from notifications.model import NotificationEvent
from ops.ops_events import (
    log_achievements_issued,
    log_command_rejected,
    log_event_applied,
    log_event_undone,
    log_match_completed,
    log_match_started,
    log_persistence_failure,
    log_stats_aggregated,
    log_stats_aggregation_start,
)
from scoring.engine import apply_event, recalculate_match
from scoring.inputs import ScoreInput, normalize_score_input, utc_now_iso
from stats.aggregate import aggregate
from stats.filters import StatsFilters
from stats.model import StatsReport

logger = logging.getLogger(__name__)

# Match fields written after every score / undo
SCORE_FIELDS = ("home_participant", "away_participant", "events", "current_batting_team_id", "live_state")
END_FIELDS = ("status", "winner_id", "home_participant", "away_participant", "actual_end_time")
# Not changeable through update_match
IMMUTABLE_FIELDS = frozenset({"id", "events"})

# Counters carried into the final per-player stats at completion (missing -> 0)
_FINAL_COUNTERS = (
    "runs",
    "balls",
    "wickets",
    "catches",
    "balls_bowled",
    "runs_conceded",
    "runouts",
    "goals",
    "assists",
    "yellow_cards",
    "red_cards",
)


def _partial(match: Match, fields: Iterable[str]) -> Dict[str, Any]:
    return match.model_dump(mode="json", include=set(fields))


def _join_errors(*errors: Optional[str]) -> Optional[str]:
    found = [e for e in errors if e]
    return "; ".join(found) if found else None


def batting_team_from_toss(match: Match) -> Optional[str]:
    """BAT: the toss winner bats; any other decision: the other side bats."""
    if match.toss is None:
        return None
    winner = match.toss.winner_team_id
    if match.toss.decision == "BAT":
        return winner
    if winner == match.home_participant.id:
        return match.away_participant.id
    return match.home_participant.id


def decide_result(match: Match) -> Tuple[Optional[str], str, str]:
    """(winner_id, home_result, away_result) by final score; equal scores are a draw."""
    home, away = match.home_participant, match.away_participant
    if home.score > away.score:
        return home.id, "win", "loss"
    if away.score > home.score:
        return away.id, "loss", "win"
    return None, "draw", "draw"


def final_player_stats(member_ids: Sequence[str], recorded: Sequence[PlayerStats]) -> List[PlayerStats]:
    """One stat line per roster member, filled from the recorded stats; missing values are 0."""
    by_id = {s.player_id: s for s in recorded}
    out: List[PlayerStats] = []
    for pid in member_ids:
        stat = by_id.get(pid)
        values: Dict[str, Any] = {
            name: (getattr(stat, name) or 0) if stat is not None else 0 for name in _FINAL_COUNTERS
        }
        if stat is not None and stat.minutes_played is not None:
            values["minutes_played"] = stat.minutes_played
        out.append(PlayerStats(player_id=pid, **values))
    return out


def _side_at_completion(side: Participant, team: Optional[Team]) -> Tuple[List[str], List[PlayerStats]]:
    """(squad player ids, final stats). Without a roster the recorded stats are kept as they are."""
    if team is not None:
        ids = [m.player_id for m in team.members]
        return ids, final_player_stats(ids, side.players)
    recorded = [p.model_copy() for p in side.players]
    if side.squad is not None and side.squad.player_ids:
        return list(side.squad.player_ids), recorded
    return [p.player_id for p in recorded], recorded


class MatchController:
    """Owns AppState and runs every lifecycle command against it."""

    def __init__(
        self,
        store: MatchPersistence,
        notifications: Optional[NotificationCenter] = None,
        optimistic: bool = True,
        clock: Callable[[], str] = utc_now_iso,
        state: Optional[AppState] = None,
    ) -> None:
        self.state = state or AppState()
        self.optimistic = optimistic
        self._store = store
        self._notifications = notifications
        self._clock = clock
        self._locks: Dict[str, asyncio.Lock] = {}

    # --- reads ---

    def get_match(self, match_id: str) -> Optional[Match]:
        return self.state.matches.get(match_id)

    def list_matches(self) -> List[Match]:
        return list(self.state.matches.values())

    def achievements_for(self, match_id: str) -> List[Achievement]:
        return [a for a in self.state.achievements if a.match_id == match_id]

    def certificates_for(self, match_id: str) -> List[Certificate]:
        return [c for c in self.state.certificates if c.match_id == match_id]

    def get_match_scorers(self, match_id: str) -> List[MatchScorer]:
        return self.state.scorers_for(match_id)

    def can_score_match(self, match_id: str, user: Optional[CurrentUser]) -> bool:
        """The match creator or an assigned scorer may score."""
        if user is None:
            return False
        match = self.state.matches.get(match_id)
        if match is not None and match.created_by_user_id == user.id:
            return True
        return any(s.user_id == user.id for s in self.state.scorers_for(match_id))

    def compute_stats(self, filters: StatsFilters, now: Optional[datetime] = None) -> StatsReport:
        t0 = log_stats_aggregation_start(filters.sport_id, filters.time_range)
        report = aggregate(self.list_matches(), filters, now=now)
        log_stats_aggregated(
            filters.sport_id,
            match_count=len(self.state.matches),
            duration_seconds=time.perf_counter() - t0,
            counts={
                "batting": len(report.batting_stats),
                "bowling": len(report.bowling_stats),
                "fielding": len(report.fielding_stats),
                "football": len(report.football_stats),
                "teams": len(report.team_stats),
            },
        )
        return report

    # --- plumbing ---

    def _lock(self, match_id: str) -> asyncio.Lock:
        lock = self._locks.get(match_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[match_id] = lock
        return lock

    def _reject(self, command: str, match_id: str, reason: RejectReason, match: Optional[Match] = None) -> CommandResult:
        log_command_rejected(command, match_id, reason)
        return CommandResult.rejected(reason, match)

    async def _write(self, operation: str, entity_id: str, call: Callable[[], Awaitable[None]]) -> Optional[str]:
        try:
            await call()
        except PersistenceError as e:
            log_persistence_failure(operation, entity_id, str(e))
            return str(e)
        return None

    async def _save_match(self, operation: str, updated: Match, fields: Iterable[str]) -> Optional[str]:
        partial = _partial(updated, fields)
        if self.optimistic:
            self.state.put_match(updated)
        error = await self._write(operation, updated.id, lambda: self._store.save_match_update(updated.id, partial))
        if not self.optimistic and error is None:
            self.state.put_match(updated)
        return error

    async def _add_feed_item(self, item: FeedItem) -> Optional[str]:
        if self.optimistic:
            self.state.feed.insert(0, item)
        error = await self._write("create_feed_item", item.id, lambda: self._store.create_feed_item(item))
        if not self.optimistic and error is None:
            self.state.feed.insert(0, item)
        return error

    async def _notify(self, event: NotificationEvent) -> None:
        if self._notifications is not None:
            await self._notifications.maybe_notify(event)

    def _applied(self, error: Optional[str]) -> bool:
        return error is None or self.optimistic

    # --- commands ---

    async def add_match(self, match: Match, user: Optional[CurrentUser] = None) -> Match:
        """Store a new match (creator stamped from ``user``). Raises MatchCreationError when it cannot be stored."""
        if match.id in self.state.matches:
            raise MatchCreationError(match.id, "a match with this id already exists")
        new = match.model_copy(update={"created_by_user_id": user.id}) if user is not None else match
        try:
            await self._store.create_match(new)
        except PersistenceError as e:
            log_persistence_failure("create_match", new.id, str(e))
            raise MatchCreationError(new.id, str(e)) from e
        self.state.put_match(new, front=True)
        return new

    async def update_match(self, match_id: str, updates: Dict[str, Any]) -> CommandResult:
        """Merge top-level fields into a match. Status can only move between pre-live states."""
        bad = IMMUTABLE_FIELDS.intersection(updates)
        if bad:
            raise ValueError(f"fields cannot be updated directly: {sorted(bad)}")
        async with self._lock(match_id):
            match = self.state.matches.get(match_id)
            if match is None:
                return self._reject("update_match", match_id, "not_found")
            if "status" in updates and (
                match.status == "completed" or updates["status"] in ("live", "completed")
            ):
                return self._reject("update_match", match_id, "invalid_status", match)
            data = match.model_dump(mode="json")
            data.update(updates)
            updated = Match.model_validate(data)
            error = await self._save_match("update_match", updated, updates.keys())
            return CommandResult(match=updated, applied=self._applied(error), error=error)

    async def start(self, match_id: str, initial: Optional[InitialAssignments] = None) -> CommandResult:
        """draft/scheduled/created -> live. Optional opening assignments seed the live state."""
        async with self._lock(match_id):
            match = self.state.matches.get(match_id)
            if match is None:
                return self._reject("start", match_id, "not_found")
            if match.status not in STARTABLE_STATUSES:
                return self._reject("start", match_id, "invalid_status", match)

            updates: Dict[str, Any] = {"status": "live", "actual_start_time": self._clock()}
            if initial is not None:
                updates["live_state"] = LiveState(
                    striker_id=initial.striker_id,
                    non_striker_id=initial.non_striker_id,
                    bowler_id=initial.bowler_id,
                )
                if not match.current_batting_team_id and match.toss is not None:
                    updates["current_batting_team_id"] = batting_team_from_toss(match)
            updated = match.model_copy(update=updates, deep=True)

            error = await self._save_match("start", updated, updates.keys())
            if not self._applied(error):
                return CommandResult(match=match, applied=False, error=error)
            log_match_started(match_id, updated.sport_id, updated.current_batting_team_id)
            await self._notify(NotificationEvent(
                type="match_start",
                title="Match started",
                body=f"{updated.display_name} is now live",
                key=f"match_start:{match_id}",
                related_match_id=match_id,
                related_tournament_id=updated.tournament_id,
            ))
            return CommandResult(match=updated, applied=True, error=error)

    async def score(self, match_id: str, score_input: ScoreInput) -> CommandResult:
        """Normalize the input, fold it into the match and record a feed update. Live matches only."""
        async with self._lock(match_id):
            match = self.state.matches.get(match_id)
            if match is None:
                return self._reject("score", match_id, "not_found")
            if match.status != "live":
                return self._reject("score", match_id, "invalid_status", match)

            event = normalize_score_input(match, score_input, timestamp=self._clock())
            updated = apply_event(match, event)
            error = await self._save_match("score", updated, SCORE_FIELDS)
            if not self._applied(error):
                return CommandResult(match=match, applied=False, error=error)
            log_event_applied(match_id, event.id, event.type, event.points, len(updated.events))

            subject_id = event.team_id or updated.current_batting_team_id
            subject = updated.home_participant if subject_id == updated.home_participant.id else updated.away_participant
            feed_error = await self._add_feed_item(FeedItem(
                id=uuid.uuid4().hex,
                type="match_update",
                title=f"{subject.name}: {event.description}",
                content=event.description,
                related_entity_id=match_id,
                published_at=event.timestamp,
            ))
            return CommandResult(match=updated, applied=True, error=_join_errors(error, feed_error))

    async def undo(self, match_id: str) -> CommandResult:
        """Drop the most recent event and rebuild totals from the remaining log. Live matches only."""
        async with self._lock(match_id):
            match = self.state.matches.get(match_id)
            if match is None:
                return self._reject("undo", match_id, "not_found")
            if match.status != "live":
                return self._reject("undo", match_id, "invalid_status", match)
            if not match.events:
                return self._reject("undo", match_id, "no_events", match)

            dropped = match.events[-1]
            updated = recalculate_match(match.model_copy(update={"events": match.events[:-1]}))
            error = await self._save_match("undo", updated, SCORE_FIELDS)
            if not self._applied(error):
                return CommandResult(match=match, applied=False, error=error)
            log_event_undone(match_id, dropped.id, len(updated.events))
            return CommandResult(match=updated, applied=True, error=error)

    async def end(
        self,
        match_id: str,
        teams: Sequence[Team],
        players: Optional[Sequence[PlayerProfile]] = None,
        user: Optional[CurrentUser] = None,
    ) -> CommandResult:
        """
        Complete a match: decide the result, rebuild final player stats from the rosters,
        derive achievements and certificates, post feed items and notify.
        Skipped when the match is already completed or already has achievements;
        certificates already issued for the match are never issued again.
        """
        async with self._lock(match_id):
            match = self.state.matches.get(match_id)
            if match is None:
                return self._reject("end", match_id, "not_found")
            if match.status == "completed":
                return self._reject("end", match_id, "already_ended", match)
            if self.state.has_achievements_for(match_id):
                return self._reject("end", match_id, "already_ended", match)

            now = self._clock()
            winner_id, home_result, away_result = decide_result(match)
            rosters = {t.id: t for t in teams}
            home_ids, home_stats = _side_at_completion(match.home_participant, rosters.get(match.home_participant.id))
            away_ids, away_stats = _side_at_completion(match.away_participant, rosters.get(match.away_participant.id))

            completed = match.model_copy(
                update={
                    "status": "completed",
                    "winner_id": winner_id,
                    "home_participant": match.home_participant.model_copy(
                        update={"result": home_result, "players": home_stats}, deep=True
                    ),
                    "away_participant": match.away_participant.model_copy(
                        update={"result": away_result, "players": away_stats}, deep=True
                    ),
                    "actual_end_time": now,
                },
                deep=True,
            )

            names = {p.id: p.full_name for p in players or []}
            achievements = derive_achievements(match.id, match.sport_id, home_stats + away_stats, now)
            derived = issue_certificates(
                completed,
                home_ids,
                away_ids,
                achievements,
                issued_at=now,
                player_names=names,
                organizer_name=user.name if user is not None else None,
                issuer_id=user.id if user is not None else "system",
            )
            # a retried end after a failed match write must not re-issue
            issued = {c.id for c in self.state.certificates}
            certificates = [c for c in derived if c.id not in issued]

            errors: List[Optional[str]] = []
            for achievement in achievements:
                err = await self._write(
                    "create_achievement", achievement.id, lambda a=achievement: self._store.create_achievement(a)
                )
                if err is None or self.optimistic:
                    self.state.achievements.append(achievement)
                errors.append(err)
            for certificate in certificates:
                err = await self._write(
                    "create_certificate", certificate.id, lambda c=certificate: self._store.create_certificate(c)
                )
                if err is None or self.optimistic:
                    self.state.certificates.append(certificate)
                errors.append(err)
            for achievement in achievements:
                errors.append(await self._add_feed_item(FeedItem(
                    id=f"{achievement.id}:feed",
                    type="achievement",
                    title=achievement.title,
                    content=f"{names.get(achievement.player_id, achievement.player_id)}: {achievement.description}",
                    related_entity_id=match_id,
                    published_at=now,
                )))
            match_error = await self._save_match("end", completed, END_FIELDS)
            errors.append(match_error)
            log_achievements_issued(match_id, len(achievements), len(certificates))

            if not self._applied(match_error):
                return CommandResult(match=match, applied=False, error=_join_errors(*errors))

            log_match_completed(match_id, winner_id, completed.home_participant.score, completed.away_participant.score)
            await self._notify(NotificationEvent(
                type="match_result",
                title="Match result",
                body=_result_line(completed),
                key=f"match_result:{match_id}",
                related_match_id=match_id,
                related_tournament_id=completed.tournament_id,
            ))
            return CommandResult(match=completed, applied=True, error=_join_errors(*errors))

    async def refresh(self) -> CommandResult:
        """Reload persisted state; live and completed matches are rebuilt from their logs."""
        try:
            matches = await self._store.load_matches()
            achievements = await self._store.load_achievements()
            certificates = await self._store.load_certificates()
            scorers = await self._store.load_scorers()
        except PersistenceError as e:
            log_persistence_failure("refresh", "*", str(e))
            return CommandResult(match=None, applied=False, error=str(e))

        healed: Dict[str, Match] = {}
        for m in matches:
            healed[m.id] = recalculate_match(m) if m.status in ("live", "completed") else m
        self.state.matches = healed
        self.state.achievements = list(achievements)
        self.state.certificates = list(certificates)
        self.state.scorers = list(scorers)
        logger.info(
            "Refreshed %d matches, %d achievements, %d certificates, %d scorers",
            len(healed), len(achievements), len(certificates), len(scorers),
        )
        return CommandResult(match=None, applied=True)

    async def assign_scorer(self, match_id: str, user_id: str, by: CurrentUser) -> Optional[MatchScorer]:
        """Admin only. Returns the new assignment, or None when rejected, duplicated or not stored."""
        if not by.is_admin:
            log_command_rejected("assign_scorer", match_id, "forbidden")
            return None
        if any(s.user_id == user_id for s in self.state.scorers_for(match_id)):
            log_command_rejected("assign_scorer", match_id, "duplicate")
            return None
        scorer = MatchScorer(
            id=f"ms_{uuid.uuid4().hex}",
            match_id=match_id,
            user_id=user_id,
            assigned_by=by.id,
            assigned_at=self._clock(),
        )
        error = await self._write("create_scorer", scorer.id, lambda: self._store.create_scorer(scorer))
        if error is not None:
            return None
        self.state.scorers.append(scorer)
        return scorer

    async def remove_scorer(self, match_id: str, user_id: str, by: CurrentUser) -> bool:
        """Admin only. True when an assignment was removed."""
        if not by.is_admin:
            log_command_rejected("remove_scorer", match_id, "forbidden")
            return False
        targets = [s for s in self.state.scorers_for(match_id) if s.user_id == user_id]
        removed = False
        for scorer in targets:
            error = await self._write("delete_scorer", scorer.id, lambda s=scorer: self._store.delete_scorer(s.id))
            if error is None:
                self.state.scorers = [s for s in self.state.scorers if s.id != scorer.id]
                removed = True
        return removed

    def toggle_follow_match(self, match_id: str) -> bool:
        """Follow or unfollow; returns True when the match is now followed."""
        if match_id in self.state.followed_matches:
            self.state.followed_matches.discard(match_id)
            return False
        self.state.followed_matches.add(match_id)
        return True


def _result_line(match: Match) -> str:
    home, away = match.home_participant, match.away_participant
    score_line = f"{home.name} {home.score} - {away.score} {away.name}"
    if match.winner_id is None:
        return f"Match drawn: {score_line}"
    winner = match.participant(match.winner_id)
    return f"{winner.name if winner is not None else match.winner_id} won: {score_line}"
