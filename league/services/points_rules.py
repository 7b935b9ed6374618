"""
Match rules engine.

Turns one match's RSVPs, attendance and score into its complete set of
ledger entries. Recomputing always clears the match's previous entries and
regenerates them, so the ledger for a match only ever reflects its current state.

Rules run in two passes over two player sets:
- Pass 1, every active player (played or not): RSVP penalties
- Pass 2, every player with an attendance row: attendance, lateness,
  result and team goals

A player can collect entries from both passes for the same match.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

from flask import current_app

from league import db
from league.errors import MatchNotFound
from league.models import Attendance, Match, Player, PointsEntry, Rsvp, RsvpStatus, TeamSide
from league.models.points_entry import (
    REASON_ATTENDANCE,
    REASON_DRAW,
    REASON_GOALS,
    REASON_LATE,
    REASON_NO_RESPONSE,
    REASON_NO_SHOW,
    REASON_WIN,
)
from league.services.unit_of_work import transaction


POINTS_PER_TEAM_GOAL = Decimal('0.5')


@dataclass(frozen=True)
class PlayerOutcome:
    """Everything the rules need to know about one player in one match."""
    player_id: int
    rsvp_status: RsvpStatus
    attendance: Optional[Attendance]
    goals_for: int = 0
    goals_against: int = 0

    @property
    def played(self) -> bool:
        return self.attendance is not None

    @property
    def is_late(self) -> bool:
        return self.played and bool(self.attendance.is_late)


@dataclass(frozen=True)
class Rule:
    reason: str
    applies: Callable[[PlayerOutcome], bool]
    points: Callable[[PlayerOutcome], Decimal]


def _fixed(value):
    amount = Decimal(value)
    return lambda outcome: amount


# Pass 1: every active player
ACTIVE_PLAYER_RULES = (
    Rule(
        REASON_NO_RESPONSE,
        lambda o: o.rsvp_status is RsvpStatus.NONE,
        _fixed(-1),
    ),
    Rule(
        REASON_NO_SHOW,
        lambda o: o.rsvp_status is RsvpStatus.WILL_ATTEND and not o.played,
        _fixed(-2),
    ),
)

# Pass 2: players who played
PLAYED_RULES = (
    Rule(
        REASON_ATTENDANCE,
        lambda o: o.rsvp_status in (RsvpStatus.WILL_ATTEND, RsvpStatus.NONE),
        _fixed(2),
    ),
    Rule(REASON_LATE, lambda o: o.is_late, _fixed(-1)),
    Rule(REASON_WIN, lambda o: o.goals_for > o.goals_against, _fixed(3)),
    Rule(REASON_DRAW, lambda o: o.goals_for == o.goals_against, _fixed(1)),
    Rule(
        REASON_GOALS,
        lambda o: o.goals_for > 0,
        lambda o: POINTS_PER_TEAM_GOAL * o.goals_for,
    ),
)


def _apply_rules(rules, outcome: PlayerOutcome, match: Match) -> List[PointsEntry]:
    return [
        PointsEntry(
            player_id=outcome.player_id,
            match_id=match.id,
            reason=rule.reason,
            points=rule.points(outcome),
            booked_at=match.match_date,
        )
        for rule in rules
        if rule.applies(outcome)
    ]


def evaluate_match(
    match: Match,
    active_players: Iterable[Player],
    rsvps: Iterable[Rsvp],
    attendances: Iterable[Attendance],
) -> List[PointsEntry]:
    """
    Build (but do not save) every ledger entry for a match.

    A player without an RSVP counts as RsvpStatus.NONE. A missing score counts as 0-0.

    Args:
        match: The match being scored
        active_players: Players subject to the RSVP rules
        rsvps: The match's RSVP rows
        attendances: The match's attendance rows

    Returns:
        Unsaved PointsEntry objects, pass 1 entries first
    """
    status_by_player = {r.player_id: r.status for r in rsvps}
    attendance_by_player = {a.player_id: a for a in attendances}

    entries = []

    for player in sorted(active_players, key=lambda p: p.id):
        outcome = PlayerOutcome(
            player_id=player.id,
            rsvp_status=status_by_player.get(player.id, RsvpStatus.NONE),
            attendance=attendance_by_player.get(player.id),
        )
        entries.extend(_apply_rules(ACTIVE_PLAYER_RULES, outcome, match))

    for player_id in sorted(attendance_by_player):
        attendance = attendance_by_player[player_id]
        side = TeamSide(attendance.team)
        outcome = PlayerOutcome(
            player_id=player_id,
            rsvp_status=status_by_player.get(player_id, RsvpStatus.NONE),
            attendance=attendance,
            goals_for=match.goals_for(side),
            goals_against=match.goals_for(side.opponent),
        )
        entries.extend(_apply_rules(PLAYED_RULES, outcome, match))

    return entries


def recompute_match_points(match_id: int) -> List[PointsEntry]:
    """
    Replace all ledger entries for a match and mark it finished.

    Safe to call repeatedly; an unchanged match always produces the same entries.

    Raises:
        MatchNotFound: If the match id is unknown (nothing is written)
        StorageError: If the database fails mid-way (nothing is committed)
    """
    match = db.session.get(Match, match_id)
    if match is None:
        current_app.logger.warning(f"Recompute requested for unknown match {match_id}")
        raise MatchNotFound(match_id)

    with transaction(f'recompute match {match_id}') as session:
        PointsEntry.query.filter_by(match_id=match.id).delete()

        active_players = Player.query.filter_by(is_active=True).all()
        entries = evaluate_match(match, active_players, match.rsvps.all(), match.attendances.all())
        session.add_all(entries)
        match.is_finished = True

    team_a, team_b = match.score
    current_app.logger.info(
        f"Recomputed match {match_id} ({team_a}-{team_b}): {len(entries)} points entries"
    )
    return entries
