"""
Leaderboard aggregation.

Reduces the points ledger for one calendar month into ranked per-player rows.
Building a leaderboard first applies that month's perfect attendance bonuses
so they are always reflected; apart from that it only reads.

Ranking: total points descending, then matches played descending, then
player name (case-insensitive), then player id.
"""

from collections import defaultdict
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import case, func

from league import db
from league.errors import MatchNotFound
from league.models import Attendance, Match, Player, PointsEntry
from league.models.points_entry import (
    REASON_ATTENDANCE,
    REASON_DRAW,
    REASON_GOALS,
    REASON_LATE,
    REASON_NO_RESPONSE,
    REASON_NO_SHOW,
    REASON_PERFECT_ATTENDANCE,
    REASON_WIN,
)
from league.services.monthly_bonus import apply_monthly_bonuses, finished_matches_in
from league.services.periods import Period


ATTENDANCE_REASONS = {REASON_ATTENDANCE}
RESULT_REASONS = {REASON_WIN, REASON_DRAW}
BONUS_REASONS = {REASON_PERFECT_ATTENDANCE, REASON_GOALS}  # displayed together as "bonus"
PENALTY_REASONS = {REASON_NO_RESPONSE, REASON_NO_SHOW, REASON_LATE}


@dataclass
class LeaderboardRow:
    """One player's line on the monthly leaderboard."""
    player_id: int
    player_name: str
    rank: int = 0
    matches_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    late_arrivals: int = 0
    no_shows: int = 0
    attendance_points: Decimal = Decimal(0)
    result_points: Decimal = Decimal(0)
    bonus_points: Decimal = Decimal(0)
    penalty_points: Decimal = Decimal(0)
    total_points: Decimal = Decimal(0)

    def to_dict(self):
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Decimal):
                data[key] = float(value)
        return data


@dataclass
class MatchPlayerPoints:
    """Points one player collected from a single match."""
    player_id: int
    player_name: str
    team: Optional[str]
    is_late: bool
    total_points: Decimal = Decimal(0)
    details: List[str] = field(default_factory=list)

    def to_dict(self):
        data = asdict(self)
        data['total_points'] = float(self.total_points)
        return data


def _format_points(points: Decimal) -> str:
    return f'{points.normalize():f}' if points != points.to_integral_value() else str(int(points))


def _sort_key(row: LeaderboardRow):
    return (-row.total_points, -row.matches_played, row.player_name.lower(), row.player_id)


def _attendance_stats(period: Period) -> Dict[int, Dict[str, int]]:
    """Matches played and late arrivals per player, from the attendance table."""
    match_ids = [m.id for m in finished_matches_in(period)]
    if not match_ids:
        return {}

    rows = db.session.query(
        Attendance.player_id,
        func.count(Attendance.id),
        func.sum(case((Attendance.is_late.is_(True), 1), else_=0)),
    ).filter(
        Attendance.match_id.in_(match_ids)
    ).group_by(Attendance.player_id).all()

    return {
        player_id: {'played': played, 'late': int(late or 0)}
        for player_id, played, late in rows
    }


def build_leaderboard(year: int, month: int) -> List[LeaderboardRow]:
    """
    Build the ranked leaderboard for one month.

    Only players with at least one ledger entry in the month appear.

    Args:
        year: Calendar year
        month: Calendar month (1-12)

    Returns:
        Rows ordered by rank (1-based)
    """
    period = Period(year, month)
    apply_monthly_bonuses(year, month)

    entries = PointsEntry.query.filter(
        PointsEntry.booked_at >= period.start,
        PointsEntry.booked_at < period.end,
    ).order_by(PointsEntry.id).all()

    by_player = defaultdict(list)
    for entry in entries:
        by_player[entry.player_id].append(entry)

    if not by_player:
        return []

    names = dict(
        db.session.query(Player.id, Player.name).filter(Player.id.in_(list(by_player))).all()
    )
    attendance = _attendance_stats(period)

    rows = []
    for player_id, player_entries in by_player.items():
        row = LeaderboardRow(player_id=player_id, player_name=names.get(player_id, ''))
        for entry in player_entries:
            points = Decimal(entry.points)
            row.total_points += points
            if entry.reason in ATTENDANCE_REASONS:
                row.attendance_points += points
            elif entry.reason in RESULT_REASONS:
                row.result_points += points
            elif entry.reason in BONUS_REASONS:
                row.bonus_points += points
            elif entry.reason in PENALTY_REASONS:
                row.penalty_points += points

            if entry.reason == REASON_WIN:
                row.wins += 1
            elif entry.reason == REASON_DRAW:
                row.draws += 1
            elif entry.reason == REASON_NO_SHOW:
                row.no_shows += 1

        stats = attendance.get(player_id, {})
        row.matches_played = stats.get('played', 0)
        row.late_arrivals = stats.get('late', 0)
        row.losses = max(0, row.matches_played - row.wins - row.draws)
        rows.append(row)

    rows.sort(key=_sort_key)
    for rank, row in enumerate(rows, start=1):
        row.rank = rank

    return rows


def match_points_breakdown(match_id: int) -> List[MatchPlayerPoints]:
    """
    Per-player points for a single match, highest total first.

    Raises:
        MatchNotFound: If the match id is unknown
    """
    match = db.session.get(Match, match_id)
    if match is None:
        raise MatchNotFound(match_id)

    attendance_by_player = {a.player_id: a for a in match.attendances.all()}

    rows = {}
    entries = PointsEntry.query.filter_by(match_id=match.id).order_by(PointsEntry.id).all()
    for entry in entries:
        row = rows.get(entry.player_id)
        if row is None:
            attendance = attendance_by_player.get(entry.player_id)
            row = MatchPlayerPoints(
                player_id=entry.player_id,
                player_name=entry.player.name,
                team=attendance.team.value if attendance else None,
                is_late=bool(attendance.is_late) if attendance else False,
            )
            rows[entry.player_id] = row
        points = Decimal(entry.points)
        row.total_points += points
        row.details.append(f'{entry.reason}: {_format_points(points)}')

    return sorted(rows.values(), key=lambda r: (-r.total_points, r.player_name.lower(), r.player_id))
