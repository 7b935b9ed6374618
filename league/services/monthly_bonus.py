"""
Monthly perfect attendance bonus.

A player who played in every finished match of a calendar month earns a
one-time bonus for that month. The pass can be re-run at any time: a bonus
that was granted is never duplicated or taken back.
"""

from decimal import Decimal
from typing import List

from flask import current_app
from sqlalchemy import func

from league import db
from league.models import Attendance, Match, PointsEntry
from league.models.points_entry import REASON_PERFECT_ATTENDANCE
from league.services.periods import Period
from league.services.unit_of_work import transaction


PERFECT_ATTENDANCE_BONUS = Decimal(5)


def finished_matches_in(period: Period) -> List[Match]:
    """Finished matches dated inside the period, oldest first."""
    return Match.query.filter(
        Match.is_finished.is_(True),
        Match.match_date >= period.start,
        Match.match_date < period.end,
    ).order_by(Match.match_date, Match.id).all()


def _bonus_exists(player_id: int, period: Period) -> bool:
    existing = PointsEntry.query.filter(
        PointsEntry.player_id == player_id,
        PointsEntry.reason == REASON_PERFECT_ATTENDANCE,
        PointsEntry.booked_at >= period.start,
        PointsEntry.booked_at < period.end,
    ).first()
    return existing is not None


def apply_monthly_bonuses(year: int, month: int) -> List[PointsEntry]:
    """
    Grant the perfect attendance bonus for one month.

    Args:
        year: Calendar year
        month: Calendar month (1-12)

    Returns:
        The bonus entries created by this call (empty when nothing new was due)

    Raises:
        InvalidPeriod: If month is not 1-12
        StorageError: If the database fails (nothing is committed)
    """
    period = Period(year, month)
    matches = finished_matches_in(period)
    if not matches:
        return []

    total_matches = len(matches)
    match_ids = [m.id for m in matches]

    # Attendance count per player across the period's finished matches
    attendance_counts = db.session.query(
        Attendance.player_id,
        func.count(Attendance.id),
    ).filter(
        Attendance.match_id.in_(match_ids)
    ).group_by(Attendance.player_id).order_by(Attendance.player_id).all()

    created = []
    with transaction(f'monthly bonuses {period}') as session:
        for player_id, count in attendance_counts:
            if count != total_matches:
                continue
            if _bonus_exists(player_id, period):
                continue
            entry = PointsEntry(
                player_id=player_id,
                match_id=None,
                reason=REASON_PERFECT_ATTENDANCE,
                points=PERFECT_ATTENDANCE_BONUS,
                booked_at=period.start,
                period=period.key,
            )
            session.add(entry)
            created.append(entry)

    if created:
        current_app.logger.info(
            f"Granted {len(created)} perfect attendance bonuses for {period} "
            f"({total_matches} finished matches)"
        )
    return created
