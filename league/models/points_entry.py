"""
Points ledger.

Entries are never updated in place. Entries with a match_id belong to the
match rules engine and are replaced wholesale on every recompute; entries
without one are period-level bonuses.
"""

from datetime import datetime
from league import db


REASON_NO_RESPONSE = 'No response before deadline'
REASON_NO_SHOW = 'No-show after Will attend'
REASON_ATTENDANCE = 'Attendance'
REASON_LATE = 'Late arrival'
REASON_WIN = 'Team win'
REASON_DRAW = 'Team draw'
REASON_GOALS = 'Team goals scored'
REASON_PERFECT_ATTENDANCE = 'Perfect attendance bonus'

MATCH_REASONS = frozenset({
    REASON_NO_RESPONSE,
    REASON_NO_SHOW,
    REASON_ATTENDANCE,
    REASON_LATE,
    REASON_WIN,
    REASON_DRAW,
    REASON_GOALS,
})
ALL_REASONS = MATCH_REASONS | {REASON_PERFECT_ATTENDANCE}


class PointsEntry(db.Model):
    """One signed point delta for a player."""
    __tablename__ = 'points_entries'

    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), nullable=False, index=True)
    match_id = db.Column(db.Integer, db.ForeignKey('matches.id'), nullable=True, index=True)  # NULL for bonuses
    reason = db.Column(db.String(50), nullable=False)
    points = db.Column(db.Numeric(6, 2), nullable=False)
    booked_at = db.Column(db.DateTime, nullable=False, index=True)  # which period the entry counts towards
    period = db.Column(db.String(7), nullable=True)  # 'YYYY-MM', bonus entries only
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # One bonus per player per reason per period; NULL periods (match entries) never collide
    __table_args__ = (
        db.UniqueConstraint('player_id', 'reason', 'period', name='unique_period_bonus'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'player_id': self.player_id,
            'match_id': self.match_id,
            'reason': self.reason,
            'points': float(self.points),
            'booked_at': self.booked_at.isoformat() if self.booked_at else None,
        }

    def __repr__(self):
        return f'<PointsEntry player={self.player_id} {self.reason} {self.points}>'
