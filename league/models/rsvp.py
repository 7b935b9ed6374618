from datetime import datetime
from league import db
from league.models.enums import RsvpStatus


class Rsvp(db.Model):
    """Player's RSVP for a match."""
    __tablename__ = 'match_rsvps'

    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('matches.id'), nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), nullable=False)
    status = db.Column(db.Enum(RsvpStatus, name='rsvp_status'), default=RsvpStatus.NONE, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Unique constraint: one RSVP per player per match
    __table_args__ = (
        db.UniqueConstraint('match_id', 'player_id', name='unique_rsvp'),
    )

    def __repr__(self):
        return f'<Rsvp match={self.match_id} player={self.player_id} status={self.status.value}>'
