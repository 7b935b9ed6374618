from datetime import datetime
from league import db


class Player(db.Model):
    """League player."""
    __tablename__ = 'players'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    nickname = db.Column(db.String(50), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    attendances = db.relationship('Attendance', backref='player', lazy='dynamic')
    rsvps = db.relationship('Rsvp', backref='player', lazy='dynamic')
    points_entries = db.relationship('PointsEntry', backref='player', lazy='dynamic')

    def __repr__(self):
        return f'<Player {self.name}>'
