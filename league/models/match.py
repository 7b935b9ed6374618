from datetime import datetime
from league import db
from league.models.enums import TeamSide


class Match(db.Model):
    """A single fixture between side A and side B."""
    __tablename__ = 'matches'

    id = db.Column(db.Integer, primary_key=True)
    match_date = db.Column(db.DateTime, nullable=False, index=True)
    rsvp_deadline = db.Column(db.DateTime, nullable=True)
    location = db.Column(db.String(200), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    team_a_goals = db.Column(db.Integer, nullable=True)  # NULL until a score is entered
    team_b_goals = db.Column(db.Integer, nullable=True)
    is_finished = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    attendances = db.relationship('Attendance', backref='match', lazy='dynamic', cascade='all, delete-orphan')
    rsvps = db.relationship('Rsvp', backref='match', lazy='dynamic', cascade='all, delete-orphan')
    points_entries = db.relationship('PointsEntry', backref='match', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def score(self):
        """(team A goals, team B goals), with a missing score read as 0-0."""
        return (self.team_a_goals or 0, self.team_b_goals or 0)

    def goals_for(self, side):
        team_a, team_b = self.score
        return team_a if side is TeamSide.TEAM_A else team_b

    def record_score(self, team_a_goals: int, team_b_goals: int):
        self.team_a_goals = team_a_goals
        self.team_b_goals = team_b_goals

    def __repr__(self):
        return f'<Match {self.match_date:%Y-%m-%d}>'
