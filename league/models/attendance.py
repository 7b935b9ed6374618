from league import db
from league.models.enums import TeamSide


class Attendance(db.Model):
    """Record of a player who actually played in a match, and for which side."""
    __tablename__ = 'match_players'

    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('matches.id'), nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), nullable=False)
    team = db.Column(db.Enum(TeamSide, name='team_side'), nullable=False)
    is_late = db.Column(db.Boolean, default=False, nullable=False)

    # Unique constraint: one attendance record per player per match
    __table_args__ = (
        db.UniqueConstraint('match_id', 'player_id', name='unique_match_player'),
    )

    def __repr__(self):
        return f'<Attendance match={self.match_id} player={self.player_id} team={self.team.value}>'
