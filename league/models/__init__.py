# Import all models here so they're registered with SQLAlchemy
from league.models.enums import RsvpStatus, TeamSide
from league.models.player import Player
from league.models.match import Match
from league.models.rsvp import Rsvp
from league.models.attendance import Attendance
from league.models.points_entry import PointsEntry

__all__ = ['RsvpStatus', 'TeamSide', 'Player', 'Match', 'Rsvp', 'Attendance', 'PointsEntry']
