import enum


class RsvpStatus(enum.Enum):
    """Player's answer to a match invitation."""
    NONE = 'none'  # no response yet
    WILL_ATTEND = 'will_attend'
    MAYBE = 'maybe'
    CANT_JOIN = 'cant_join'


class TeamSide(enum.Enum):
    TEAM_A = 'A'
    TEAM_B = 'B'

    @property
    def opponent(self):
        return TeamSide.TEAM_B if self is TeamSide.TEAM_A else TeamSide.TEAM_A
