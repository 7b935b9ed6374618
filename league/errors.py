"""
Error types raised by the points ledger services.

Routes translate these into JSON responses; CLI commands into click errors.
"""


class LeagueError(Exception):
    """Base class for all league service errors."""
    status_code = 500


class MatchNotFound(LeagueError, LookupError):
    """Raised when a match id does not exist."""
    status_code = 404

    def __init__(self, match_id):
        self.match_id = match_id
        super().__init__(f"Match {match_id} not found")


class InvalidPeriod(LeagueError, ValueError):
    """Raised for a year/month pair that is not a calendar month."""
    status_code = 400


class StorageError(LeagueError):
    """A database failure inside a unit of work. Nothing was committed; safe to retry."""
    status_code = 503
