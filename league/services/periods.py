"""Calendar-month periods used for bonuses and the leaderboard."""

from dataclasses import dataclass
from datetime import datetime

from league.errors import InvalidPeriod


@dataclass(frozen=True)
class Period:
    """A calendar month, covering [start, end)."""
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise InvalidPeriod(f"Month must be between 1 and 12, got {self.month}")
        if not 1 <= self.year <= 9998:
            raise InvalidPeriod(f"Year out of range: {self.year}")

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.month, 1)

    @property
    def end(self) -> datetime:
        if self.month == 12:
            return datetime(self.year + 1, 1, 1)
        return datetime(self.year, self.month + 1, 1)

    @property
    def key(self) -> str:
        """Stable 'YYYY-MM' label, stored on bonus entries."""
        return f'{self.year:04d}-{self.month:02d}'

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def __str__(self):
        return self.key
