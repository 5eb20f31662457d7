"""
Common Value Objects

- DateRange: a stay from check-in (inclusive) to check-out (exclusive)
"""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Half-open range of days ``[start_date, end_date)``

    The end date is the check-out day, so a stay ending on day D and another
    starting on day D do not share a night.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range shares at least one night with another

        Examples:
            - [1, 5) overlaps [4, 8)  -> True
            - [1, 5) overlaps [5, 10) -> False (back-to-back)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def contains(self, check_date: date) -> bool:
        return self.start_date <= check_date < self.end_date

    def __len__(self) -> int:
        """Number of nights"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
