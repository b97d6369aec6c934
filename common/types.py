"""Shared data type definitions used by both the uploader and the server."""

from datetime import timedelta
from enum import Enum


class ExpiryUnit(str, Enum):
    """
    Unit in which an upload's lifetime is expressed.
    """
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"

    def to_timedelta(self, magnitude: int) -> timedelta:
        """
        Convert a magnitude in this unit to a timedelta.

        Args:
            magnitude: Number of units

        Returns:
            Equivalent timedelta
        """
        return timedelta(**{self.value: magnitude})

    @classmethod
    def names(cls) -> list[str]:
        """Return the wire names of all units."""
        return [unit.value for unit in cls]
