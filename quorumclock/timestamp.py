"""Minute-resolution UTC timestamp shared by sources, reconciler and clock."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NamedTuple


class TimestampSample(NamedTuple):
    """One reading of the time, in UTC, down to the minute."""

    day: int
    month: int
    year: int
    hour: int
    minute: int

    @classmethod
    def from_datetime(cls, dt: datetime) -> "TimestampSample":
        """Build a sample from a datetime; aware values are converted to UTC."""
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        return cls(dt.day, dt.month, dt.year, dt.hour, dt.minute)

    def same_hour(self, other: "TimestampSample") -> bool:
        """True when day, month, year and hour all match."""
        return self[:4] == other[:4]

    def with_minute(self, minute: int) -> "TimestampSample":
        return self._replace(minute=minute)

    def format(self) -> str:
        """Render as ``DD/MM/YYYY HH:MMZ``."""
        return (
            f"{self.day:02d}/{self.month:02d}/{self.year:04d} "
            f"{self.hour:02d}:{self.minute:02d}Z"
        )
