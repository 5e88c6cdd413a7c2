"""Free-running software clock used when no remote source can be trusted."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from quorumclock.timestamp import TimestampSample

# Every month is treated as 31 days long and leap years are ignored.
DAYS_PER_MONTH = 31
MONTHS_PER_YEAR = 12


@dataclass
class SoftClock:
    """
    Wall-clock reading advanced one second at a time by `tick()`.

    This is a fallback approximation, not a calendar: the day rolls over
    after 31 for every month.
    """

    second: int
    minute: int
    hour: int
    day: int
    month: int
    year: int

    @classmethod
    def from_datetime(cls, dt: datetime) -> "SoftClock":
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        return cls(
            second=dt.second,
            minute=dt.minute,
            hour=dt.hour,
            day=dt.day,
            month=dt.month,
            year=dt.year,
        )

    @classmethod
    def from_system_time(cls, now: Optional[datetime] = None) -> "SoftClock":
        """Seed from the host's current UTC time (or ``now`` when given)."""
        return cls.from_datetime(now or datetime.now(timezone.utc))

    def tick(self) -> None:
        """Advance by one second, cascading into the larger fields."""
        self.second += 1
        if self.second < 60:
            return
        self.second = 0
        self.minute += 1
        if self.minute < 60:
            return
        self.minute = 0
        self.hour += 1
        if self.hour < 24:
            return
        self.hour = 0
        self.day += 1
        if self.day <= DAYS_PER_MONTH:
            return
        self.day = 1
        self.month += 1
        if self.month <= MONTHS_PER_YEAR:
            return
        self.month = 1
        self.year += 1

    def as_sample(self) -> TimestampSample:
        return TimestampSample(self.day, self.month, self.year, self.hour, self.minute)
