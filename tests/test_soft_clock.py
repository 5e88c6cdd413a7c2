from __future__ import annotations

from datetime import datetime, timedelta, timezone

from quorumclock.soft_clock import SoftClock
from quorumclock.timestamp import TimestampSample

SECONDS_PER_DAY = 24 * 60 * 60


def _clock(year, month, day, hour=0, minute=0, second=0) -> SoftClock:
    return SoftClock(
        second=second, minute=minute, hour=hour, day=day, month=month, year=year
    )


def _tick(clock: SoftClock, times: int) -> SoftClock:
    for _ in range(times):
        clock.tick()
    return clock


def test_single_tick_advances_second():
    clock = _tick(_clock(2024, 5, 10, 8, 15, 30), 1)
    assert (clock.minute, clock.second) == (15, 31)


def test_sixty_ticks_add_one_minute():
    clock = _tick(_clock(2024, 5, 10, 8, 15, 30), 60)
    assert clock == _clock(2024, 5, 10, 8, 16, 30)


def test_minute_rollover_into_hour():
    clock = _tick(_clock(2024, 5, 10, 8, 59, 59), 1)
    assert clock == _clock(2024, 5, 10, 9, 0, 0)


def test_full_day_from_midday():
    clock = _tick(_clock(2024, 5, 10, 12, 34, 56), SECONDS_PER_DAY)
    assert clock == _clock(2024, 5, 11, 12, 34, 56)


def test_day_31_rolls_to_first_of_next_month():
    clock = _tick(_clock(2024, 1, 31, 6, 0, 0), SECONDS_PER_DAY)
    assert clock == _clock(2024, 2, 1, 6, 0, 0)


def test_thirty_day_month_still_reaches_day_31():
    # The fallback clock does not know month lengths.
    clock = _tick(_clock(2024, 4, 30, 23, 59, 59), 1)
    assert clock == _clock(2024, 4, 31, 0, 0, 0)


def test_february_has_no_leap_year_handling():
    clock = _tick(_clock(2023, 2, 28, 23, 59, 59), 1)
    assert (clock.day, clock.month) == (29, 2)


def test_year_rollover():
    clock = _tick(_clock(2024, 12, 31, 23, 59, 59), 1)
    assert clock == _clock(2025, 1, 1, 0, 0, 0)


def test_from_datetime_converts_to_utc():
    tz = timezone(timedelta(hours=2))
    clock = SoftClock.from_datetime(datetime(2024, 3, 1, 1, 30, 15, tzinfo=tz))
    assert clock == _clock(2024, 2, 29, 23, 30, 15)


def test_from_system_time_with_explicit_now():
    now = datetime(2030, 7, 4, 9, 8, 7, tzinfo=timezone.utc)
    assert SoftClock.from_system_time(now) == _clock(2030, 7, 4, 9, 8, 7)


def test_from_system_time_uses_current_utc():
    before = datetime.now(timezone.utc)
    clock = SoftClock.from_system_time()
    assert clock.year >= before.year
    assert 0 <= clock.hour < 24


def test_as_sample_drops_seconds():
    sample = _clock(2024, 1, 2, 3, 4, 5).as_sample()
    assert sample == TimestampSample(day=2, month=1, year=2024, hour=3, minute=4)
