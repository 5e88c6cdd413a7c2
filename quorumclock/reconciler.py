"""
Quorum/deviation reconciliation of three time samples.

All functions here are pure. Source order (A, B, C) matters: when only a
pair of minutes agrees, the first qualifying pair in A-B, A-C, B-C order
wins.
"""

from __future__ import annotations

import logging
from typing import Optional

from quorumclock.timestamp import TimestampSample

logger = logging.getLogger(__name__)

# Largest minute gap still treated as the same reading.
MAX_MINUTE_DEVIATION = 10


def check_sequential_low_deviation(a: int, b: int, c: int) -> bool:
    """True when the sorted minutes step by at most MAX_MINUTE_DEVIATION."""
    low, mid, high = sorted((a, b, c))
    return mid - low <= MAX_MINUTE_DEVIATION and high - mid <= MAX_MINUTE_DEVIATION


def check_pair_deviation_and_average(a: int, b: int, c: int) -> Optional[int]:
    """Mean of the first close pair (A-B, A-C, B-C), or None if none is close."""
    for first, second in ((a, b), (a, c), (b, c)):
        if abs(first - second) <= MAX_MINUTE_DEVIATION:
            return (first + second) // 2
    return None


def reconcile(
    a: Optional[TimestampSample],
    b: Optional[TimestampSample],
    c: Optional[TimestampSample],
) -> Optional[TimestampSample]:
    """
    Decide which time to report from three source samples.

    Returns None ("no agreement") when any sample is missing, when the
    samples differ on anything but the minute, or when no minutes are close
    enough. The caller is expected to fall back to the software clock.
    """
    if a is None or b is None or c is None:
        logger.debug("At least one source gave no sample; no agreement")
        return None

    if a == b == c:
        logger.debug("All sources agree exactly")
        return a

    if not (a.same_hour(b) and b.same_hour(c)):
        logger.debug("Sources disagree on date or hour: %s, %s, %s", a, b, c)
        return None

    if check_sequential_low_deviation(a.minute, b.minute, c.minute):
        minute = (a.minute + b.minute + c.minute) // 3
        logger.debug("Minutes %d/%d/%d within tolerance", a.minute, b.minute, c.minute)
        return a.with_minute(minute)

    minute = check_pair_deviation_and_average(a.minute, b.minute, c.minute)
    if minute is None:
        logger.debug("No pair of minutes within %d", MAX_MINUTE_DEVIATION)
        return None

    logger.debug("Using the first agreeing pair of minutes")
    return a.with_minute(minute)
