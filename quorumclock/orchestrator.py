"""Ask the remote sources for the time and fall back to the software clock."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from quorumclock.clock_runner import ClockRunner
from quorumclock.config import DEFAULT_SOURCES, SOURCE_COUNT, TimeSource
from quorumclock.reconciler import reconcile
from quorumclock.timestamp import TimestampSample
from time_api_client import TimeApiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateTimeResult:
    timestamp: TimestampSample
    from_fallback: bool
    samples: Tuple[Optional[TimestampSample], ...] = ()


def get_date_time(
    runner: ClockRunner,
    client: TimeApiClient,
    sources: Sequence[TimeSource] = DEFAULT_SOURCES,
    parallel: bool = False,
) -> DateTimeResult:
    """
    Return the reconciled remote time, or the software clock's reading.

    Waits until the software clock is running, queries the sources A, B, C
    and reconciles their samples. When they cannot be reconciled the result
    comes from ``runner`` and is flagged ``from_fallback``.

    Raises ClockStateError if the fallback is needed but the software clock
    is corrupt.
    """
    if len(sources) != SOURCE_COUNT:
        raise ValueError(f"expected {SOURCE_COUNT} sources, got {len(sources)}")

    runner.wait_ready()

    samples = tuple(client.fetch_all(sources, parallel=parallel))
    reconciled = reconcile(*samples)
    if reconciled is not None:
        return DateTimeResult(reconciled, from_fallback=False, samples=samples)

    failed = [src.name for src, sample in zip(sources, samples) if sample is None]
    if failed:
        logger.warning("No sample from %s; using software clock", ", ".join(failed))
    else:
        logger.warning("Time sources disagree; using software clock")

    fallback = runner.snapshot().as_sample()
    return DateTimeResult(fallback, from_fallback=True, samples=samples)
