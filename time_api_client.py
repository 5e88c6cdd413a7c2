"""
Thin client for public HTTP time APIs.

Each source answers with JSON in its own shape; a parser per format turns
the payload into a UTC TimestampSample. Any failure is logged and reported
as "no sample" (None). Nothing raises past `TimeApiClient.fetch`.
"""

from __future__ import annotations

import concurrent.futures
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

import pytz
import requests

from quorumclock.timestamp import TimestampSample

if TYPE_CHECKING:
    from quorumclock.config import TimeSource


LOG = logging.getLogger("time_api_client")

# datetime.fromisoformat() wants exactly 6 fractional digits on older Pythons.
_FRACTION_RE = re.compile(r"\.(\d+)")


def _normalize_fraction(text: str) -> str:
    return _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)


# -------------------------------
# Timestamp parsing
# -------------------------------
def parse_iso8601(text: str) -> datetime:
    """
    Parse an RFC 3339 / ISO 8601 timestamp that carries a UTC offset.

    Accepts a trailing ``Z`` and fractions longer than microseconds.
    Raises ValueError for anything else, including values with no offset.
    """
    if not isinstance(text, str):
        raise ValueError(f"expected a timestamp string, got {text!r}")

    cleaned = _normalize_fraction(text.strip())
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"

    dt = datetime.fromisoformat(cleaned)
    if dt.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {text!r}")
    return dt.astimezone(timezone.utc)


def parse_local_time(text: str, zone: str) -> datetime:
    """Parse a naive local timestamp in the IANA ``zone`` and convert to UTC."""
    if not isinstance(text, str):
        raise ValueError(f"expected a timestamp string, got {text!r}")

    naive = datetime.fromisoformat(_normalize_fraction(text.strip()))
    if naive.tzinfo is not None:
        return naive.astimezone(timezone.utc)

    if not isinstance(zone, str):
        raise ValueError(f"expected a time zone name, got {zone!r}")
    try:
        tz = pytz.timezone(zone)
    except pytz.UnknownTimeZoneError as exc:
        raise ValueError(f"unknown time zone {zone!r}") from exc
    return tz.localize(naive).astimezone(pytz.utc)


def _parse_worldtimeapi(payload: Dict[str, Any]) -> TimestampSample:
    # {"datetime": "2024-01-01T10:30:00.123456+00:00", ...}
    return TimestampSample.from_datetime(parse_iso8601(payload["datetime"]))


def _parse_timeapi(payload: Dict[str, Any]) -> TimestampSample:
    # {"dateTime": "2024-01-01T10:30:00.1234567", "timeZone": "Europe/London", ...}
    zone = payload.get("timeZone") or "UTC"
    return TimestampSample.from_datetime(parse_local_time(payload["dateTime"], zone))


def _parse_worldclockapi(payload: Dict[str, Any]) -> TimestampSample:
    # {"currentDateTime": "2024-01-01T10:30Z", ...}
    return TimestampSample.from_datetime(parse_iso8601(payload["currentDateTime"]))


PAYLOAD_PARSERS: Dict[str, Callable[[Dict[str, Any]], TimestampSample]] = {
    "worldtimeapi": _parse_worldtimeapi,
    "timeapi": _parse_timeapi,
    "worldclockapi": _parse_worldclockapi,
}


@dataclass
class TimeApiClient:
    timeout: float = 5.0
    session: requests.Session = field(default_factory=requests.Session)

    # -------------------------------
    # Single source
    # -------------------------------
    def fetch(self, source: "TimeSource") -> Optional[TimestampSample]:
        """
        Query one source and return its reading, or None on any failure.

        Network errors, HTTP error statuses, bad JSON and unparsable
        timestamps are all logged per source and collapsed to None.
        """
        parser = PAYLOAD_PARSERS.get(source.format)
        if parser is None:
            LOG.warning("%s: unknown payload format %r", source.name, source.format)
            return None

        try:
            resp = self.session.get(source.url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            LOG.warning("%s: request failed (%s)", source.name, exc)
            return None

        try:
            payload = resp.json()
        except ValueError as exc:
            LOG.warning("%s: response is not valid JSON (%s)", source.name, exc)
            return None

        if not isinstance(payload, dict):
            LOG.warning("%s: unexpected response shape: %r", source.name, payload)
            return None

        try:
            sample = parser(payload)
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            LOG.warning("%s: could not read timestamp (%r)", source.name, exc)
            return None

        LOG.debug("%s: %s", source.name, sample.format())
        return sample

    # -------------------------------
    # Several sources
    # -------------------------------
    def fetch_all(
        self, sources: Sequence["TimeSource"], parallel: bool = False
    ) -> List[Optional[TimestampSample]]:
        """
        Query every source and return samples in the same order as ``sources``.

        With ``parallel=True`` the requests overlap, but results are still
        ordered by source, not by completion.
        """
        if not parallel or len(sources) < 2:
            return [self.fetch(source) for source in sources]

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=len(sources), thread_name_prefix="time-source"
        ) as executor:
            return list(executor.map(self.fetch, sources))
