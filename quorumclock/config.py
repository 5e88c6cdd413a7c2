"""Time source definitions and settings for a reconciliation run."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

import settings_store
from time_api_client import PAYLOAD_PARSERS
from quorumclock.errors import SettingsError

DEFAULT_TIMEOUT = 5.0
SOURCE_COUNT = 3


@dataclass(frozen=True)
class TimeSource:
    """A remote time provider: a name for logs, a URL, and its payload format."""

    name: str
    url: str
    format: str


# Order is significant: A, B, C.
DEFAULT_SOURCES: Tuple[TimeSource, ...] = (
    TimeSource(
        name="worldtimeapi",
        url="https://worldtimeapi.org/api/timezone/Europe/London",
        format="worldtimeapi",
    ),
    TimeSource(
        name="timeapi.io",
        url="https://timeapi.io/api/Time/current/zone?timeZone=Europe/London",
        format="timeapi",
    ),
    TimeSource(
        name="worldclockapi",
        url="http://worldclockapi.com/api/json/utc/now",
        format="worldclockapi",
    ),
)


@dataclass(frozen=True)
class TimeSettings:
    sources: Tuple[TimeSource, ...] = DEFAULT_SOURCES
    timeout: float = DEFAULT_TIMEOUT
    parallel: bool = False

    def __post_init__(self) -> None:
        if len(self.sources) != SOURCE_COUNT:
            raise SettingsError(
                f"exactly {SOURCE_COUNT} time sources are required, "
                f"got {len(self.sources)}"
            )
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            raise SettingsError(
                f"timeout must be a positive number of seconds, got {self.timeout}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TimeSettings":
        """
        Build settings from a settings.json style mapping.

        Missing keys take their defaults. Recognized keys are ``sources``
        (list of ``{"name", "url", "format"}`` objects), ``timeout`` and
        ``parallel``.
        """
        sources = DEFAULT_SOURCES
        if data.get("sources") is not None:
            if not isinstance(data["sources"], list):
                raise SettingsError(
                    f"sources must be a list, got {data['sources']!r}"
                )
            sources = tuple(_source_from_mapping(item) for item in data["sources"])

        try:
            timeout = float(data.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"invalid timeout: {data.get('timeout')!r}") from exc

        parallel = data.get("parallel", False)
        if not isinstance(parallel, bool):
            raise SettingsError(f"parallel must be true or false, got {parallel!r}")

        return cls(sources=sources, timeout=timeout, parallel=parallel)

    def with_overrides(
        self, timeout: Optional[float] = None, parallel: Optional[bool] = None
    ) -> "TimeSettings":
        return TimeSettings(
            sources=self.sources,
            timeout=self.timeout if timeout is None else timeout,
            parallel=self.parallel if parallel is None else parallel,
        )


def _source_from_mapping(item: Any) -> TimeSource:
    if not isinstance(item, Mapping):
        raise SettingsError(f"time source must be an object, got {item!r}")
    try:
        source = TimeSource(
            name=str(item["name"]), url=str(item["url"]), format=str(item["format"])
        )
    except KeyError as exc:
        raise SettingsError(f"time source is missing {exc.args[0]!r}") from exc

    if source.format not in PAYLOAD_PARSERS:
        raise SettingsError(
            f"unknown format {source.format!r} for source {source.name!r}"
        )
    return source


def load_time_settings() -> TimeSettings:
    """Read TimeSettings from the user's settings.json."""
    return TimeSettings.from_mapping(settings_store.load_settings())


def save_time_settings(settings: TimeSettings) -> None:
    """Persist the scalar options; custom source lists are left untouched."""
    settings_store.set_setting("timeout", settings.timeout)
    settings_store.set_setting("parallel", settings.parallel)
