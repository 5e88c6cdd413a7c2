"""Exceptions raised by QuorumClock."""

from __future__ import annotations


class QuorumClockError(Exception):
    """Base class for QuorumClock errors."""


class ClockStateError(QuorumClockError):
    """The software clock can no longer be trusted (its ticker failed)."""


class SettingsError(QuorumClockError):
    """The configuration in settings.json or on the command line is invalid."""
