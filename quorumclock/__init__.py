"""QuorumClock: reconcile UTC time from several web time sources.

The package keeps a free-running software clock as a fallback and only
trusts remote answers when they agree closely enough.
"""

from quorumclock.timestamp import TimestampSample

__all__ = ["TimestampSample"]
