"""Inclusion threshold that relaxes linearly over time."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

__all__ = ["DynamicInclusion"]

_MICROSECOND = timedelta(microseconds=1)


def _to_micros(duration: timedelta) -> int:
    return duration // _MICROSECOND


class DynamicInclusion:
    """Dynamic inclusion threshold over time.

    The number of parachain candidates required falls linearly from
    ``initial`` at ``start`` to zero once ``allow_empty`` has elapsed.
    Instants are ``datetime`` values and durations are ``timedelta`` values.
    """

    def __init__(self, initial: int, start: datetime, allow_empty: timedelta) -> None:
        if initial < 0:
            raise ValueError("initial must not be negative")
        if allow_empty < timedelta(0):
            raise ValueError("allow_empty must not be negative")
        self.start = start
        if initial:
            self._y = _to_micros(allow_empty)
            # negative slope, in microseconds per included candidate
            self._m = self._y // initial
        else:
            self._y = 0
            self._m = 0

    def acceptable_in(self, now: datetime, included: int) -> Optional[datetime]:
        """Return the instant after which ``included`` candidates suffice.

        Returns None if that many candidates are already sufficient.
        Raises ValueError if ``now`` is earlier than the start.
        """
        if now < self.start:
            raise ValueError("now is earlier than the start")
        elapsed = _to_micros(now - self.start)
        valid_after = max(self._y - self._m * included, 0)

        if elapsed >= valid_after:
            return None
        return now + timedelta(milliseconds=(valid_after - elapsed) // 1000)

    def __repr__(self) -> str:
        return f"DynamicInclusion(start={self.start!r}, y={self._y}, m={self._m})"