"""Timing of block proposals while waiting for includable candidates."""

from __future__ import annotations

import time
from datetime import datetime, timedelta
from typing import Optional

from paratable.dynamic_inclusion import DynamicInclusion

__all__ = ["ProposalTiming", "current_timestamp"]

_MIN_WAIT = timedelta(milliseconds=1)


def current_timestamp() -> int:
    """Seconds since the Unix epoch."""
    return int(time.time())


class ProposalTiming:
    """Decides when enough candidates are includable to attempt a proposal.

    ``minimum`` is an optional instant before which no proposal is made.
    """

    def __init__(
        self,
        dynamic_inclusion: DynamicInclusion,
        initial_included: int,
        now: datetime,
        minimum: Optional[datetime] = None,
    ) -> None:
        self.dynamic_inclusion = dynamic_inclusion
        self.minimum = minimum
        self.last_included = initial_included
        acceptable = dynamic_inclusion.acceptable_in(now, initial_included)
        self.enough_candidates = acceptable if acceptable is not None else now + _MIN_WAIT

    def ready(self, included: int, now: datetime) -> bool:
        """Whether it is time to propose with ``included`` includable candidates."""
        if self.minimum is not None:
            if now < self.minimum:
                return False
            self.minimum = None

        if included == self.last_included:
            return now >= self.enough_candidates

        # the number of includable candidates changed; reschedule if still insufficient.
        acceptable = self.dynamic_inclusion.acceptable_in(now, included)
        if acceptable is None:
            return True
        self.last_included = included
        self.enough_candidates = acceptable
        return now >= acceptable