"""Track whether every candidate of a set has become includable."""

from __future__ import annotations

import threading
from typing import Dict, Hashable, Iterable, Optional, Tuple

__all__ = ["IncludabilitySender", "Includable", "track"]


class Includable:
    """Completes once all tracked candidates are includable."""

    def __init__(self, event: threading.Event) -> None:
        self._event = event

    def done(self) -> bool:
        """Whether all tracked candidates are includable."""
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until complete or ``timeout`` seconds pass; return whether complete."""
        return self._event.wait(timeout)


class IncludabilitySender:
    """The updating side of an includability tracker."""

    def __init__(self, tracking: Dict[Hashable, bool], event: threading.Event) -> None:
        self._tracking = tracking
        self._includable_count = sum(1 for flag in tracking.values() if flag)
        self._event: Optional[threading.Event] = event

    def update_candidate(self, candidate: Hashable, includable: bool) -> bool:
        """Record the includability of a tracked candidate.

        Untracked candidates are ignored. Returns True once every tracked
        candidate is includable, meaning this sender is finished.
        """
        if candidate in self._tracking:
            old = self._tracking[candidate]
            self._tracking[candidate] = includable
            if not old and includable:
                self._includable_count += 1
            elif old and not includable:
                self._includable_count -= 1
        return self._try_complete()

    def is_complete(self) -> bool:
        """Whether completion has been signalled."""
        return self._event is None

    def _try_complete(self) -> bool:
        if self._includable_count != len(self._tracking):
            return False
        if self._event is not None:
            self._event.set()
            self._event = None
        return True


def track(candidates: Iterable[Tuple[Hashable, bool]]) -> Tuple[IncludabilitySender, Includable]:
    """Start tracking ``(candidate, includable)`` pairs; later pairs override earlier ones."""
    event = threading.Event()
    sender = IncludabilitySender(dict(candidates), event)
    sender._try_complete()
    return sender, Includable(event)