"""Messages passed between parachains."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterable, Tuple

__all__ = ["OutgoingMessage", "Extrinsic", "MessagesFrom"]


@dataclass(frozen=True)
class OutgoingMessage:
    """A message sent to the parachain ``target``."""

    target: Hashable
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class Extrinsic:
    """Extrinsic data of a parachain candidate: its outgoing messages."""

    outgoing_messages: Tuple[OutgoingMessage, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "outgoing_messages", tuple(self.outgoing_messages))


@dataclass(frozen=True)
class MessagesFrom:
    """Messages originating from the parachain ``source``."""

    source: Hashable
    messages: Extrinsic

    @classmethod
    def from_messages(
        cls, source: Hashable, messages: Iterable[OutgoingMessage]
    ) -> "MessagesFrom":
        """Build from raw outgoing messages."""
        return cls(source=source, messages=Extrinsic(tuple(messages)))