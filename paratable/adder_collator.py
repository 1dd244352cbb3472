"""Collator producing candidates for the adder parachain."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Hashable, Iterable, NamedTuple, Tuple

from paratable.adder import BlockData, HeadData, execute, process_messages

__all__ = ["InvalidHead", "AdderCollator", "genesis_description", "GENESIS", "GENESIS_BODY"]

logger = logging.getLogger(__name__)

_U64_MASK = (1 << 64) - 1

GENESIS = HeadData(
    number=0,
    parent_hash=bytes(32),
    post_state=bytes(
        [
            1, 27, 77, 3, 221, 140, 1, 241, 4, 145, 67, 207, 156, 76, 129, 126,
            75, 22, 127, 29, 27, 131, 229, 198, 240, 241, 13, 137, 186, 30, 123, 206,
        ]
    ),
)

GENESIS_BODY = BlockData(state=0, add=0)


class InvalidHead(Exception):
    """The given head data could not be decoded."""


class Candidate(NamedTuple):
    """An encoded block body, encoded head, and the outgoing messages."""

    block_data: bytes
    head_data: bytes
    outgoing_messages: Tuple = ()


class AdderCollator:
    """Produces successive adder blocks, remembering every body it made."""

    def __init__(self) -> None:
        self._db: Dict[HeadData, BlockData] = {}
        self._lock = threading.Lock()

    def produce_candidate(
        self, last_head: bytes, ingress: Iterable[Tuple[Hashable, bytes]]
    ) -> Candidate:
        """Build the next block on top of ``last_head``.

        ``ingress`` yields ``(parachain id, message bytes)`` pairs. Raises
        InvalidHead when the head cannot be decoded and KeyError when the
        head was not produced by this collator.
        """
        try:
            adder_head = HeadData.decode(last_head)
        except ValueError as exc:
            raise InvalidHead("could not decode head data") from exc

        with self._lock:
            if adder_head == GENESIS:
                last_body = GENESIS_BODY
            else:
                try:
                    last_body = self._db[adder_head]
                except KeyError:
                    raise KeyError("no stored body for the given head") from None

            next_body = BlockData(
                state=(last_body.state + last_body.add) & _U64_MASK,
                add=adder_head.number % 100,
            )
            from_messages = process_messages(message for _, message in ingress)
            next_head = execute(adder_head.hash(), adder_head, next_body, from_messages)

            logger.info(
                "Created collation for #%d, post-state=%d",
                next_head.number,
                (next_body.state + next_body.add) & _U64_MASK,
            )
            self._db[next_head] = next_body

        return Candidate(block_data=next_body.encode(), head_data=next_head.encode())


def genesis_description() -> str:
    """Describe the genesis head in decimal and hex byte form."""
    encoded = GENESIS.encode()
    return (
        "Starting adder collator with genesis: \n"
        f"Dec: {list(encoded)}\n"
        f"Hex: 0x{encoded.hex()}"
    )