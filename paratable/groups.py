"""Validator groups computed from a duty roster."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, Optional, Sequence, Set, Tuple

__all__ = [
    "ValidationError",
    "InvalidDutyRosterLength",
    "NotValidator",
    "Chain",
    "GroupInfo",
    "LocalDuty",
    "make_group_info",
]


class ValidationError(Exception):
    """Base class for errors raised during the validation process."""


class InvalidDutyRosterLength(ValidationError):
    """The duty roster does not assign one duty per authority."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"Invalid duty roster length: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class NotValidator(ValidationError):
    """The local authority is not a validator at this block."""

    def __init__(self, authority_id: Hashable) -> None:
        super().__init__(
            f"Local account ID ({authority_id!r}) not a validator at this block."
        )
        self.authority_id = authority_id


@dataclass(frozen=True)
class Chain:
    """A validator duty: the relay chain, or a specific parachain."""

    para_id: Optional[Hashable] = None

    @classmethod
    def relay(cls) -> "Chain":
        """The relay chain."""
        return cls(None)

    @classmethod
    def parachain(cls, para_id: Hashable) -> "Chain":
        """The parachain with the given id."""
        if para_id is None:
            raise ValueError("a parachain needs an id")
        return cls(para_id)

    @property
    def is_relay(self) -> bool:
        return self.para_id is None


@dataclass
class GroupInfo:
    """Authorities checking validity for one parachain, and the votes needed."""

    validity_guarantors: Set[Hashable] = field(default_factory=set)
    needed_validity: int = 0


@dataclass(frozen=True)
class LocalDuty:
    """The local validator's duty."""

    validation: Chain


def make_group_info(
    validator_duty: Sequence[Chain],
    authorities: Sequence[Hashable],
    local_id: Hashable,
) -> Tuple[Dict[Hashable, GroupInfo], LocalDuty]:
    """Compute per-parachain groups and the local duty.

    ``validator_duty`` holds one duty per authority, in the same order.
    Raises InvalidDutyRosterLength when the lengths differ and NotValidator
    when ``local_id`` is not among the authorities.
    """
    if len(validator_duty) != len(authorities):
        raise InvalidDutyRosterLength(len(authorities), len(validator_duty))

    local_validation: Optional[Chain] = None
    groups: Dict[Hashable, GroupInfo] = {}

    for authority, duty in zip(authorities, validator_duty):
        if authority == local_id:
            local_validation = duty
        if not duty.is_relay:
            groups.setdefault(duty.para_id, GroupInfo()).validity_guarantors.add(authority)

    for group in groups.values():
        size = len(group.validity_guarantors)
        group.needed_validity = size // 2 + size % 2

    if local_validation is None:
        raise NotValidator(local_id)
    return groups, LocalDuty(local_validation)