"""Statements, misbehavior reports and attestations of the statement table.

Authorities circulate statements about parachain candidates: the candidate
itself, or a vote on its validity. Conflicting statements from one authority
are provable misbehavior.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, ClassVar, Hashable, Tuple

__all__ = [
    "Statement",
    "CandidateStatement",
    "ValidStatement",
    "InvalidStatement",
    "SignedStatement",
    "Misbehavior",
    "IssuedAndValidity",
    "IssuedAndInvalidity",
    "ValidityAndInvalidity",
    "DoubleSignKind",
    "DoubleSign",
    "MultipleCandidates",
    "UnauthorizedStatement",
    "AttestationKind",
    "ValidityAttestation",
    "AttestedCandidate",
    "Summary",
]


class Statement:
    """A statement circulated among peers."""

    codec_index: ClassVar[int]


@dataclass(frozen=True)
class CandidateStatement(Statement):
    """An authority proposes this candidate for inclusion."""

    candidate: Any

    codec_index: ClassVar[int] = 1


@dataclass(frozen=True)
class ValidStatement(Statement):
    """An authority attests that the candidate with this digest is valid."""

    digest: Hashable

    codec_index: ClassVar[int] = 2


@dataclass(frozen=True)
class InvalidStatement(Statement):
    """An authority attests that the candidate with this digest is invalid."""

    digest: Hashable

    codec_index: ClassVar[int] = 3


@dataclass(frozen=True)
class SignedStatement:
    """A statement together with its signature and sender."""

    statement: Statement
    signature: Any
    sender: Hashable


class Misbehavior:
    """Provable malicious behaviour by an authority."""


@dataclass(frozen=True)
class IssuedAndValidity(Misbehavior):
    """Issued a candidate and also voted it valid explicitly."""

    issued: Tuple[Any, Any]
    validity: Tuple[Hashable, Any]


@dataclass(frozen=True)
class IssuedAndInvalidity(Misbehavior):
    """Issued a candidate and also voted it invalid."""

    issued: Tuple[Any, Any]
    invalidity: Tuple[Hashable, Any]


@dataclass(frozen=True)
class ValidityAndInvalidity(Misbehavior):
    """Voted a candidate both valid and invalid."""

    digest: Hashable
    valid_signature: Any
    invalid_signature: Any


class DoubleSignKind(enum.Enum):
    """Which statement was signed twice."""

    CANDIDATE = "candidate"
    VALIDITY = "validity"
    INVALIDITY = "invalidity"


@dataclass(frozen=True)
class DoubleSign(Misbehavior):
    """Two different signatures on the same statement.

    ``subject`` is the candidate for CANDIDATE and the digest otherwise.
    """

    kind: DoubleSignKind
    subject: Any
    first: Any
    second: Any


@dataclass(frozen=True)
class MultipleCandidates(Misbehavior):
    """Declared more than one candidate; each entry is (candidate, signature)."""

    first: Tuple[Any, Any]
    second: Tuple[Any, Any]


@dataclass(frozen=True)
class UnauthorizedStatement(Misbehavior):
    """Submitted a statement for a group the sender does not belong to."""

    statement: SignedStatement


class AttestationKind(enum.Enum):
    """How validity was attested."""

    IMPLICIT = "implicit"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class ValidityAttestation:
    """A validity attestation: implicit by issuing, or an explicit vote."""

    kind: AttestationKind
    signature: Any


@dataclass(frozen=True)
class AttestedCandidate:
    """A candidate together with enough validity attestations."""

    group_id: Hashable
    candidate: Any
    validity_votes: Tuple[Tuple[Hashable, ValidityAttestation], ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "validity_votes", tuple(tuple(vote) for vote in self.validity_votes)
        )


@dataclass(frozen=True)
class Summary:
    """Summary of a statement import."""

    candidate: Hashable
    group_id: Hashable
    validity_votes: int
    signalled_bad: bool