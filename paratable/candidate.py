"""Votes and bookkeeping for a single candidate in the statement table."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Dict, Hashable, List, Optional

from paratable.statements import (
    AttestationKind,
    AttestedCandidate,
    Summary,
    ValidityAttestation,
)

__all__ = ["VoteKind", "ValidityVote", "CandidateData"]


class VoteKind(enum.Enum):
    """The kinds of validity vote an authority can cast."""

    ISSUED = "issued"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class ValidityVote:
    """A validity vote: implicit by issuing, or an explicit valid/invalid vote."""

    kind: VoteKind
    signature: Any


_ATTESTATION_KINDS = {
    VoteKind.ISSUED: AttestationKind.IMPLICIT,
    VoteKind.VALID: AttestationKind.EXPLICIT,
}


@dataclass
class CandidateData:
    """Stores the votes cast on one candidate."""

    group_id: Hashable
    candidate: Any
    validity_votes: Dict[Hashable, ValidityVote] = field(default_factory=dict)
    indicated_bad_by: List[Hashable] = field(default_factory=list)

    def indicated_bad(self) -> bool:
        """Whether anyone has voted this candidate invalid."""
        return bool(self.indicated_bad_by)

    def can_be_included(self, validity_threshold: int) -> bool:
        """Enough validity votes and nobody has called it bad."""
        return not self.indicated_bad_by and len(self.validity_votes) >= validity_threshold

    def attested(self, validity_threshold: int) -> Optional[AttestedCandidate]:
        """Return a full attestation if the candidate can be included, else None."""
        if not self.can_be_included(validity_threshold):
            return None

        attestations = (
            (authority, ValidityAttestation(_ATTESTATION_KINDS[vote.kind], vote.signature))
            for authority, vote in self.validity_votes.items()
            if vote.kind is not VoteKind.INVALID
        )
        votes = tuple(islice(attestations, validity_threshold))
        if len(votes) != validity_threshold:
            raise RuntimeError(
                "candidate is includable but lacks enough validity attestations"
            )
        return AttestedCandidate(
            group_id=self.group_id,
            candidate=self.candidate,
            validity_votes=votes,
        )

    def summary(self, digest: Hashable) -> Summary:
        """Summarise the current state of the votes on this candidate."""
        return Summary(
            candidate=digest,
            group_id=self.group_id,
            validity_votes=len(self.validity_votes) - len(self.indicated_bad_by),
            signalled_bad=self.indicated_bad(),
        )