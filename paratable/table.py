"""The statement table: stores the statements authorities issue about candidates.

Each parachain group votes on the validity of candidates. Once enough
members of a group have attested validity and nobody has called the
candidate invalid, it becomes includable. Conflicting statements are
recorded as misbehavior of their sender.
"""

from __future__ import annotations

import abc
from types import MappingProxyType
from typing import Any, Dict, Hashable, List, Mapping, Optional, Tuple

from paratable.candidate import CandidateData, ValidityVote, VoteKind
from paratable.statements import (
    AttestedCandidate,
    CandidateStatement,
    DoubleSign,
    DoubleSignKind,
    InvalidStatement,
    IssuedAndInvalidity,
    IssuedAndValidity,
    Misbehavior,
    MultipleCandidates,
    SignedStatement,
    Summary,
    UnauthorizedStatement,
    ValidityAndInvalidity,
    ValidStatement,
)

__all__ = ["Context", "Table"]


class Context(abc.ABC):
    """Knowledge about candidates and groups that the table relies on."""

    @abc.abstractmethod
    def candidate_digest(self, candidate: Any) -> Hashable:
        """Return the digest uniquely identifying a candidate."""

    @abc.abstractmethod
    def candidate_group(self, candidate: Any) -> Hashable:
        """Return the group a candidate belongs to."""

    @abc.abstractmethod
    def is_member_of(self, authority: Hashable, group: Hashable) -> bool:
        """Whether an authority may submit candidates and vote in a group."""

    @abc.abstractmethod
    def requisite_votes(self, group: Hashable) -> int:
        """Number of validity votes a group needs for inclusion."""


class _Misbehaved(Exception):
    def __init__(self, misbehavior: Misbehavior) -> None:
        super().__init__(misbehavior)
        self.misbehavior = misbehavior


_DOUBLE_SIGN_KINDS = {
    VoteKind.ISSUED: DoubleSignKind.CANDIDATE,
    VoteKind.VALID: DoubleSignKind.VALIDITY,
    VoteKind.INVALID: DoubleSignKind.INVALIDITY,
}


def _double_vote(
    old: ValidityVote, new: ValidityVote, candidate: Any, digest: Hashable
) -> Misbehavior:
    if old.kind is new.kind:
        kind = _DOUBLE_SIGN_KINDS[old.kind]
        subject = candidate if old.kind is VoteKind.ISSUED else digest
        return DoubleSign(kind, subject, old.signature, new.signature)

    by_kind = {old.kind: old.signature, new.kind: new.signature}
    if VoteKind.ISSUED in by_kind and VoteKind.VALID in by_kind:
        return IssuedAndValidity(
            (candidate, by_kind[VoteKind.ISSUED]), (digest, by_kind[VoteKind.VALID])
        )
    if VoteKind.ISSUED in by_kind and VoteKind.INVALID in by_kind:
        return IssuedAndInvalidity(
            (candidate, by_kind[VoteKind.ISSUED]), (digest, by_kind[VoteKind.INVALID])
        )
    return ValidityAndInvalidity(digest, by_kind[VoteKind.VALID], by_kind[VoteKind.INVALID])


class Table:
    """Stores votes on candidates and the misbehavior detected among them."""

    def __init__(self) -> None:
        self._proposals: Dict[Hashable, Tuple[Hashable, Any]] = {}
        self._misbehavior: Dict[Hashable, Misbehavior] = {}
        self._candidate_votes: Dict[Hashable, CandidateData] = {}
        self._includable_count: Dict[Hashable, int] = {}

    def proposed_candidates(self, context: Context) -> List[AttestedCandidate]:
        """The best includable candidate of each group, sorted by group id.

        Among several includable candidates of one group the lowest wins.
        """
        best: Dict[Hashable, Tuple[CandidateData, int]] = {}
        for data in self._candidate_votes.values():
            group_id = data.group_id
            if group_id not in self._includable_count:
                continue
            threshold = context.requisite_votes(group_id)
            if not data.can_be_included(threshold):
                continue
            current = best.get(group_id)
            if current is None:
                best[group_id] = (data, threshold)
            elif current[0].candidate > data.candidate:
                best[group_id] = (data, current[1])

        proposed = []
        for group_id in sorted(best):
            data, threshold = best[group_id]
            attested = data.attested(threshold)
            if attested is None:
                raise RuntimeError("includable candidate produced no attestation")
            proposed.append(attested)
        return proposed

    def candidate_includable(self, digest: Hashable, context: Context) -> bool:
        """Whether the candidate with this digest can be included."""
        data = self._candidate_votes.get(digest)
        if data is None:
            return False
        return data.can_be_included(context.requisite_votes(data.group_id))

    def import_statement(
        self, context: Context, statement: SignedStatement
    ) -> Optional[Summary]:
        """Import a signed statement whose signature has already been checked.

        Returns a summary of the affected candidate, or None when the
        statement was a duplicate, referred to an unknown candidate, or
        constituted misbehavior (which is then recorded against the sender).
        """
        signer = statement.sender
        signature = statement.signature
        inner = statement.statement
        try:
            if isinstance(inner, CandidateStatement):
                return self._import_candidate(context, signer, inner.candidate, signature)
            if isinstance(inner, ValidStatement):
                vote = ValidityVote(VoteKind.VALID, signature)
            elif isinstance(inner, InvalidStatement):
                vote = ValidityVote(VoteKind.INVALID, signature)
            else:
                raise TypeError(f"unknown statement type: {type(inner).__name__}")
            return self._validity_vote(context, signer, inner.digest, vote)
        except _Misbehaved as exc:
            # punishments are not cumulative: the latest proof replaces earlier ones.
            self._misbehavior[signer] = exc.misbehavior
            return None

    def get_candidate(self, digest: Hashable) -> Optional[Any]:
        """The candidate with the given digest, if known."""
        data = self._candidate_votes.get(digest)
        return None if data is None else data.candidate

    def misbehavior(self) -> Mapping[Hashable, Misbehavior]:
        """Read-only view of all witnessed misbehavior, keyed by authority."""
        return MappingProxyType(self._misbehavior)

    def includable_count(self) -> int:
        """Number of groups that currently have an includable candidate."""
        return len(self._includable_count)

    def _import_candidate(
        self, context: Context, sender: Hashable, candidate: Any, signature: Any
    ) -> Optional[Summary]:
        group = context.candidate_group(candidate)
        if not context.is_member_of(sender, group):
            raise _Misbehaved(
                UnauthorizedStatement(
                    SignedStatement(CandidateStatement(candidate), signature, sender)
                )
            )

        digest = context.candidate_digest(candidate)
        existing = self._proposals.get(sender)
        if existing is not None:
            old_digest, old_signature = existing
            if old_digest != digest:
                old_candidate = self._candidate_votes[old_digest].candidate
                raise _Misbehaved(
                    MultipleCandidates(
                        first=(old_candidate, old_signature),
                        second=(candidate, signature),
                    )
                )
        else:
            self._proposals[sender] = (digest, signature)
            self._candidate_votes.setdefault(digest, CandidateData(group, candidate))

        return self._validity_vote(
            context, sender, digest, ValidityVote(VoteKind.ISSUED, signature)
        )

    def _validity_vote(
        self, context: Context, sender: Hashable, digest: Hashable, vote: ValidityVote
    ) -> Optional[Summary]:
        votes = self._candidate_votes.get(digest)
        if votes is None:
            return None

        threshold = context.requisite_votes(votes.group_id)
        was_includable = votes.can_be_included(threshold)

        if not context.is_member_of(sender, votes.group_id):
            if vote.kind is VoteKind.ISSUED:
                raise RuntimeError(
                    "implicit issuance vote cast without group membership of issuer"
                )
            statement = (
                ValidStatement(digest) if vote.kind is VoteKind.VALID else InvalidStatement(digest)
            )
            raise _Misbehaved(
                UnauthorizedStatement(SignedStatement(statement, vote.signature, sender))
            )

        previous = votes.validity_votes.get(sender)
        if previous is not None:
            if previous == vote:
                return None
            raise _Misbehaved(_double_vote(previous, vote, votes.candidate, digest))

        if vote.kind is VoteKind.INVALID:
            votes.indicated_bad_by.append(sender)
        votes.validity_votes[sender] = vote

        is_includable = votes.can_be_included(threshold)
        self._update_includable_count(votes.group_id, was_includable, is_includable)
        return votes.summary(digest)

    def _update_includable_count(
        self, group_id: Hashable, was_includable: bool, is_includable: bool
    ) -> None:
        if was_includable and not is_includable:
            if group_id in self._includable_count:
                self._includable_count[group_id] -= 1
                if self._includable_count[group_id] == 0:
                    del self._includable_count[group_id]
        elif is_includable and not was_includable:
            self._includable_count[group_id] = self._includable_count.get(group_id, 0) + 1