import dataclasses

import pytest

from paratable.statements import (
    AttestationKind,
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
    Statement,
    Summary,
    UnauthorizedStatement,
    ValidityAndInvalidity,
    ValidityAttestation,
    ValidStatement,
)


def test_codec_indices():
    assert CandidateStatement((2, 100)).codec_index == 1
    assert ValidStatement(100).codec_index == 2
    assert InvalidStatement(100).codec_index == 3


def test_statement_kinds_are_distinct():
    statements = {ValidStatement(100), InvalidStatement(100), CandidateStatement((2, 100))}
    assert len(statements) == 3
    assert ValidStatement(100) in statements
    assert all(isinstance(s, Statement) for s in statements)


def test_signed_statement_equality():
    a = SignedStatement(statement=CandidateStatement((2, 100)), signature=1, sender=1)
    b = SignedStatement(statement=CandidateStatement((2, 100)), signature=1, sender=1)
    c = SignedStatement(statement=CandidateStatement((2, 999)), signature=1, sender=1)
    assert a == b
    assert len({a, b, c}) == 2


def test_statements_are_frozen():
    statement = ValidStatement(100)
    with pytest.raises(dataclasses.FrozenInstanceError):
        statement.digest = 5
    assert statement.digest == 100
    assert statement == ValidStatement(100)


def test_misbehavior_kinds_equality():
    reports = [
        IssuedAndValidity(((2, 100), 1), (100, 1)),
        IssuedAndInvalidity(((2, 100), 1), (100, 1)),
        ValidityAndInvalidity(100, 2, 2),
        DoubleSign(DoubleSignKind.VALIDITY, 100, 2, 222),
        MultipleCandidates(((2, 100), 1), ((2, 999), 1)),
        UnauthorizedStatement(SignedStatement(ValidStatement(100), 2, 2)),
    ]
    assert all(isinstance(report, Misbehavior) for report in reports)
    assert len(set(reports)) == len(reports)
    assert reports[2] == ValidityAndInvalidity(100, 2, 2)


def test_double_sign_kind_matters():
    validity = DoubleSign(DoubleSignKind.VALIDITY, 100, 3, 333)
    invalidity = DoubleSign(DoubleSignKind.INVALIDITY, 100, 3, 333)
    assert len({validity, invalidity}) == 2
    assert validity.kind is DoubleSignKind.VALIDITY


def test_attested_candidate_normalises_votes():
    votes = [[1, ValidityAttestation(AttestationKind.IMPLICIT, 1)],
             (2, ValidityAttestation(AttestationKind.EXPLICIT, 2))]
    attested = AttestedCandidate(group_id=2, candidate=(2, 100), validity_votes=votes)
    assert attested.validity_votes == (
        (1, ValidityAttestation(AttestationKind.IMPLICIT, 1)),
        (2, ValidityAttestation(AttestationKind.EXPLICIT, 2)),
    )
    assert hash(attested) == hash(
        AttestedCandidate(2, (2, 100), tuple(tuple(v) for v in votes))
    )


def test_summary_fields():
    summary = Summary(candidate=100, group_id=2, validity_votes=1, signalled_bad=False)
    assert summary == Summary(100, 2, 1, False)
    assert summary.validity_votes == 1
    assert summary.signalled_bad is False