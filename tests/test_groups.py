import pytest

from paratable.groups import (
    Chain,
    GroupInfo,
    InvalidDutyRosterLength,
    LocalDuty,
    NotValidator,
    ValidationError,
    make_group_info,
)


def test_chain_constructors():
    assert Chain.relay().is_relay
    assert not Chain.parachain(7).is_relay
    assert Chain.parachain(7).para_id == 7
    assert Chain.parachain(7) == Chain.parachain(7)
    assert Chain.relay() != Chain.parachain(0)


def test_parachain_requires_id():
    with pytest.raises(ValueError):
        Chain.parachain(None)


def test_roster_length_mismatch():
    with pytest.raises(InvalidDutyRosterLength) as info:
        make_group_info([Chain.relay()], ["alice", "bob"], "alice")
    assert info.value.expected == 2
    assert info.value.got == 1
    assert str(info.value) == "Invalid duty roster length: expected 2, got 1"


def test_not_validator():
    with pytest.raises(NotValidator) as info:
        make_group_info([Chain.relay()], ["alice"], "mallory")
    assert info.value.authority_id == "mallory"
    assert isinstance(info.value, ValidationError)


def test_groups_and_local_duty():
    duties = [Chain.parachain(1), Chain.parachain(1), Chain.parachain(2), Chain.relay()]
    authorities = ["alice", "bob", "charlie", "dave"]
    groups, local = make_group_info(duties, authorities, "charlie")

    assert set(groups) == {1, 2}
    assert groups[1].validity_guarantors == {"alice", "bob"}
    assert groups[2].validity_guarantors == {"charlie"}
    assert local == LocalDuty(Chain.parachain(2))


def test_relay_duty_is_local():
    groups, local = make_group_info([Chain.relay()], ["alice"], "alice")
    assert groups == {}
    assert local.validation.is_relay


def test_needed_validity_is_half_rounded_up():
    authorities = [f"v{i}" for i in range(6)]
    duties = [Chain.parachain(1)] * 3 + [Chain.parachain(2)] * 2 + [Chain.parachain(3)]
    groups, _ = make_group_info(duties, authorities, "v0")
    for group in groups.values():
        size = len(group.validity_guarantors)
        assert 2 * group.needed_validity >= size
        assert 2 * (group.needed_validity - 1) < size
    assert groups[1].needed_validity == 2


def test_group_info_default_is_empty():
    info = GroupInfo()
    assert info.validity_guarantors == set()
    assert info.needed_validity == 0