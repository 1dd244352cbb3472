import dataclasses

import pytest

from paratable.messages import Extrinsic, MessagesFrom, OutgoingMessage


def test_outgoing_message_coerces_data_to_bytes():
    message = OutgoingMessage(target=3, data=[1, 1, 1])
    assert message.data == b"\x01\x01\x01"
    assert message.target == 3


def test_outgoing_message_is_immutable():
    message = OutgoingMessage(target=1, data=b"")
    with pytest.raises(dataclasses.FrozenInstanceError):
        message.target = 2
    assert message.target == 1
    assert message == OutgoingMessage(1, b"")


def test_extrinsic_defaults_to_no_messages():
    assert Extrinsic().outgoing_messages == ()


def test_extrinsic_stores_messages_as_tuple():
    messages = [OutgoingMessage(1, b"\x01\x02\x03"), OutgoingMessage(2, b"\x04\x05\x06")]
    extrinsic = Extrinsic(messages)
    assert extrinsic.outgoing_messages == tuple(messages)
    assert extrinsic == Extrinsic(tuple(messages))


def test_messages_from_wraps_raw_messages():
    messages = [OutgoingMessage(1, b"\x07\x08\x09")]
    result = MessagesFrom.from_messages(5, messages)
    assert result.source == 5
    assert result.messages == Extrinsic(outgoing_messages=tuple(messages))


def test_messages_from_accepts_generator():
    result = MessagesFrom.from_messages(2, (OutgoingMessage(t, b"") for t in (1, 3)))
    assert [m.target for m in result.messages.outgoing_messages] == [1, 3]


def test_messages_from_is_hashable_and_equal_by_value():
    a = MessagesFrom.from_messages(4, [OutgoingMessage(1, b"a")])
    b = MessagesFrom.from_messages(4, [OutgoingMessage(1, b"a")])
    assert a == b
    assert len({a, b}) == 1