import time
from datetime import datetime, timedelta

import pytest

from paratable.dynamic_inclusion import DynamicInclusion
from paratable.proposal import ProposalTiming, current_timestamp

START = datetime(2020, 1, 1, 12, 0, 0)


def _inclusion():
    return DynamicInclusion(10, START, timedelta(milliseconds=4000))


def test_full_inclusion_ready_after_short_wait():
    timing = ProposalTiming(_inclusion(), 10, START)
    assert timing.enough_candidates == START + timedelta(milliseconds=1)
    assert not timing.ready(10, START)
    assert timing.ready(10, START + timedelta(milliseconds=1))


def test_partial_inclusion_waits_until_threshold():
    timing = ProposalTiming(_inclusion(), 5, START)
    assert timing.enough_candidates == START + timedelta(milliseconds=2000)
    assert not timing.ready(5, START + timedelta(milliseconds=1000))
    assert timing.ready(5, START + timedelta(milliseconds=2000))


def test_more_candidates_make_ready_immediately():
    timing = ProposalTiming(_inclusion(), 5, START)
    assert timing.ready(10, START + timedelta(milliseconds=10))


def test_change_reschedules():
    timing = ProposalTiming(_inclusion(), 0, START)
    assert timing.enough_candidates == START + timedelta(milliseconds=4000)
    assert not timing.ready(5, START)
    assert timing.last_included == 5
    assert timing.enough_candidates == START + timedelta(milliseconds=2000)
    assert timing.ready(5, START + timedelta(milliseconds=2000))


def test_minimum_blocks_until_reached():
    minimum = START + timedelta(seconds=3)
    timing = ProposalTiming(_inclusion(), 10, START, minimum=minimum)
    assert not timing.ready(10, START + timedelta(seconds=1))
    assert timing.minimum == minimum
    assert timing.ready(10, minimum)
    assert timing.minimum is None


def test_now_before_start_rejected():
    with pytest.raises(ValueError):
        ProposalTiming(_inclusion(), 0, START - timedelta(seconds=1))


def test_current_timestamp_is_now():
    before = int(time.time())
    stamp = current_timestamp()
    after = int(time.time())
    assert before <= stamp <= after