from __future__ import annotations

import math

from app.index.candidates import CandidateSet
from app.models.driver import Driver


def _d(driver_id: int) -> Driver:
    return Driver(id=driver_id, lat=0.0, lng=0.0)


def test_zero_capacity_keeps_nothing():
    cs = CandidateSet(0)

    assert cs.offer(1.0, _d(1)) is False
    assert len(cs) == 0
    assert cs.is_full()


def test_worst_distance_is_infinite_until_full():
    cs = CandidateSet(2)
    cs.offer(3.0, _d(1))

    assert cs.worst_distance() == math.inf

    cs.offer(1.0, _d(2))
    assert cs.worst_distance() == 3.0


def test_closer_candidate_replaces_worst():
    cs = CandidateSet(2)
    cs.offer(5.0, _d(1))
    cs.offer(2.0, _d(2))

    assert cs.offer(6.0, _d(3)) is False
    assert cs.offer(1.0, _d(4)) is True

    assert [d.id for d in cs.drivers()] == [4, 2]
    assert [dist for dist, _ in cs.ordered()] == [1.0, 2.0]


def test_equal_distance_does_not_replace_and_ties_keep_visit_order():
    cs = CandidateSet(2)
    cs.offer(1.0, _d(1))
    cs.offer(1.0, _d(2))

    assert cs.offer(1.0, _d(3)) is False
    assert [d.id for d in cs.drivers()] == [1, 2]


def test_negative_capacity_is_treated_as_zero():
    cs = CandidateSet(-3)

    assert cs.capacity == 0
    assert cs.offer(0.0, _d(1)) is False
