"""
Tests for the randomized delay primitive.
"""

import random

import pytest

from bookmark_pipeline.pacing import random_delay


def test_delay_within_inclusive_range():
    slept = []
    rng = random.Random(7)

    delays = [random_delay(1500, 2500, sleep=slept.append, rng=rng) for _ in range(200)]

    assert all(1500 <= d <= 2500 for d in delays)
    assert slept == [d / 1000 for d in delays], "sleep receives seconds"


def test_both_bounds_are_reachable():
    rng = random.Random(0)
    seen = {random_delay(0, 3, sleep=lambda s: None, rng=rng) for _ in range(500)}
    assert seen == {0, 1, 2, 3}


def test_equal_bounds():
    assert random_delay(250, 250, sleep=lambda s: None) == 250


def test_invalid_range():
    with pytest.raises(ValueError):
        random_delay(500, 100, sleep=lambda s: None)
    with pytest.raises(ValueError):
        random_delay(-1, 100, sleep=lambda s: None)
