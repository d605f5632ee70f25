"""
Tests for the injectable random sources.
"""

import random

import pytest

from tabletop_engine.core.error_handling import ScriptExhausted
from tabletop_engine.core.rng import RandomSource, ScriptedRandom, default_rng


def test_random_sources_satisfy_protocol():
    assert isinstance(random.Random(1), RandomSource)
    assert isinstance(ScriptedRandom([1]), RandomSource)
    assert isinstance(default_rng(3), RandomSource)


def test_default_rng_is_seedable():
    first = default_rng(99)
    second = default_rng(99)
    assert [first.randint(1, 20) for _ in range(10)] == [second.randint(1, 20) for _ in range(10)]


def test_scripted_random_replays_in_order():
    rng = ScriptedRandom([4, 2, 6])
    assert [rng.randint(1, 6) for _ in range(3)] == [4, 2, 6]
    assert rng.draws == 3
    assert rng.remaining == 0


def test_scripted_random_raises_when_exhausted():
    rng = ScriptedRandom([1])
    rng.randint(1, 6)
    with pytest.raises(ScriptExhausted) as exc_info:
        rng.randint(1, 6)
    assert exc_info.value.context["draws"] == 1


def test_scripted_random_rejects_out_of_range_value_without_consuming_it():
    rng = ScriptedRandom([7])
    with pytest.raises(ValueError, match="outside"):
        rng.randint(1, 6)
    assert rng.remaining == 1
    assert rng.randint(1, 8) == 7


def test_scripted_random_extend():
    rng = ScriptedRandom([])
    rng.extend([2, 3])
    assert rng.remaining == 2
    assert rng.randint(1, 4) == 2
