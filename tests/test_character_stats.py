"""
Tests for ability scores and the derived character values.
"""

import pytest

from tabletop_engine.character.character_stats import (
    AbilityScores,
    derive_armor_class,
    derive_hit_points,
    hit_points_at_first_level,
    hit_points_per_level,
    proficiency_bonus,
    skill_bonus,
)
from tabletop_engine.core.utils import ability_modifier


@pytest.mark.parametrize(
    "score, expected",
    [(1, -5), (8, -1), (9, -1), (10, 0), (11, 0), (12, 1), (15, 2), (20, 5), (30, 10)],
)
def test_ability_modifier(score, expected):
    assert ability_modifier(score) == expected


def test_ability_scores_modifiers():
    scores = AbilityScores(strength=16, dexterity=7, constitution=14, charisma=20)
    assert scores.STR == 3
    assert scores.DEX == -2
    assert scores.CON == 2
    assert scores.INT == 0
    assert scores.CHA == 5
    assert scores.score("Strength") == 16
    assert scores.modifier("dexterity") == -2


def test_ability_scores_unknown_name():
    with pytest.raises(KeyError):
        AbilityScores().score("luck")


def test_scores_above_twenty_are_kept():
    assert AbilityScores(strength=24).STR == 7


class _Holder:
    def __init__(self, scores: AbilityScores) -> None:
        self.ability_scores = scores


def test_derive_armor_class():
    assert derive_armor_class(_Holder(AbilityScores(dexterity=14))) == 12
    assert derive_armor_class(_Holder(AbilityScores(dexterity=6))) == 8


def test_hit_points_first_level_and_growth():
    """
    Test the average-roll convention: full hit die at level 1, then half
    the die rounded up, both plus the constitution modifier.
    """
    assert derive_hit_points(10, 2, 1) == 12
    assert derive_hit_points(10, 2, 2) == 19
    assert derive_hit_points(10, 2, 3) == 26
    assert derive_hit_points(6, 0, 4) == 6 + 3 * 3


def test_hit_points_never_below_one_per_level():
    assert hit_points_at_first_level(6, -8) == 1
    assert hit_points_per_level(6, -8) == 1
    assert derive_hit_points(6, -8, 5) == 5


def test_derive_hit_points_requires_positive_level():
    with pytest.raises(ValueError):
        derive_hit_points(8, 0, 0)


@pytest.mark.parametrize(
    "level, expected",
    [(1, 2), (4, 2), (5, 3), (8, 3), (9, 4), (12, 4), (13, 5), (16, 5), (17, 6), (20, 6)],
)
def test_proficiency_bonus(level, expected):
    assert proficiency_bonus(level) == expected


def test_skill_bonus():
    assert skill_bonus(14, proficient=False, level=5) == 2
    assert skill_bonus(14, proficient=True, level=5) == 5
    assert skill_bonus(8, proficient=True, level=1) == 1
