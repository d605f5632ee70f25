"""
Tests for experience awards and level ups.
"""

import pytest

from tabletop_engine.character.main import create_character, load_character
from tabletop_engine.character.progression import (
    ProgressionEngine,
    experience_to_next_level,
    level_for_experience,
    level_progress,
)
from tabletop_engine.core.constants import XP_THRESHOLDS
from tabletop_engine.core.error_handling import InvalidAmount
from tabletop_engine.core.event_system import EventType, LevelUpEvent


@pytest.fixture
def engine(fighter_class, wizard_class):
    return ProgressionEngine(classes={c.name: c for c in (fighter_class, wizard_class)})


@pytest.fixture
def level_ups(engine):
    events: list[LevelUpEvent] = []
    engine.subscribe(events.append)
    return events


@pytest.mark.parametrize(
    "experience, level",
    [(0, 1), (299, 1), (300, 2), (899, 2), (900, 3), (2700, 4), (354999, 19), (355000, 20), (10**9, 20)],
)
def test_level_for_experience(experience, level):
    assert level_for_experience(experience) == level


def test_experience_to_next_level():
    assert experience_to_next_level(0) == 300
    assert experience_to_next_level(300) == 600
    assert experience_to_next_level(XP_THRESHOLDS[-1]) == 0


def test_level_progress():
    assert level_progress(0) == 0.0
    assert level_progress(150) == 50.0
    assert level_progress(XP_THRESHOLDS[-1] + 1) == 100.0


def test_award_crossing_one_threshold(engine, level_ups, fighter):
    """
    Test the reference level up: constitution +2 and a d10 hit die give 12
    HP at level 1, and reaching level 2 adds 7.
    """
    updated = engine.award_experience(fighter, 300)

    assert updated.level == 2
    assert updated.experience == 300
    assert updated.max_hit_points == 19
    assert updated.hit_points == 19
    assert updated.abilities == frozenset({"Second Wind", "Action Surge"})

    assert len(level_ups) == 1
    event = level_ups[0]
    assert event.event_type == EventType.ON_LEVEL_UP
    assert (event.old_level, event.new_level) == (1, 2)
    assert event.levels_gained == 1
    assert event.hit_points_gained == 7
    assert event.proficiency_bonus == 2
    assert event.new_abilities == ("Action Surge",)
    assert "reaches level 2" in str(event)


def test_award_does_not_mutate_input(engine, fighter):
    engine.award_experience(fighter, 300)
    assert fighter.level == 1
    assert fighter.experience == 0


def test_zero_award_is_identity(engine, level_ups, fighter):
    assert engine.award_experience(fighter, 0) is fighter
    assert level_ups == []


def test_negative_award_is_rejected(engine, fighter):
    with pytest.raises(InvalidAmount) as exc_info:
        engine.award_experience(fighter, -5)
    assert exc_info.value.context["amount"] == -5


def test_award_below_threshold_only_adds_experience(engine, level_ups, fighter):
    updated = engine.award_experience(fighter, 299)
    assert updated.level == 1
    assert updated.experience == 299
    assert updated.max_hit_points == fighter.max_hit_points
    assert level_ups == []


def test_award_crossing_several_thresholds(engine, level_ups, fighter):
    updated = engine.award_experience(fighter, 2700)
    assert updated.level == 4
    assert updated.max_hit_points == 12 + 3 * 7
    assert updated.proficiency_bonus == 2
    assert updated.abilities == frozenset({"Second Wind", "Action Surge", "Extra Attack"})
    assert len(level_ups) == 1
    assert level_ups[0].levels_gained == 3


def test_level_up_unlocks_spells(engine, level_ups, wizard_class):
    wizard = create_character("Elminster", wizard_class)
    updated = engine.award_experience(wizard, 2700)
    assert updated.spells == frozenset({"Magic Missile", "Fireball"})
    assert level_ups[0].new_spells == ("Fireball", "Magic Missile")


def test_level_up_heals_by_the_gain_only(engine, fighter):
    wounded = fighter.with_hit_points(5)
    updated = engine.award_experience(wounded, 300)
    assert updated.max_hit_points == 19
    assert updated.hit_points == 12


def test_awards_are_monotonic(engine, fighter):
    character = fighter
    for amount in (100, 250, 0, 600, 1, 5000, 40000):
        updated = engine.award_experience(character, amount)
        assert updated.level >= character.level
        assert updated.experience >= character.experience
        assert updated.max_hit_points >= character.max_hit_points
        character = updated
    assert character.level == level_for_experience(character.experience)


def test_persisted_level_is_never_demoted(engine, fighter):
    veteran = fighter.model_copy(update={"level": 5})
    updated = engine.award_experience(veteran, 10)
    assert updated.level == 5
    assert updated.experience == 10


def test_unknown_class_warns_and_unlocks_nothing(engine, fighter, mocker):
    warn = mocker.patch("tabletop_engine.character.progression.log_warning")
    stranger = fighter.model_copy(update={"class_name": "Necromancer"})
    updated = engine.award_experience(stranger, 300)
    assert updated.level == 2
    assert updated.abilities == stranger.abilities
    warn.assert_called_once()


def test_unsubscribe_stops_notifications(engine, fighter):
    events: list[LevelUpEvent] = []
    engine.subscribe(events.append)
    engine.unsubscribe(events.append)
    engine.award_experience(fighter, 300)
    assert events == []


def test_custom_experience_table(fighter):
    engine = ProgressionEngine(thresholds=[0, 100, 200])
    assert engine.max_level == 3
    assert engine.award_experience(fighter, 1000).level == 3


@pytest.mark.parametrize("thresholds", [[], [10, 100], [0, 100, 100], [0, 200, 100]])
def test_invalid_experience_table(thresholds):
    with pytest.raises(ValueError):
        ProgressionEngine(thresholds=thresholds)


@pytest.mark.parametrize("amount", [0, 1])
def test_small_awards_agree_with_the_table(engine, fighter, amount):
    seasoned = load_character(
        fighter.model_dump() | {"level": 9, "experience": 50000, "max_hit_points": 60}
    )
    updated = engine.award_experience(seasoned, amount)
    assert updated.level == 9
    assert updated.level == level_for_experience(updated.experience)
    assert updated.proficiency_bonus == 4
