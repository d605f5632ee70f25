"""
Tests for the structured log entries and their narrative text.
"""

import pytest
from pydantic import ValidationError

from tabletop_engine.core.constants import CombatOutcome
from tabletop_engine.core.dice_parser import roll_expression
from tabletop_engine.core.event_system import (
    AttackEvent,
    EncounterEndEvent,
    EventType,
    InitiativeEvent,
    LevelUpEvent,
)


def make_attack(scripted, hit=True, defeated=False):
    return AttackEvent(
        round_number=1,
        actor_id="hero",
        actor_name="Hero",
        target_id="goblin",
        target_name="Goblin",
        attack_name="Longsword",
        attack_roll=roll_expression("1d20+5", scripted(15)),
        target_armor_class=18,
        hit=hit,
        damage_roll=roll_expression("1d8+3", scripted(4)) if hit else None,
        damage=7 if hit else 0,
        target_hit_points=0 if defeated else 7,
        defeated=defeated,
    )


def test_attack_event_text(scripted):
    text = str(make_attack(scripted, defeated=True))
    assert text.startswith("Hero uses Longsword on Goblin (d20(15)+5 = 20 vs AC 18)")
    assert "hits for 7 damage" in text
    assert text.endswith("Goblin is defeated!")


def test_missed_attack_text(scripted):
    assert str(make_attack(scripted, hit=False)).endswith("but misses.")


def test_events_are_immutable(scripted):
    event = make_attack(scripted)
    with pytest.raises(ValidationError):
        event.damage = 99


def test_event_types():
    end = EncounterEndEvent(outcome=CombatOutcome.FLED, round_number=3)
    assert end.event_type == EventType.ON_ENCOUNTER_END
    assert str(end) == "The party flees the encounter."


def test_initiative_event_text(scripted):
    event = InitiativeEvent(actor_id="hero", actor_name="Hero", roll=roll_expression("1d20+2", scripted(9)))
    assert event.event_type == EventType.ON_INITIATIVE
    assert str(event) == "Hero rolls initiative: d20(9)+2 = 11"


def test_level_up_event_text():
    event = LevelUpEvent(
        character_name="Elminster",
        old_level=1,
        new_level=2,
        hit_points_gained=4,
        proficiency_bonus=2,
        new_spells=("Magic Missile",),
    )
    assert str(event) == (
        "Elminster reaches level 2! (+4 max HP, proficiency +2) New: Magic Missile."
    )
