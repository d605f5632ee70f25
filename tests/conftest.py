"""
Shared fixtures for the resolution engine tests.
"""

import pytest

from tabletop_engine.character.character_class import CharacterClass
from tabletop_engine.character.character_stats import AbilityScores
from tabletop_engine.character.main import CharacterModel
from tabletop_engine.combat.attack import AttackProfile
from tabletop_engine.combat.combatant import Combatant
from tabletop_engine.core.constants import Side
from tabletop_engine.core.content import ContentRepository
from tabletop_engine.core.rng import ScriptedRandom


@pytest.fixture(autouse=True)
def fresh_content_repository():
    ContentRepository.reset()
    yield
    ContentRepository.reset()


@pytest.fixture
def fighter_class():
    return CharacterClass(
        name="Fighter",
        hit_die=10,
        default_attack=AttackProfile(name="Longsword", damage="1d8"),
        abilities_by_level={
            "1": ["Second Wind"],
            "2": ["Action Surge"],
            "3": ["Extra Attack"],
        },
        spells_by_level={},
    )


@pytest.fixture
def wizard_class():
    return CharacterClass(
        name="Wizard",
        hit_die=6,
        default_attack=AttackProfile(name="Quarterstaff", damage="1d6"),
        abilities_by_level={
            "1": ["Spellcasting"],
            "2": ["Arcane Recovery"],
        },
        spells_by_level={
            "2": ["Magic Missile"],
            "4": ["Fireball"],
        },
    )


@pytest.fixture
def fighter(fighter_class):
    """A level 1 fighter with constitution 14 (+2): 10 + 2 = 12 HP."""
    return CharacterModel(
        name="Brienne",
        class_name=fighter_class.name,
        level=1,
        experience=0,
        ability_scores=AbilityScores(strength=16, dexterity=12, constitution=14),
        hit_die=fighter_class.hit_die,
        hit_points=12,
        max_hit_points=12,
        abilities=frozenset({"Second Wind"}),
    )


@pytest.fixture
def make_combatant():
    def _make(
        combatant_id: str,
        side: Side = Side.OPPONENT,
        hit_points: int = 10,
        armor_class: int = 12,
        dexterity_modifier: int = 0,
        attack_modifier: int = 0,
        damage: str = "1d8+3",
    ) -> Combatant:
        return Combatant(
            id=combatant_id,
            name=combatant_id.capitalize(),
            side=side,
            hit_points=hit_points,
            max_hit_points=max(hit_points, 1),
            armor_class=armor_class,
            dexterity_modifier=dexterity_modifier,
            attack_modifier=attack_modifier,
            attacks=[AttackProfile(name="Strike", damage=damage)],
        )

    return _make


@pytest.fixture
def scripted():
    """Builds a ScriptedRandom replaying the given values."""

    def _scripted(*values: int) -> ScriptedRandom:
        return ScriptedRandom(values)

    return _scripted
