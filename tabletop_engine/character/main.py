"""
Character model module for the resolution engine.

Defines the immutable CharacterModel exchanged with the persistence layer, and
helpers to create fresh characters and load them from JSON records.
"""

import json
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from ..core.constants import DEFAULT_HIT_DIE
from .character_class import CharacterClass
from .character_stats import (
    AbilityScores,
    derive_armor_class,
    derive_hit_points,
    level_for_experience,
    proficiency_bonus,
)


class CharacterModel(BaseModel):
    """
    Canonical, immutable representation of a player character.

    Updates produce new instances through `model_copy`; the proficiency bonus
    and (unless overridden) the armor class are always derived, so they can
    never drift from the level and the ability scores.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        min_length=1,
        description="The name of the character.",
    )
    class_name: str = Field(
        description="The class identifier, used to look up unlock lists.",
    )
    level: int = Field(
        default=1,
        ge=1,
        description="The character level.",
    )
    experience: int = Field(
        default=0,
        ge=0,
        description="Accumulated experience points.",
    )
    ability_scores: AbilityScores = Field(
        default_factory=AbilityScores,
        description="The six ability scores.",
    )
    hit_die: int = Field(
        default=DEFAULT_HIT_DIE,
        ge=2,
        description="Sides of the hit die used for hit point growth.",
    )
    hit_points: int = Field(
        ge=0,
        description="Current hit points.",
    )
    max_hit_points: int = Field(
        ge=1,
        description="Maximum hit points.",
    )
    armor_class_override: int | None = Field(
        default=None,
        description="Armor class granted by equipment, replacing the derived one.",
    )
    abilities: frozenset[str] = Field(
        default_factory=frozenset,
        description="Unlocked class abilities.",
    )
    spells: frozenset[str] = Field(
        default_factory=frozenset,
        description="Unlocked spells.",
    )

    @model_validator(mode="after")
    def _check_hit_points(self) -> "CharacterModel":
        if self.hit_points > self.max_hit_points:
            raise ValueError(
                f"hit_points ({self.hit_points}) exceed max_hit_points ({self.max_hit_points})"
            )
        return self

    @model_validator(mode="after")
    def _check_level(self) -> "CharacterModel":
        # A stored level above the table is kept, levels are never lowered.
        earned = level_for_experience(self.experience)
        if self.level < earned:
            raise ValueError(
                f"level ({self.level}) is below the level earned by "
                f"{self.experience} experience ({earned})"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def armor_class(self) -> int:
        if self.armor_class_override is not None:
            return self.armor_class_override
        return derive_armor_class(self)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def proficiency_bonus(self) -> int:
        return proficiency_bonus(self.level)

    def is_alive(self) -> bool:
        return self.hit_points > 0

    def with_hit_points(self, hit_points: int) -> "CharacterModel":
        """
        Returns a copy with current hit points set, clamped to [0, max].

        Used to write back the outcome of an encounter.

        Args:
            hit_points (int): The new current hit points.

        Returns:
            CharacterModel: The updated character.

        """
        clamped = max(0, min(hit_points, self.max_hit_points))
        return self.model_copy(update={"hit_points": clamped})

    def __str__(self) -> str:
        return (
            f"{self.name} (level {self.level} {self.class_name}, "
            f"HP {self.hit_points}/{self.max_hit_points}, AC {self.armor_class})"
        )


def create_character(
    name: str,
    character_class: CharacterClass,
    ability_scores: AbilityScores | None = None,
) -> CharacterModel:
    """
    Creates a fresh first level character of the given class.

    Args:
        name (str): The name of the character.
        character_class (CharacterClass): The class of the character.
        ability_scores (AbilityScores | None): The scores, all 10s if None.

    Returns:
        CharacterModel: A full-health level 1 character with its level 1 unlocks.

    """
    scores = ability_scores or AbilityScores()
    max_hp = derive_hit_points(character_class.hit_die, scores.CON, 1)
    return CharacterModel(
        name=name,
        class_name=character_class.name,
        level=1,
        experience=0,
        ability_scores=scores,
        hit_die=character_class.hit_die,
        hit_points=max_hp,
        max_hit_points=max_hp,
        abilities=frozenset(character_class.get_all_abilities_up_to_level(1)),
        spells=frozenset(character_class.get_all_spells_up_to_level(1)),
    )


def load_character(data: dict[str, Any]) -> CharacterModel:
    """
    Builds a character from a persisted record.

    Args:
        data (dict[str, Any]): The record, as produced by `model_dump`.

    Returns:
        CharacterModel: The validated character.

    """
    return CharacterModel.model_validate(data)


def load_characters(path: Path) -> dict[str, CharacterModel]:
    """
    Loads a JSON list of character records.

    Args:
        path (Path): The JSON file to read.

    Returns:
        dict[str, CharacterModel]: Characters by name.

    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    characters: dict[str, CharacterModel] = {}
    for record in data:
        character = load_character(record)
        if character.name in characters:
            log_warning(
                f"Duplicate character name '{character.name}' in {path}, keeping the last one",
                {"path": str(path), "name": character.name},
            )
        characters[character.name] = character
    return characters
