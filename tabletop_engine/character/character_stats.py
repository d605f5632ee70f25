"""
Character stats module for the resolution engine.

Holds the six ability scores and the pure derivations built on them: ability
modifiers, armor class, hit points, proficiency bonus and skill bonuses.
None of these functions mutate their inputs.
"""

import bisect
import math
from collections.abc import Sequence
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from ..core.constants import XP_THRESHOLDS
from ..core.utils import ability_modifier

ABILITY_NAMES = (
    "strength",
    "dexterity",
    "constitution",
    "intelligence",
    "wisdom",
    "charisma",
)


class AbilityScores(BaseModel):
    """
    The six ability scores of a character.

    Scores are conventionally in [1, 30] but are not clamped, so racial
    bonuses may push them past 20.
    """

    model_config = ConfigDict(frozen=True)

    strength: int = Field(default=10, description="Strength score.")
    dexterity: int = Field(default=10, description="Dexterity score.")
    constitution: int = Field(default=10, description="Constitution score.")
    intelligence: int = Field(default=10, description="Intelligence score.")
    wisdom: int = Field(default=10, description="Wisdom score.")
    charisma: int = Field(default=10, description="Charisma score.")

    # ============================================================================
    # ABILITY SCORE MODIFIERS (D&D 5e Standard)
    # ============================================================================

    @property
    def STR(self) -> int:
        """Returns the strength modifier."""
        return ability_modifier(self.strength)

    @property
    def DEX(self) -> int:
        """Returns the dexterity modifier."""
        return ability_modifier(self.dexterity)

    @property
    def CON(self) -> int:
        """Returns the constitution modifier."""
        return ability_modifier(self.constitution)

    @property
    def INT(self) -> int:
        """Returns the intelligence modifier."""
        return ability_modifier(self.intelligence)

    @property
    def WIS(self) -> int:
        """Returns the wisdom modifier."""
        return ability_modifier(self.wisdom)

    @property
    def CHA(self) -> int:
        """Returns the charisma modifier."""
        return ability_modifier(self.charisma)

    def score(self, ability: str) -> int:
        """
        Returns a score by its ability name.

        Args:
            ability (str): One of ABILITY_NAMES, case-insensitive.

        Returns:
            int: The raw ability score.

        """
        key = ability.lower().strip()
        if key not in ABILITY_NAMES:
            raise KeyError(f"Unknown ability: {ability}")
        return getattr(self, key)

    def modifier(self, ability: str) -> int:
        """Returns the modifier of an ability by name."""
        return ability_modifier(self.score(ability))


class HasAbilityScores(Protocol):
    ability_scores: AbilityScores


# ============================================================================
# DERIVED STATS (HP, AC, proficiency)
# ============================================================================


def derive_armor_class(character: HasAbilityScores) -> int:
    """
    Calculates the unarmored Armor Class (10 + dexterity modifier).

    Equipment bonuses are applied by the caller.

    Args:
        character (HasAbilityScores): Anything carrying ability scores.

    Returns:
        int: The armor class.

    """
    return 10 + character.ability_scores.DEX


def hit_points_at_first_level(hit_die: int, constitution_modifier: int) -> int:
    """Hit points of a first level character, never below 1."""
    return max(1, hit_die + constitution_modifier)


def hit_points_per_level(hit_die: int, constitution_modifier: int) -> int:
    """Average hit points gained on each level after the first, never below 1."""
    return max(1, math.ceil(hit_die / 2) + constitution_modifier)


def derive_hit_points(hit_die: int, constitution_modifier: int, level: int) -> int:
    """
    Calculates maximum hit points with the average-roll convention.

    Level 1 grants the full hit die plus the constitution modifier; each
    later level grants half the hit die rounded up plus the modifier. Every
    level contributes at least 1 hit point.

    Args:
        hit_die (int): Sides of the class hit die.
        constitution_modifier (int): The constitution modifier.
        level (int): The character level (at least 1).

    Returns:
        int: The maximum hit points.

    """
    if level < 1:
        raise ValueError(f"Level must be at least 1, got {level}")
    return hit_points_at_first_level(hit_die, constitution_modifier) + (
        level - 1
    ) * hit_points_per_level(hit_die, constitution_modifier)


def proficiency_bonus(level: int) -> int:
    """
    Returns the proficiency bonus for a level: ceil(level / 4) + 1.

    Args:
        level (int): The character level.

    Returns:
        int: The proficiency bonus.

    """
    return math.ceil(level / 4) + 1


def level_for_experience(
    experience: int, thresholds: Sequence[int] = XP_THRESHOLDS
) -> int:
    """
    Returns the level reached with the given experience.

    Args:
        experience (int): Accumulated experience (negative counts as 0).
        thresholds (Sequence[int]): Experience required per level.

    Returns:
        int: The highest level whose threshold is at or below the experience.

    """
    return max(1, bisect.bisect_right(thresholds, experience))


def skill_bonus(score: int, proficient: bool, level: int) -> int:
    """
    Returns the bonus of a skill check.

    Args:
        score (int): The governing ability score.
        proficient (bool): Whether the character is proficient in the skill.
        level (int): The character level.

    Returns:
        int: The ability modifier, plus the proficiency bonus if proficient.

    """
    bonus = ability_modifier(score)
    if proficient:
        bonus += proficiency_bonus(level)
    return bonus
