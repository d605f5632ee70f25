"""
Character system module for the resolution engine.

This module handles character data and its derived values: ability scores,
classes and their unlock lists, hit points, armor class, proficiency and
experience-driven progression.
"""

from .character_class import CharacterClass
from .character_stats import (
    ABILITY_NAMES,
    AbilityScores,
    derive_armor_class,
    derive_hit_points,
    level_for_experience,
    proficiency_bonus,
    skill_bonus,
)
from .main import CharacterModel, create_character, load_character, load_characters
from .progression import (
    ProgressionEngine,
    experience_to_next_level,
    level_progress,
)

__all__ = [
    # Import from character_class.py
    "CharacterClass",
    # Import from character_stats.py
    "ABILITY_NAMES",
    "AbilityScores",
    "derive_armor_class",
    "derive_hit_points",
    "level_for_experience",
    "proficiency_bonus",
    "skill_bonus",
    # Import from main.py
    "CharacterModel",
    "create_character",
    "load_character",
    "load_characters",
    # Import from progression.py
    "ProgressionEngine",
    "experience_to_next_level",
    "level_progress",
]
