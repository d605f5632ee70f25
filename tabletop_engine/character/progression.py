"""
Character progression module for the resolution engine.

Maps accumulated experience to levels and applies level ups: hit point
growth, proficiency bonus and class unlocks. Subscribers are notified with a
LevelUpEvent whenever an award raises a character's level.
"""

from collections.abc import Callable, Mapping, Sequence

from catchery import log_warning

from ..core.constants import XP_THRESHOLDS
from ..core.error_handling import InvalidAmount, report
from ..core.event_system import LevelUpEvent
from ..core.logging import log_debug, log_info
from .character_class import CharacterClass
from .character_stats import derive_hit_points, level_for_experience, proficiency_bonus
from .main import CharacterModel

LevelUpListener = Callable[[LevelUpEvent], None]


def _check_thresholds(thresholds: Sequence[int]) -> tuple[int, ...]:
    table = tuple(thresholds)
    if not table or table[0] != 0:
        raise ValueError("The experience table must start at 0")
    if any(later <= earlier for earlier, later in zip(table, table[1:])):
        raise ValueError("The experience table must be strictly increasing")
    return table


def experience_to_next_level(
    experience: int, thresholds: Sequence[int] = XP_THRESHOLDS
) -> int:
    """
    Returns how much experience is missing to reach the next level.

    Args:
        experience (int): Accumulated experience.
        thresholds (Sequence[int]): Experience required per level.

    Returns:
        int: The missing experience, 0 at the top of the table.

    """
    level = level_for_experience(experience, thresholds)
    if level >= len(thresholds):
        return 0
    return thresholds[level] - experience


def level_progress(experience: int, thresholds: Sequence[int] = XP_THRESHOLDS) -> float:
    """
    Returns the progress towards the next level as a percentage.

    Args:
        experience (int): Accumulated experience.
        thresholds (Sequence[int]): Experience required per level.

    Returns:
        float: A value in [0, 100], 100 at the top of the table.

    """
    level = level_for_experience(experience, thresholds)
    if level >= len(thresholds):
        return 100.0
    floor, ceiling = thresholds[level - 1], thresholds[level]
    return (experience - floor) / (ceiling - floor) * 100.0


class ProgressionEngine:
    """
    Applies experience awards to characters.

    Attributes:
        classes (Mapping[str, CharacterClass]):
            Known classes by name, used to look up unlock lists.
        thresholds (tuple[int, ...]):
            Experience required per level, index 0 being level 1.

    """

    def __init__(
        self,
        classes: Mapping[str, CharacterClass] | None = None,
        thresholds: Sequence[int] = XP_THRESHOLDS,
    ) -> None:
        self.classes: Mapping[str, CharacterClass] = classes or {}
        self.thresholds: tuple[int, ...] = _check_thresholds(thresholds)
        self._listeners: list[LevelUpListener] = []

    @property
    def max_level(self) -> int:
        return len(self.thresholds)

    def subscribe(self, listener: LevelUpListener) -> None:
        """Registers a callback invoked with every LevelUpEvent."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: LevelUpListener) -> None:
        """Removes a previously registered callback."""
        self._listeners.remove(listener)

    def level_for(self, experience: int) -> int:
        """Returns the level reached with the given experience."""
        return level_for_experience(experience, self.thresholds)

    def award_experience(self, character: CharacterModel, amount: int) -> CharacterModel:
        """
        Adds experience to a character, leveling it up when thresholds are met.

        A large award may cross several thresholds at once. Hit points grow
        by the average-roll convention for every level gained, and current
        hit points rise by the same amount as the maximum.

        Args:
            character (CharacterModel): The character receiving experience.
            amount (int): The experience awarded.

        Returns:
            CharacterModel: The updated character.

        Raises:
            InvalidAmount: If the amount is negative.

        """
        if amount < 0:
            raise report(
                InvalidAmount(
                    f"Experience awards cannot be negative, got {amount}",
                    {"character": character.name, "amount": amount},
                )
            )
        if amount == 0:
            return character

        new_experience = character.experience + amount
        # A persisted record may already sit above its table level; never demote.
        new_level = max(character.level, self.level_for(new_experience))
        if new_level == character.level:
            log_debug(
                f"{character.name} gains {amount} XP",
                {"experience": new_experience, "level": new_level},
            )
            return character.model_copy(update={"experience": new_experience})

        return self._level_up(character, new_experience, new_level)

    def _level_up(
        self, character: CharacterModel, new_experience: int, new_level: int
    ) -> CharacterModel:
        con = character.ability_scores.CON
        hp_gained = derive_hit_points(character.hit_die, con, new_level) - derive_hit_points(
            character.hit_die, con, character.level
        )
        max_hp = character.max_hit_points + hp_gained
        hp = min(character.hit_points + hp_gained, max_hp)

        abilities, spells = character.abilities, character.spells
        character_class = self.classes.get(character.class_name)
        if character_class is None:
            log_warning(
                f"Unknown class '{character.class_name}', no abilities or spells unlocked",
                {"character": character.name, "class_name": character.class_name},
            )
        else:
            abilities = abilities | frozenset(
                character_class.get_all_abilities_up_to_level(new_level)
            )
            spells = spells | frozenset(character_class.get_all_spells_up_to_level(new_level))

        updated = character.model_copy(
            update={
                "experience": new_experience,
                "level": new_level,
                "max_hit_points": max_hp,
                "hit_points": hp,
                "abilities": abilities,
                "spells": spells,
            }
        )

        event = LevelUpEvent(
            character_name=character.name,
            old_level=character.level,
            new_level=new_level,
            hit_points_gained=hp_gained,
            proficiency_bonus=proficiency_bonus(new_level),
            new_abilities=tuple(sorted(abilities - character.abilities)),
            new_spells=tuple(sorted(spells - character.spells)),
        )
        log_info(str(event))
        for listener in list(self._listeners):
            listener(event)
        return updated
