"""
Event system module for the resolution engine.

Defines the structured log entries produced by combat resolution and
character progression. Events carry plain identifiers and values only, so the
narration layer can render them without touching engine state; `str(event)`
gives a default narrative line.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .constants import CombatOutcome
from .dice_parser import RollResult


class EventType(Enum):
    """Enumeration of available event types."""

    ON_INITIATIVE = "on_initiative"  # When a combatant rolls initiative
    ON_ATTACK = "on_attack"  # When an attack is resolved
    ON_ENCOUNTER_END = "on_encounter_end"  # When the encounter reaches an outcome
    ON_LEVEL_UP = "on_level_up"  # When a character gains one or more levels


class EngineEvent(BaseModel):
    """Base class for all log entries."""

    model_config = ConfigDict(frozen=True)

    event_type: EventType = Field(
        description="The type of the event.",
    )


class InitiativeEvent(EngineEvent):
    """A combatant rolled initiative at the start of an encounter."""

    event_type: EventType = Field(
        default=EventType.ON_INITIATIVE,
        description="The type of the event.",
    )
    actor_id: str = Field(description="Id of the combatant.")
    actor_name: str = Field(description="Display name of the combatant.")
    roll: RollResult = Field(description="The initiative roll.")

    def __str__(self) -> str:
        return f"{self.actor_name} rolls initiative: {self.roll.description}"


class AttackEvent(EngineEvent):
    """Event data for a resolved attack."""

    event_type: EventType = Field(
        default=EventType.ON_ATTACK,
        description="The type of the event.",
    )
    round_number: int = Field(description="Round in which the attack happened.")
    actor_id: str = Field(description="Id of the attacker.")
    actor_name: str = Field(description="Display name of the attacker.")
    target_id: str = Field(description="Id of the target.")
    target_name: str = Field(description="Display name of the target.")
    attack_name: str = Field(description="Name of the attack used.")
    attack_roll: RollResult = Field(description="The d20 attack roll.")
    target_armor_class: int = Field(description="Armor class the roll was checked against.")
    hit: bool = Field(description="Whether the attack hit.")
    critical: bool = Field(default=False, description="Raw die was the maximum.")
    fumble: bool = Field(default=False, description="Raw die was a 1.")
    damage_roll: RollResult | None = Field(
        default=None,
        description="The damage roll, present only on a hit.",
    )
    damage: int = Field(default=0, description="Hit points removed from the target.")
    target_hit_points: int = Field(description="Target hit points after the attack.")
    defeated: bool = Field(default=False, description="The target dropped to 0 HP.")

    def __str__(self) -> str:
        line = f"{self.actor_name} uses {self.attack_name} on {self.target_name}"
        line += f" ({self.attack_roll.description} vs AC {self.target_armor_class})"
        if self.critical:
            line += " - a natural max!"
        elif self.fumble:
            line += " - a fumble!"
        if not self.hit:
            return line + " but misses."
        assert self.damage_roll is not None
        line += f" and hits for {self.damage} damage ({self.damage_roll.description})."
        if self.defeated:
            line += f" {self.target_name} is defeated!"
        return line


class EncounterEndEvent(EngineEvent):
    """The encounter reached an outcome."""

    event_type: EventType = Field(
        default=EventType.ON_ENCOUNTER_END,
        description="The type of the event.",
    )
    outcome: CombatOutcome = Field(description="How the encounter ended.")
    round_number: int = Field(description="Round in which the encounter ended.")

    def __str__(self) -> str:
        return {
            CombatOutcome.VICTORY: "Victory! All opponents have been defeated.",
            CombatOutcome.DEFEAT: "Defeat... the party has fallen.",
            CombatOutcome.FLED: "The party flees the encounter.",
        }[self.outcome]


class LevelUpEvent(EngineEvent):
    """A character gained one or more levels from an experience award."""

    event_type: EventType = Field(
        default=EventType.ON_LEVEL_UP,
        description="The type of the event.",
    )
    character_name: str = Field(description="Name of the character.")
    old_level: int = Field(description="Level before the award.")
    new_level: int = Field(description="Level after the award.")
    hit_points_gained: int = Field(description="Maximum hit points gained in total.")
    proficiency_bonus: int = Field(description="Proficiency bonus at the new level.")
    new_abilities: tuple[str, ...] = Field(
        default=(),
        description="Abilities unlocked by this level up.",
    )
    new_spells: tuple[str, ...] = Field(
        default=(),
        description="Spells unlocked by this level up.",
    )

    @property
    def levels_gained(self) -> int:
        return self.new_level - self.old_level

    def __str__(self) -> str:
        line = (
            f"{self.character_name} reaches level {self.new_level}! "
            f"(+{self.hit_points_gained} max HP, proficiency +{self.proficiency_bonus})"
        )
        unlocked = [*self.new_abilities, *self.new_spells]
        if unlocked:
            line += f" New: {', '.join(unlocked)}."
        return line


CombatEvent = InitiativeEvent | AttackEvent | EncounterEndEvent
