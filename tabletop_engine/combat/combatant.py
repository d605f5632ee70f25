"""
Combatant module for the resolution engine.

A Combatant is the runtime projection of a character or an NPC template for
the duration of one encounter. It is owned by the CombatSession and discarded
when the encounter ends.
"""

from pydantic import BaseModel, Field, model_validator

from ..character.character_class import CharacterClass
from ..character.main import CharacterModel
from ..core.constants import UNARMED_ATTACK_DAMAGE, UNARMED_ATTACK_NAME, Side
from .attack import AttackProfile

UNARMED_ATTACK = AttackProfile(name=UNARMED_ATTACK_NAME, damage=UNARMED_ATTACK_DAMAGE)


class Combatant(BaseModel):
    """A participant of a combat session."""

    id: str = Field(
        min_length=1,
        description="Unique id of the combatant within the encounter.",
    )
    name: str = Field(
        description="Display name of the combatant.",
    )
    side: Side = Field(
        description="The side the combatant fights on.",
    )
    hit_points: int = Field(
        ge=0,
        description="Current hit points.",
    )
    max_hit_points: int = Field(
        ge=1,
        description="Maximum hit points.",
    )
    armor_class: int = Field(
        description="Armor class attack rolls are checked against.",
    )
    dexterity_modifier: int = Field(
        default=0,
        description="Added to initiative rolls and used to break initiative ties.",
    )
    attack_modifier: int = Field(
        default=0,
        description="Added to attack rolls.",
    )
    attacks: list[AttackProfile] = Field(
        default_factory=list,
        description="Attacks available to the combatant.",
    )
    initiative: int | None = Field(
        default=None,
        description="Initiative total, rolled once when the encounter starts.",
    )

    @model_validator(mode="after")
    def _check_hit_points(self) -> "Combatant":
        if self.hit_points > self.max_hit_points:
            raise ValueError(
                f"hit_points ({self.hit_points}) exceed max_hit_points ({self.max_hit_points})"
            )
        return self

    @property
    def action_ids(self) -> list[str]:
        """Identifiers of the actions this combatant can take."""
        return [attack.name for attack in self.attacks]

    @property
    def colored_name(self) -> str:
        return self.side.colorize(self.name)

    def is_alive(self) -> bool:
        return self.hit_points > 0

    def get_attack(self, name: str) -> AttackProfile | None:
        """Returns the attack with the given name, None if unknown."""
        for attack in self.attacks:
            if attack.name == name:
                return attack
        return None

    def primary_attack(self) -> AttackProfile:
        """Returns the first listed attack, an unarmed strike if there is none."""
        return self.attacks[0] if self.attacks else UNARMED_ATTACK

    def take_damage(self, amount: int) -> int:
        """
        Removes hit points, never going below 0.

        Args:
            amount (int): The damage to apply.

        Returns:
            int: The hit points actually removed.

        """
        amount = max(0, amount)
        old = self.hit_points
        self.hit_points = max(0, self.hit_points - amount)
        return old - self.hit_points

    def __str__(self) -> str:
        return f"{self.name} [{self.side}] HP {self.hit_points}/{self.max_hit_points} AC {self.armor_class}"


class EnemyTemplate(BaseModel):
    """Stat block of a non-player opponent."""

    name: str = Field(
        description="The name of the enemy.",
    )
    hit_points: int = Field(
        ge=1,
        description="Hit points of a fresh enemy.",
    )
    armor_class: int = Field(
        description="Armor class of the enemy.",
    )
    dexterity_modifier: int = Field(
        default=0,
        description="Dexterity modifier, added to initiative.",
    )
    attack_modifier: int = Field(
        default=0,
        description="Bonus added to attack rolls.",
    )
    attacks: list[AttackProfile] = Field(
        default_factory=list,
        description="Attacks the enemy can make.",
    )
    description: str = Field(
        default="",
        description="Flavor text for the narrator.",
    )


def combatant_from_character(
    character: CharacterModel,
    character_class: CharacterClass | None = None,
    combatant_id: str | None = None,
) -> Combatant:
    """
    Projects a player character into a combatant.

    The attack modifier is the strength modifier plus the proficiency bonus,
    and the class default attack adds the strength modifier to its damage.

    Args:
        character (CharacterModel): The character entering the encounter.
        character_class (CharacterClass | None): Its class, for the default attack.
        combatant_id (str | None): The id to use, the character name if None.

    Returns:
        Combatant: A player-side combatant with the character's current HP.

    """
    strength = character.ability_scores.STR
    attacks: list[AttackProfile] = []
    if character_class is not None and character_class.default_attack is not None:
        base = character_class.default_attack
        attacks.append(
            AttackProfile(
                name=base.name,
                damage=base.damage.with_modifier(base.damage.modifier + strength),
            )
        )
    return Combatant(
        id=combatant_id or character.name,
        name=character.name,
        side=Side.PLAYER,
        hit_points=character.hit_points,
        max_hit_points=character.max_hit_points,
        armor_class=character.armor_class,
        dexterity_modifier=character.ability_scores.DEX,
        attack_modifier=strength + character.proficiency_bonus,
        attacks=attacks,
    )


def combatant_from_template(
    template: EnemyTemplate,
    combatant_id: str | None = None,
    side: Side = Side.OPPONENT,
) -> Combatant:
    """
    Spawns a fresh combatant from an enemy stat block.

    Args:
        template (EnemyTemplate): The stat block.
        combatant_id (str | None): The id to use, the template name if None.
        side (Side): The side to fight on. Defaults to the opponents.

    Returns:
        Combatant: A combatant at full hit points.

    """
    return Combatant(
        id=combatant_id or template.name,
        name=template.name,
        side=side,
        hit_points=template.hit_points,
        max_hit_points=template.hit_points,
        armor_class=template.armor_class,
        dexterity_modifier=template.dexterity_modifier,
        attack_modifier=template.attack_modifier,
        attacks=list(template.attacks),
    )
