"""
Attack definitions used by combatants and submitted as turn actions.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.dice_parser import DiceExpression, parse


def _coerce_dice(value: Any) -> Any:
    # Strings are parsed with the dice grammar; MalformedExpression propagates.
    if isinstance(value, str):
        return parse(value)
    return value


class AttackProfile(BaseModel):
    """A named attack and the damage it deals on a hit."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        min_length=1,
        description="Name of the attack, also its action identifier.",
    )
    damage: DiceExpression = Field(
        description="Damage rolled on a hit.",
    )

    @field_validator("damage", mode="before")
    @classmethod
    def _parse_damage(cls, value: Any) -> Any:
        return _coerce_dice(value)

    def __str__(self) -> str:
        return f"{self.name} ({self.damage})"


class AttackAction(BaseModel):
    """A single-target attack submitted for the active combatant's turn."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        min_length=1,
        description="Name of the attack being made.",
    )
    damage: DiceExpression = Field(
        description="Damage rolled on a hit.",
    )
    target_id: str | None = Field(
        default=None,
        description="Id of the target, None to pick the first living opponent.",
    )

    @field_validator("damage", mode="before")
    @classmethod
    def _parse_damage(cls, value: Any) -> Any:
        return _coerce_dice(value)

    @classmethod
    def from_profile(
        cls, profile: AttackProfile, target_id: str | None = None
    ) -> "AttackAction":
        """
        Builds an action from one of a combatant's attacks.

        Args:
            profile (AttackProfile): The attack to use.
            target_id (str | None): The target, None for automatic targeting.

        Returns:
            AttackAction: The action, ready to be resolved.

        """
        return cls(name=profile.name, damage=profile.damage, target_id=target_id)
