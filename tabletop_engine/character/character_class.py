from pydantic import BaseModel, Field, field_validator

from ..combat.attack import AttackProfile
from ..core.constants import DEFAULT_HIT_DIE


class CharacterClass(BaseModel):
    """
    Class template a character is built from.

    The hit die drives hit point growth on creation and on every level up,
    the default attack becomes the combatant's weapon (with the strength
    bonus added to its damage), and the unlock tables list what a character
    gains when the progression engine moves it into a given level.
    """

    name: str = Field(
        description="The name of the character class.",
    )
    hit_die: int = Field(
        default=DEFAULT_HIT_DIE,
        ge=2,
        description="Sides of the die used for hit points, taken at its average after level 1.",
    )
    default_attack: AttackProfile | None = Field(
        default=None,
        description="Weapon attack of the class, an unarmed strike if missing.",
    )
    abilities_by_level: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Class abilities gained on reaching each level, keyed by the level as text.",
    )
    spells_by_level: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Spells learned on reaching each level, keyed by the level as text.",
    )

    @field_validator("abilities_by_level", "spells_by_level")
    @classmethod
    def _check_level_keys(cls, table: dict[str, list[str]]) -> dict[str, list[str]]:
        for key in table:
            if not key.isdigit() or int(key) < 1:
                raise ValueError(f"Unlock tables are keyed by levels from 1, got {key!r}")
        return table

    @staticmethod
    def _unlocked_up_to(table: dict[str, list[str]], level: int) -> list[str]:
        unlocked: list[str] = []
        for lvl in range(1, level + 1):
            unlocked.extend(table.get(str(lvl), []))
        return unlocked

    def get_abilities_at_level(self, level: int) -> list[str]:
        """Abilities gained on reaching exactly this level."""
        return self.abilities_by_level.get(str(level), [])

    def get_all_abilities_up_to_level(self, level: int) -> list[str]:
        """
        Abilities a character of this level has, in unlock order.

        A new character receives the level 1 list; a level up grants the
        list of its new level, which already contains everything before it.

        Args:
            level (int): The character level.

        Returns:
            list[str]: The abilities of levels 1 to `level`.

        """
        return self._unlocked_up_to(self.abilities_by_level, level)

    def get_spells_at_level(self, level: int) -> list[str]:
        """Spells learned on reaching exactly this level."""
        return self.spells_by_level.get(str(level), [])

    def get_all_spells_up_to_level(self, level: int) -> list[str]:
        """Spells a character of this level knows, in unlock order."""
        return self._unlocked_up_to(self.spells_by_level, level)

    def __hash__(self) -> int:
        return hash(self.name)
