"""
Constants and enumerations for the resolution engine.

Defines global constants, enumerations for combat sides, combat states and
outcomes and roll outcome tiers used throughout the engine.
"""

from enum import Enum

# Sanity limits for dice expressions.
MAX_DICE_COUNT = 100
MAX_DICE_SIDES = 1000
MAX_NUMBER_DIGITS = 6

# The die used for initiative and attack rolls.
D20_SIDES = 20

# Hit die used when a character record does not specify one.
DEFAULT_HIT_DIE = 8

# Experience required to reach each level (index 0 is level 1).
XP_THRESHOLDS: tuple[int, ...] = (
    0,
    300,
    900,
    2700,
    6500,
    14000,
    23000,
    34000,
    48000,
    64000,
    85000,
    100000,
    120000,
    140000,
    165000,
    195000,
    225000,
    265000,
    305000,
    355000,
)

# Lower bounds (on the total) of the d20 outcome tiers.
CRITICAL_SUCCESS_THRESHOLD = 20
GREAT_SUCCESS_THRESHOLD = 15
SUCCESS_THRESHOLD = 10
PARTIAL_SUCCESS_THRESHOLD = 5

# Fractions of the highest dice sum bounding the tiers of other rolls.
EXCELLENT_RESULT_RATIO = 0.8
GOOD_RESULT_RATIO = 0.6
DECENT_RESULT_RATIO = 0.4

# Fallback attack for combatants without any attack listed.
UNARMED_ATTACK_NAME = "Unarmed Strike"
UNARMED_ATTACK_DAMAGE = "1d4"


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name


class Side(NiceEnum):
    """Defines which side of an encounter a combatant fights on."""

    PLAYER = "PLAYER"
    OPPONENT = "OPPONENT"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this side."""
        return {
            Side.PLAYER: "👤",
            Side.OPPONENT: "👹",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this side."""
        return {
            Side.PLAYER: "bold blue",
            Side.OPPONENT: "bold red",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies side color formatting to a message."""
        return f"[{self.color}]{message}[/]"


def is_opponent(first: Side, second: Side) -> bool:
    """
    Checks whether two sides are hostile to each other.

    Args:
        first (Side): The first side.
        second (Side): The second side.

    Returns:
        bool: True if the sides are opponents, False otherwise.

    """
    return first != second


class CombatState(NiceEnum):
    """The lifecycle states of a combat session."""

    NOT_STARTED = "NOT_STARTED"
    AWAITING_ACTION = "AWAITING_ACTION"
    RESOLVING = "RESOLVING"
    ENDED = "ENDED"


class CombatOutcome(NiceEnum):
    """How an encounter ended."""

    VICTORY = "VICTORY"
    DEFEAT = "DEFEAT"
    FLED = "FLED"

    @property
    def color(self) -> str:
        """Returns the color string associated with this outcome."""
        return {
            CombatOutcome.VICTORY: "bold green",
            CombatOutcome.DEFEAT: "bold red",
            CombatOutcome.FLED: "bold yellow",
        }.get(self, "dim white")


class OutcomeTier(NiceEnum):
    """Narrative tiers of a roll. The first six grade d20 checks, the rest other dice."""

    CRITICAL_SUCCESS = "CRITICAL_SUCCESS"
    GREAT_SUCCESS = "GREAT_SUCCESS"
    SUCCESS = "SUCCESS"
    PARTIAL_SUCCESS = "PARTIAL_SUCCESS"
    FAILURE = "FAILURE"
    CRITICAL_FAILURE = "CRITICAL_FAILURE"
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    DECENT = "DECENT"
    POOR = "POOR"
