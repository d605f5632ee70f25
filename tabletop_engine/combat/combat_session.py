"""
Combat session module for the resolution engine.

The CombatSession is the explicit state of one encounter: the combatants in
initiative order, whose turn it is, the lifecycle state and outcome, and the
append-only log of everything that was resolved. It is mutated only by the
CombatResolver.
"""

from pydantic import BaseModel, Field

from ..core.constants import CombatOutcome, CombatState, Side, is_opponent
from ..core.event_system import CombatEvent, EncounterEndEvent
from .combatant import Combatant


class CombatSession(BaseModel):
    """State of a single encounter."""

    combatants: list[Combatant] = Field(
        default_factory=list,
        description="Combatants sorted by initiative, highest first.",
    )
    turn_index: int = Field(
        default=0,
        ge=0,
        description="Index of the combatant whose turn it is.",
    )
    round_number: int = Field(
        default=1,
        ge=1,
        description="Current round, incremented each time the order wraps around.",
    )
    state: CombatState = Field(
        default=CombatState.NOT_STARTED,
        description="Lifecycle state of the encounter.",
    )
    outcome: CombatOutcome | None = Field(
        default=None,
        description="How the encounter ended, None while it is running.",
    )
    log: list[CombatEvent] = Field(
        default_factory=list,
        description="Append-only record of the encounter.",
    )

    # ============================================================================
    # QUERIES
    # ============================================================================

    @property
    def is_active(self) -> bool:
        return self.state == CombatState.AWAITING_ACTION

    @property
    def is_over(self) -> bool:
        return self.state == CombatState.ENDED

    @property
    def current_combatant(self) -> Combatant | None:
        """The combatant whose turn it is, None unless awaiting an action."""
        if not self.is_active:
            return None
        return self.combatants[self.turn_index]

    def get_combatant(self, combatant_id: str) -> Combatant | None:
        """Returns the combatant with the given id, None if unknown."""
        for combatant in self.combatants:
            if combatant.id == combatant_id:
                return combatant
        return None

    def get_alive_combatants(self, side: Side | None = None) -> list[Combatant]:
        """
        Returns the living combatants in turn order.

        Args:
            side (Side | None): Restrict to one side. Defaults to both.

        Returns:
            list[Combatant]: The living combatants.

        """
        return [
            combatant
            for combatant in self.combatants
            if combatant.is_alive() and (side is None or combatant.side == side)
        ]

    def get_alive_opponents(self, actor: Combatant) -> list[Combatant]:
        """Returns the living combatants hostile to the actor, in turn order."""
        return [
            combatant
            for combatant in self.get_alive_combatants()
            if is_opponent(actor.side, combatant.side)
        ]

    def side_alive(self, side: Side) -> bool:
        return any(combatant.is_alive() for combatant in self.combatants if combatant.side == side)

    def final_hit_points(self) -> dict[str, int]:
        """Hit points of every combatant by id, for writing back to storage."""
        return {combatant.id: combatant.hit_points for combatant in self.combatants}

    def events_since(self, index: int) -> list[CombatEvent]:
        """Returns the log entries appended after the given position."""
        return list(self.log[index:])

    # ============================================================================
    # TURN BOOKKEEPING (used by the resolver)
    # ============================================================================

    def advance_turn(self) -> None:
        """
        Moves the turn to the next living combatant, wrapping around.

        The round number increases every time the order wraps.
        """
        total = len(self.combatants)
        index = self.turn_index
        for _ in range(total):
            index += 1
            if index >= total:
                index = 0
                self.round_number += 1
            if self.combatants[index].is_alive():
                self.turn_index = index
                return

    def end(self, outcome: CombatOutcome) -> EncounterEndEvent:
        """Transitions to ENDED and logs the outcome."""
        self.state = CombatState.ENDED
        self.outcome = outcome
        event = EncounterEndEvent(outcome=outcome, round_number=self.round_number)
        self.log.append(event)
        return event
