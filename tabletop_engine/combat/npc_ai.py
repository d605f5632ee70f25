from pydantic import BaseModel, Field

from ..core.error_handling import NoValidTarget, report
from .attack import AttackAction, AttackProfile
from .combat_session import CombatSession
from .combatant import Combatant

# =============================================================================
# Support Functions
# =============================================================================


class AttackSelection(BaseModel):
    """An attack chosen by the AI together with its target."""

    attack: AttackProfile = Field(
        description="The attack being used.",
    )
    target: Combatant = Field(
        description="The selected target.",
    )

    def to_action(self) -> AttackAction:
        return AttackAction.from_profile(self.attack, self.target.id)


def choose_best_target(session: CombatSession, actor: Combatant) -> Combatant | None:
    """
    Picks the living opponent with the fewest hit points.

    Ties keep turn order, so the earliest acting of the weakest opponents is
    chosen.

    Args:
        session (CombatSession): The encounter.
        actor (Combatant): The combatant choosing a target.

    Returns:
        Combatant | None: The target, None if no opponent is standing.

    """
    opponents = session.get_alive_opponents(actor)
    if not opponents:
        return None
    return min(opponents, key=lambda c: c.hit_points)


def choose_attack(session: CombatSession, actor: Combatant) -> AttackSelection | None:
    """
    Chooses the attack and target for a computer-controlled combatant.

    Args:
        session (CombatSession): The encounter.
        actor (Combatant): The acting combatant.

    Returns:
        AttackSelection | None: The selection, None if there is no target.

    """
    target = choose_best_target(session, actor)
    if target is None:
        return None
    return AttackSelection(attack=actor.primary_attack(), target=target)


def choose_action(session: CombatSession, actor_id: str) -> AttackAction:
    """
    Builds the action a computer-controlled combatant takes on its turn.

    Args:
        session (CombatSession): The encounter.
        actor_id (str): Id of the acting combatant.

    Returns:
        AttackAction: The action to submit to the resolver.

    Raises:
        ValueError: If the actor is not part of the encounter.
        NoValidTarget: If no opponent is left standing.

    """
    actor = session.get_combatant(actor_id)
    if actor is None:
        raise ValueError(f"Unknown combatant '{actor_id}'")
    selection = choose_attack(session, actor)
    if selection is None:
        raise report(
            NoValidTarget(f"{actor.name} has no opponent left", {"actor_id": actor_id})
        )
    return selection.to_action()
