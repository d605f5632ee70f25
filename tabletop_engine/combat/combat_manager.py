# combat_manager.py
from collections.abc import Sequence

from ..core.constants import D20_SIDES, CombatOutcome, CombatState, Side, is_opponent
from ..core.dice_parser import DiceExpression, roll
from ..core.error_handling import (
    EmptyEncounter,
    InactiveEncounter,
    NotYourTurn,
    NoValidTarget,
    UnknownAction,
    report,
)
from ..core.event_system import AttackEvent, EncounterEndEvent, InitiativeEvent
from ..core.logging import log_debug, log_info
from ..core.rng import RandomSource, default_rng
from .attack import AttackAction
from .combat_session import CombatSession
from .combatant import UNARMED_ATTACK, Combatant


class CombatResolver:
    """Resolves turn-based encounters, one submitted action at a time.

    The resolver owns no encounter state: every operation takes the
    CombatSession it acts on. Random outcomes are drawn from the injected
    source, so the same sequence of calls with the same source replays
    exactly. A failed call raises before any draw or mutation, leaving the
    session as it was so the caller may re-prompt.
    """

    def __init__(self, rng: RandomSource | None = None) -> None:
        """Initialize the CombatResolver.

        Args:
            rng (RandomSource | None): Source of dice outcomes. Defaults to a
                fresh unseeded generator.

        """
        self.rng: RandomSource = rng if rng is not None else default_rng()

    # ============================================================================
    # ENCOUNTER LIFECYCLE
    # ============================================================================

    def start(self, combatants: Sequence[Combatant]) -> CombatSession:
        """Starts an encounter, rolling initiative for every combatant.

        Initiative is 1d20 plus the dexterity modifier. Combatants act from
        the highest total down; ties go to the higher dexterity modifier,
        then to whoever was listed first.

        Args:
            combatants (Sequence[Combatant]): The participants. They are
                copied, so the caller's objects are never mutated.

        Returns:
            CombatSession: A session awaiting the first combatant's action.

        Raises:
            EmptyEncounter: With fewer than 2 combatants, or without a
                living combatant on each side.

        """
        context = {"combatants": [c.id for c in combatants]}
        if len(combatants) < 2:
            raise report(EmptyEncounter("An encounter needs at least 2 combatants", context))
        if not any(c.side == Side.PLAYER and c.is_alive() for c in combatants):
            raise report(EmptyEncounter("No living combatant on the player side", context))
        if not any(c.side == Side.OPPONENT and c.is_alive() for c in combatants):
            raise report(EmptyEncounter("No living combatant on the opposing side", context))
        ids = [c.id for c in combatants]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Combatant ids must be unique, got {ids}")

        participants = [c.model_copy(deep=True) for c in combatants]
        events: list[InitiativeEvent] = []
        for participant in participants:
            result = roll(
                DiceExpression(count=1, sides=D20_SIDES, modifier=participant.dexterity_modifier),
                self.rng,
            )
            participant.initiative = result.total
            events.append(
                InitiativeEvent(actor_id=participant.id, actor_name=participant.name, roll=result)
            )

        order = sorted(
            range(len(participants)),
            key=lambda i: (
                -(participants[i].initiative or 0),
                -participants[i].dexterity_modifier,
                i,
            ),
        )
        session = CombatSession(
            combatants=[participants[i] for i in order],
            state=CombatState.AWAITING_ACTION,
            log=list(events),
        )
        if not session.combatants[0].is_alive():
            session.advance_turn()

        log_info(
            "Combat initialized, turn order: "
            + ", ".join(f"{c.name} ({c.initiative})" for c in session.combatants)
        )
        return session

    def resolve_action(
        self, session: CombatSession, actor_id: str, action: AttackAction
    ) -> tuple[CombatSession, AttackEvent]:
        """Resolves the active combatant's attack and advances the turn.

        The attack roll is 1d20 plus the attacker's attack modifier and hits
        when the total meets or beats the target's armor class. A hit rolls
        the action's damage (at least 1) and removes it from the target,
        never going below 0 hit points.

        Args:
            session (CombatSession): The encounter.
            actor_id (str): Id of the combatant acting.
            action (AttackAction): The attack to make.

        Returns:
            tuple[CombatSession, AttackEvent]: The updated session and the
                log entry describing the attack.

        Raises:
            InactiveEncounter: If the session is not awaiting an action.
            NotYourTurn: If the actor is not the active combatant.
            UnknownAction: If the actor does not list the attack, or lists it
                with a different damage expression.
            NoValidTarget: If the target is missing, friendly or defeated.

        """
        actor = self._require_turn(session, actor_id)
        self._require_action(actor, action)
        target = self._select_target(session, actor, action)

        session.state = CombatState.RESOLVING
        try:
            event = self._resolve_attack(session, actor, target, action)
        except Exception:
            # Nothing was applied yet, give the turn back.
            session.state = CombatState.AWAITING_ACTION
            raise
        session.log.append(event)

        outcome = self.check_outcome(session)
        if outcome is not None:
            session.end(outcome)
            log_info(f"Encounter ended: {outcome}", {"round": session.round_number})
        else:
            session.state = CombatState.AWAITING_ACTION
            session.advance_turn()
            log_debug(
                f"Next turn: {session.combatants[session.turn_index].name}",
                {"round": session.round_number},
            )
        return session, event

    def flee(self, session: CombatSession) -> tuple[CombatSession, EncounterEndEvent]:
        """Ends the encounter immediately with the FLED outcome.

        Args:
            session (CombatSession): The encounter.

        Returns:
            tuple[CombatSession, EncounterEndEvent]: The ended session and
                the log entry of the outcome.

        Raises:
            InactiveEncounter: If the session is not awaiting an action.

        """
        self._require_active(session)
        event = session.end(CombatOutcome.FLED)
        log_info("The party flees the encounter", {"round": session.round_number})
        return session, event

    @staticmethod
    def check_outcome(session: CombatSession) -> CombatOutcome | None:
        """Evaluates whether the encounter is over.

        If both sides are wiped out at once, the side that still has a
        living member wins; with nobody standing the result is a DEFEAT.

        Args:
            session (CombatSession): The encounter.

        Returns:
            CombatOutcome | None: The outcome, None while both sides stand.

        """
        players_alive = session.side_alive(Side.PLAYER)
        opponents_alive = session.side_alive(Side.OPPONENT)
        if players_alive and opponents_alive:
            return None
        if players_alive:
            return CombatOutcome.VICTORY
        return CombatOutcome.DEFEAT

    # ============================================================================
    # VALIDATION
    # ============================================================================

    @staticmethod
    def _require_active(session: CombatSession) -> None:
        if not session.is_active:
            raise report(
                InactiveEncounter(
                    f"The encounter is not awaiting an action (state: {session.state})",
                    {"state": str(session.state), "outcome": str(session.outcome)},
                )
            )

    def _require_turn(self, session: CombatSession, actor_id: str) -> Combatant:
        self._require_active(session)
        current = session.current_combatant
        assert current is not None
        if current.id != actor_id:
            raise report(
                NotYourTurn(
                    f"It is {current.name}'s turn, not {actor_id}'s",
                    {"actor_id": actor_id, "current_id": current.id},
                )
            )
        return current

    @staticmethod
    def _require_action(actor: Combatant, action: AttackAction) -> None:
        context = {"actor_id": actor.id, "action": action.name, "known": actor.action_ids}
        if actor.attacks:
            profile = actor.get_attack(action.name)
        elif action.name == UNARMED_ATTACK.name:
            profile = UNARMED_ATTACK
        else:
            profile = None
        if profile is None:
            raise report(
                UnknownAction(f"{actor.name} has no attack named '{action.name}'", context)
            )
        if action.damage != profile.damage:
            raise report(
                UnknownAction(
                    f"{action.name} deals {profile.damage}, not {action.damage}",
                    {**context, "damage": str(action.damage)},
                )
            )

    @staticmethod
    def _select_target(
        session: CombatSession, actor: Combatant, action: AttackAction
    ) -> Combatant:
        context = {"actor_id": actor.id, "target_id": action.target_id, "action": action.name}
        if action.target_id is None:
            opponents = session.get_alive_opponents(actor)
            if not opponents:
                raise report(NoValidTarget(f"{actor.name} has no opponent left", context))
            return opponents[0]

        target = session.get_combatant(action.target_id)
        if target is None:
            raise report(NoValidTarget(f"Unknown target '{action.target_id}'", context))
        if not is_opponent(actor.side, target.side):
            raise report(NoValidTarget(f"{target.name} is not an opponent of {actor.name}", context))
        if not target.is_alive():
            raise report(NoValidTarget(f"{target.name} is already defeated", context))
        return target

    # ============================================================================
    # RESOLUTION
    # ============================================================================

    def _resolve_attack(
        self,
        session: CombatSession,
        actor: Combatant,
        target: Combatant,
        action: AttackAction,
    ) -> AttackEvent:
        attack_roll = roll(
            DiceExpression(count=1, sides=D20_SIDES, modifier=actor.attack_modifier),
            self.rng,
        )
        hit = attack_roll.total >= target.armor_class

        damage_roll = None
        damage = 0
        if hit:
            damage_roll = roll(action.damage, self.rng)
            damage = max(1, damage_roll.total)
            target.take_damage(damage)

        event = AttackEvent(
            round_number=session.round_number,
            actor_id=actor.id,
            actor_name=actor.name,
            target_id=target.id,
            target_name=target.name,
            attack_name=action.name,
            attack_roll=attack_roll,
            target_armor_class=target.armor_class,
            hit=hit,
            critical=attack_roll.is_critical(),
            fumble=attack_roll.is_fumble(),
            damage_roll=damage_roll,
            damage=damage,
            target_hit_points=target.hit_points,
            defeated=hit and not target.is_alive(),
        )
        log_debug(str(event))
        return event
