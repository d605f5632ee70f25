"""
Main entry point for the tabletop resolution engine demo.

This script loads the content repository, creates a first level character,
and runs an encounter against one or more enemies. Opponents act through the
NPC AI while the player character always uses its primary attack. On a
victory the character receives experience and may level up.

Example:
    tabletop-demo --seed 42 --class Wizard --enemy Goblin --enemy Goblin
"""

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path

from . import __version__
from .character.character_stats import AbilityScores
from .character.main import CharacterModel, create_character
from .character.progression import ProgressionEngine
from .combat.attack import AttackAction
from .combat.combat_manager import CombatResolver
from .combat.combat_session import CombatSession
from .combat.combatant import Combatant, combatant_from_character, combatant_from_template
from .combat.npc_ai import choose_action
from .core.constants import CombatOutcome, Side
from .core.content import ContentRepository
from .core.event_system import LevelUpEvent
from .core.logging import setup_logging
from .core.rng import default_rng
from .core.sheets import (
    print_character_sheet,
    print_combat_log,
    print_enemy_sheet,
    print_event,
    print_turn_order,
)
from .core.utils import cprint, crule

# Scores given to the demo character (the standard array).
DEMO_ABILITY_SCORES = AbilityScores(
    strength=15,
    dexterity=14,
    constitution=13,
    intelligence=12,
    wisdom=10,
    charisma=8,
)


def make_names_unique(names: list[str]) -> list[str]:
    """
    Ensure all names in a list are unique by appending numbers.

    Only adds numbers when duplicates exist - single instances keep their
    original names.

    Args:
        names (list[str]): The names to make unique.

    Returns:
        list[str]: The unique names, in the same order.

    Example:
        Input: ["Goblin", "Goblin", "Orc"]
        Output: ["Goblin (1)", "Goblin (2)", "Orc"]

    """
    # Count how many times each base name appears
    name_counts = Counter(names)
    # Track how many times we've seen each base name so far
    seen: Counter[str] = Counter()
    unique: list[str] = []
    for base in names:
        if name_counts[base] > 1:
            seen[base] += 1
            unique.append(f"{base} ({seen[base]})")
        else:
            unique.append(base)
    return unique


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or more, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabletop-demo",
        description="Runs a single encounter with the tabletop resolution engine.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible dice")
    parser.add_argument(
        "--enemy",
        action="append",
        default=None,
        help="Enemy to fight, may be repeated (default: Goblin)",
    )
    parser.add_argument("--name", default="Aria", help="Name of the player character")
    parser.add_argument(
        "--class", dest="class_name", default="Fighter", help="Class of the player character"
    )
    parser.add_argument(
        "--xp", type=_non_negative_int, default=300, help="Experience awarded on a victory"
    )
    parser.add_argument(
        "--max-rounds", type=_non_negative_int, default=20, help="Flee after this many rounds"
    )
    parser.add_argument(
        "--data-dir", type=Path, default=None, help="Directory with the content JSON files"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def _spawn_opponents(repo: ContentRepository, enemy_names: list[str]) -> list[Combatant] | None:
    opponents: list[Combatant] = []
    for enemy_name, unique_name in zip(enemy_names, make_names_unique(enemy_names)):
        template = repo.get_enemy(enemy_name)
        if template is None:
            cprint(
                f"[bold red]Unknown enemy '{enemy_name}'[/], "
                f"available: {', '.join(sorted(repo.enemies))}"
            )
            return None
        print_enemy_sheet(template)
        opponent = combatant_from_template(template, combatant_id=unique_name)
        opponent.name = unique_name
        opponents.append(opponent)
    return opponents


def run_encounter(
    resolver: CombatResolver, combatants: list[Combatant], max_rounds: int
) -> CombatSession:
    """
    Plays an encounter to the end.

    Args:
        resolver (CombatResolver): The resolver to use.
        combatants (list[Combatant]): The participants.
        max_rounds (int): The party flees once this round is exceeded.

    Returns:
        CombatSession: The ended session.

    """
    session = resolver.start(combatants)
    print_combat_log(session)
    round_number = 0
    while session.is_active:
        if session.round_number > max_rounds:
            _, event = resolver.flee(session)
            print_event(event)
            break
        if session.round_number != round_number:
            round_number = session.round_number
            print_turn_order(session)
        actor = session.current_combatant
        assert actor is not None
        if actor.side == Side.PLAYER:
            action = AttackAction.from_profile(actor.primary_attack())
        else:
            action = choose_action(session, actor.id)
        mark = len(session.log)
        resolver.resolve_action(session, actor.id, action)
        print_combat_log(session, mark)
    return session


def _on_level_up(event: LevelUpEvent) -> None:
    print_event(event, 0)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    crule("Tabletop Resolution Engine", style="bold green")

    repo = ContentRepository()
    if args.data_dir is not None:
        repo.reload(args.data_dir)

    character_class = repo.get_character_class(args.class_name)
    if character_class is None:
        cprint(
            f"[bold red]Unknown class '{args.class_name}'[/], "
            f"available: {', '.join(sorted(repo.classes))}"
        )
        return 1

    character: CharacterModel = create_character(args.name, character_class, DEMO_ABILITY_SCORES)
    print_character_sheet(character)

    opponents = _spawn_opponents(repo, args.enemy or ["Goblin"])
    if opponents is None:
        return 1
    player = combatant_from_character(character, character_class)

    cprint()
    crule(":crossed_swords:  Combat Started", style="bold green")
    try:
        session = run_encounter(
            CombatResolver(default_rng(args.seed)), [player, *opponents], args.max_rounds
        )
    except KeyboardInterrupt:
        cprint("")
        crule(":crossed_swords:  Combat Interrupted", style="bold red")
        return 130
    crule(":crossed_swords:  Combat Finished", style="bold green")

    character = character.with_hit_points(session.final_hit_points()[player.id])
    if session.outcome == CombatOutcome.VICTORY:
        progression = ProgressionEngine(repo.classes)
        progression.subscribe(_on_level_up)
        cprint(f"{character.name} gains {args.xp} XP.")
        character = progression.award_experience(character, args.xp)
    print_character_sheet(character)
    return 0


if __name__ == "__main__":
    sys.exit(main())
