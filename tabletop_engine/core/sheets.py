from rich.padding import Padding

from ..character.main import CharacterModel
from ..character.progression import experience_to_next_level, level_progress
from ..combat.attack import AttackProfile
from ..combat.combat_session import CombatSession
from ..combat.combatant import EnemyTemplate
from .constants import XP_THRESHOLDS
from .content import ContentRepository
from .event_system import AttackEvent, EncounterEndEvent, EngineEvent, InitiativeEvent
from .utils import cprint, crule, format_modifier, make_bar


def print_attack_sheet(attack: AttackProfile, padding: int = 2) -> None:
    """Prints the details of an attack in a formatted way."""
    sheet = f"[green]{attack.name}[/], "
    sheet += f"damage: [blue]{attack.damage}[/] "
    sheet += f"({attack.damage.min_total()}-{attack.damage.max_total()})"
    cprint(Padding(sheet, (0, padding)))


def print_character_sheet(char: CharacterModel) -> None:
    """
    Prints the details of a character in a formatted way.

    Args:
        char (CharacterModel): The character to display.

    """
    # Header with basic character info
    cprint(f"👤 [bold blue]{char.name}[/], [green]{char.class_name} {char.level}[/]")

    # Core stats
    cprint(
        f"  HP: [green]{char.hit_points}/{char.max_hit_points}[/] "
        f"{make_bar(char.hit_points, char.max_hit_points, color='green')}, "
        f"AC: [yellow]{char.armor_class}[/], "
        f"Proficiency: [cyan]{format_modifier(char.proficiency_bonus)}[/]"
    )

    # Experience
    missing = experience_to_next_level(char.experience, XP_THRESHOLDS)
    xp_line = f"  XP: [magenta]{char.experience}[/] "
    xp_line += make_bar(int(level_progress(char.experience, XP_THRESHOLDS)), 100, color="magenta")
    if missing:
        xp_line += f" ({missing} to next level)"
    cprint(xp_line)

    # Ability scores and modifiers
    scores = char.ability_scores
    stat_display = []
    for stat_name, stat_value in scores.model_dump().items():
        stat_display.append(
            f"{stat_name.capitalize()}: {stat_value} ({format_modifier(scores.modifier(stat_name))})"
        )
    cprint(f"  {', '.join(stat_display)}")

    if char.abilities:
        cprint(f"  [cyan]Abilities[/]: {', '.join(sorted(char.abilities))}")
    if char.spells:
        cprint(f"  [magenta]Spells[/]: {', '.join(sorted(char.spells))}")


def print_enemy_sheet(enemy: EnemyTemplate) -> None:
    """Prints an enemy stat block."""
    cprint(
        f"👹 [bold red]{enemy.name}[/], HP: [green]{enemy.hit_points}[/], "
        f"AC: [yellow]{enemy.armor_class}[/], attack: [cyan]{format_modifier(enemy.attack_modifier)}[/]"
    )
    if enemy.description:
        cprint(Padding(f'[italic]"{enemy.description}"[/]', (0, 2)))
    for attack in enemy.attacks:
        print_attack_sheet(attack, 4)


def print_turn_order(session: CombatSession) -> None:
    """
    Prints the combatants in initiative order, marking the active one.

    Args:
        session (CombatSession): The encounter to display.

    """
    crule(f"Round {session.round_number}", style="bold yellow", characters="-")
    current = session.current_combatant
    for combatant in session.combatants:
        marker = "▶" if current is not None and combatant.id == current.id else " "
        line = f"{marker} {combatant.side.emoji} {combatant.colored_name} "
        line += f"[{combatant.initiative}] "
        line += f"{make_bar(combatant.hit_points, combatant.max_hit_points, color='green')} "
        line += f"{combatant.hit_points}/{combatant.max_hit_points}"
        if not combatant.is_alive():
            line += " [dim](defeated)[/]"
        cprint(line)


def print_event(event: EngineEvent, padding: int = 2) -> None:
    """Prints a single log entry with the color of its kind."""
    if isinstance(event, AttackEvent):
        color = "green" if event.hit else "dim white"
        if event.critical:
            color = "bold yellow"
    elif isinstance(event, EncounterEndEvent):
        color = event.outcome.color
    elif isinstance(event, InitiativeEvent):
        color = "cyan"
    else:
        color = "magenta"
    cprint(Padding(f"[{color}]{event}[/]", (0, padding)))


def print_combat_log(session: CombatSession, start: int = 0) -> None:
    """
    Prints the log of an encounter.

    Args:
        session (CombatSession): The encounter to display.
        start (int): Index of the first entry to print. Defaults to 0.

    """
    for event in session.events_since(start):
        print_event(event)


def print_content_repository_summary() -> None:
    """
    Prints a summary of all available content in the repository.

    Displays counts and basic information for each content category.
    """
    repo = ContentRepository()

    cprint("\n[bold cyan]📚 Content Repository Summary[/bold cyan]")

    cprint(f"\n[green]Character Classes ({len(repo.classes)})[/green]:")
    for name, char_class in repo.classes.items():
        class_info = f"[blue]{name}[/] - d{char_class.hit_die}"
        if char_class.default_attack is not None:
            class_info += f", {char_class.default_attack}"
        cprint(Padding(class_info, (0, 2)))

    cprint(f"\n[green]Enemies ({len(repo.enemies)})[/green]:")
    for name, enemy in repo.enemies.items():
        cprint(Padding(f"[red]{name}[/] - HP {enemy.hit_points}, AC {enemy.armor_class}", (0, 2)))
