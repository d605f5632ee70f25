"""
Core system module for the resolution engine.

This module contains the fundamental components that every other part of the
engine builds on, including constants, error kinds, random sources, dice
parsing and rolling, narrator roll requests, events and display utilities.
"""

from .constants import (
    D20_SIDES,
    DEFAULT_HIT_DIE,
    MAX_DICE_COUNT,
    MAX_DICE_SIDES,
    MAX_NUMBER_DIGITS,
    XP_THRESHOLDS,
    CombatOutcome,
    CombatState,
    OutcomeTier,
    Side,
    is_opponent,
)
from .dice_parser import (
    DiceExpression,
    RollResult,
    get_max_roll,
    get_min_roll,
    parse,
    roll,
    roll_expression,
    tokenize,
)
from .error_handling import (
    EmptyEncounter,
    EngineError,
    InactiveEncounter,
    InvalidAmount,
    MalformedExpression,
    NotYourTurn,
    NoValidTarget,
    ScriptExhausted,
    UnknownAction,
    report,
)
from .event_system import (
    AttackEvent,
    CombatEvent,
    EncounterEndEvent,
    EngineEvent,
    EventType,
    InitiativeEvent,
    LevelUpEvent,
)
from .logging import get_logger, log_debug, log_info, setup_logging
from .rng import RandomSource, ScriptedRandom, default_rng
from .roll_requests import (
    RollRequest,
    classify_outcome,
    extract_roll_requests,
    parse_roll_request,
    strip_roll_tags,
)
from .utils import (
    Singleton,
    ability_modifier,
    cprint,
    crule,
    format_modifier,
    make_bar,
)

__all__ = [
    # Import from constants.py
    "D20_SIDES",
    "DEFAULT_HIT_DIE",
    "MAX_DICE_COUNT",
    "MAX_DICE_SIDES",
    "MAX_NUMBER_DIGITS",
    "XP_THRESHOLDS",
    "CombatOutcome",
    "CombatState",
    "OutcomeTier",
    "Side",
    "is_opponent",
    # Import from dice_parser.py
    "DiceExpression",
    "RollResult",
    "get_max_roll",
    "get_min_roll",
    "parse",
    "roll",
    "roll_expression",
    "tokenize",
    # Import from error_handling.py
    "EmptyEncounter",
    "EngineError",
    "InactiveEncounter",
    "InvalidAmount",
    "MalformedExpression",
    "NotYourTurn",
    "NoValidTarget",
    "ScriptExhausted",
    "UnknownAction",
    "report",
    # Import from event_system.py
    "AttackEvent",
    "CombatEvent",
    "EncounterEndEvent",
    "EngineEvent",
    "EventType",
    "InitiativeEvent",
    "LevelUpEvent",
    # Import from logging.py
    "get_logger",
    "log_debug",
    "log_info",
    "setup_logging",
    # Import from rng.py
    "RandomSource",
    "ScriptedRandom",
    "default_rng",
    # Import from roll_requests.py
    "RollRequest",
    "classify_outcome",
    "extract_roll_requests",
    "parse_roll_request",
    "strip_roll_tags",
    # Import from utils.py
    "Singleton",
    "ability_modifier",
    "cprint",
    "crule",
    "format_modifier",
    "make_bar",
]
