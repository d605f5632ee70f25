"""
Error kinds raised by the resolution engine.

Every error is raised at the point of detection and carries a context
dictionary describing the offending input. Rule violations are reported
through catchery before raising so that the caller's log shows them even when
the exception is handled upstream.
"""

from typing import Any

from catchery import log_warning


class EngineError(Exception):
    """Base class for all errors raised by the resolution engine."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}


class MalformedExpression(EngineError):
    """A dice expression or roll tag does not follow the dice grammar."""


class InvalidAmount(EngineError):
    """An experience award is negative."""


class EmptyEncounter(EngineError):
    """An encounter was started without enough combatants."""


class NotYourTurn(EngineError):
    """An action was submitted by a combatant that is not the active one."""


class NoValidTarget(EngineError):
    """The action has no living, hostile target to resolve against."""


class UnknownAction(EngineError):
    """The action is not one of the attacks the acting combatant lists."""


class InactiveEncounter(EngineError):
    """The session is not awaiting an action (not started or already ended)."""


class ScriptExhausted(EngineError):
    """A scripted random source ran out of values."""


def report(error: EngineError) -> EngineError:
    """
    Logs a rule violation with its context and hands it back for raising.

    Args:
        error (EngineError): The error to report.

    Returns:
        EngineError: The same error, so callers can write `raise report(...)`.

    """
    log_warning(
        f"{type(error).__name__}: {error.message}",
        {**error.context, "error_kind": type(error).__name__},
    )
    return error
