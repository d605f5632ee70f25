"""
Roll requests embedded in narrator text.

The narrator asks for dice with tags shaped like `[DICE_ROLL:d20+5:Pick the
lock]`. This module extracts those tags into typed requests, resolves them
through the dice parser and classifies their outcomes into narrative tiers.
"""

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    CRITICAL_SUCCESS_THRESHOLD,
    D20_SIDES,
    DECENT_RESULT_RATIO,
    EXCELLENT_RESULT_RATIO,
    GOOD_RESULT_RATIO,
    GREAT_SUCCESS_THRESHOLD,
    PARTIAL_SUCCESS_THRESHOLD,
    SUCCESS_THRESHOLD,
    OutcomeTier,
)
from .dice_parser import DiceExpression, RollResult, parse, roll
from .error_handling import MalformedExpression, report
from .rng import RandomSource

TAG_OPEN = "[DICE_ROLL:"
TAG_CLOSE = "]"


class RollRequest(BaseModel):
    """A dice roll requested by the narrator."""

    model_config = ConfigDict(frozen=True)

    expression: DiceExpression = Field(
        description="The dice to roll.",
    )
    description: str = Field(
        default="",
        description="What the roll is for, as written by the narrator.",
    )

    def resolve(self, rng: RandomSource) -> RollResult:
        """Rolls the requested dice."""
        return roll(self.expression, rng)

    def __str__(self) -> str:
        if self.description:
            return f"{self.expression} ({self.description})"
        return str(self.expression)


def parse_roll_request(tag: str) -> RollRequest:
    """
    Parses a single `[DICE_ROLL:<dice>:<description>]` tag.

    The dice part may omit the count (`d20+5`), meaning a single die.

    Args:
        tag (str): The full tag, brackets included.

    Returns:
        RollRequest: The typed request.

    Raises:
        MalformedExpression: If the tag or its dice are malformed.

    """
    tag = tag.strip()
    if not tag.startswith(TAG_OPEN) or not tag.endswith(TAG_CLOSE):
        raise report(MalformedExpression("Not a DICE_ROLL tag", {"tag": tag}))
    body = tag[len(TAG_OPEN) : -len(TAG_CLOSE)]
    dice, _, description = body.partition(":")
    return RollRequest(
        expression=parse(dice, implicit_count=True),
        description=description.strip(),
    )


def _find_tags(text: str) -> list[tuple[int, int]]:
    """Returns the (start, end) spans of every tag in the text."""
    spans: list[tuple[int, int]] = []
    start = text.find(TAG_OPEN)
    while start != -1:
        end = text.find(TAG_CLOSE, start)
        if end == -1:
            raise report(
                MalformedExpression(
                    "Unterminated DICE_ROLL tag",
                    {"text": text, "position": start},
                )
            )
        spans.append((start, end + 1))
        start = text.find(TAG_OPEN, end + 1)
    return spans


def extract_roll_requests(text: str) -> list[RollRequest]:
    """
    Extracts every roll request from a narrator message, in order.

    Args:
        text (str): The narrator message.

    Returns:
        list[RollRequest]: The requests found, empty if there are none.

    Raises:
        MalformedExpression: If any tag is malformed.

    """
    return [parse_roll_request(text[start:end]) for start, end in _find_tags(text)]


def strip_roll_tags(text: str) -> str:
    """
    Removes every roll tag from a narrator message.

    Args:
        text (str): The narrator message.

    Returns:
        str: The message without tags, with surrounding whitespace trimmed.

    """
    pieces: list[str] = []
    cursor = 0
    for start, end in _find_tags(text):
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces).strip()


def classify_outcome(result: RollResult) -> OutcomeTier:
    """
    Classifies a roll into a narrative tier.

    A single d20 is graded on its total: 20 or more is a critical success,
    then great success, success, partial success and failure. The natural
    extremes win over the total, so a raw 20 is always a critical success
    and a raw 1 always a critical failure. Any other roll is graded against
    the highest sum its dice can show, ignoring the modifier.

    Args:
        result (RollResult): The roll to classify.

    Returns:
        OutcomeTier: The tier of the outcome.

    """
    expression = result.expression
    if expression.count != 1 or expression.sides != D20_SIDES:
        highest = expression.count * expression.sides
        if result.total >= highest * EXCELLENT_RESULT_RATIO:
            return OutcomeTier.EXCELLENT
        if result.total >= highest * GOOD_RESULT_RATIO:
            return OutcomeTier.GOOD
        if result.total >= highest * DECENT_RESULT_RATIO:
            return OutcomeTier.DECENT
        return OutcomeTier.POOR
    if result.is_fumble():
        return OutcomeTier.CRITICAL_FAILURE
    if result.is_critical() or result.total >= CRITICAL_SUCCESS_THRESHOLD:
        return OutcomeTier.CRITICAL_SUCCESS
    if result.total >= GREAT_SUCCESS_THRESHOLD:
        return OutcomeTier.GREAT_SUCCESS
    if result.total >= SUCCESS_THRESHOLD:
        return OutcomeTier.SUCCESS
    if result.total >= PARTIAL_SUCCESS_THRESHOLD:
        return OutcomeTier.PARTIAL_SUCCESS
    return OutcomeTier.FAILURE
