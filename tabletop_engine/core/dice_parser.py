"""
Dice parser module for the resolution engine.

Provides a small tokenizer and parser for dice expressions in the canonical
`{count}d{sides}[+K|-K]` form, and rolls parsed expressions against an
injected random source.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .constants import MAX_DICE_COUNT, MAX_DICE_SIDES, MAX_NUMBER_DIGITS
from .error_handling import MalformedExpression, report
from .logging import log_debug
from .rng import RandomSource


class DiceExpression(BaseModel):
    """An immutable `NdM+K` dice expression."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(
        ge=1,
        le=MAX_DICE_COUNT,
        description="Number of dice to roll.",
    )
    sides: int = Field(
        ge=2,
        le=MAX_DICE_SIDES,
        description="Number of sides of each die.",
    )
    modifier: int = Field(
        default=0,
        description="Flat value added to the sum of the dice.",
    )

    def min_total(self) -> int:
        """Returns the lowest total this expression can produce."""
        return self.count + self.modifier

    def max_total(self) -> int:
        """Returns the highest total this expression can produce."""
        return self.count * self.sides + self.modifier

    def with_modifier(self, modifier: int) -> "DiceExpression":
        """Returns a copy of this expression with a different modifier."""
        return DiceExpression(count=self.count, sides=self.sides, modifier=modifier)

    def __str__(self) -> str:
        if self.modifier:
            return f"{self.count}d{self.sides}{self.modifier:+d}"
        return f"{self.count}d{self.sides}"


class RollResult(BaseModel):
    """The outcome of rolling a dice expression."""

    model_config = ConfigDict(frozen=True)

    expression: DiceExpression = Field(
        description="The expression this result answers.",
    )
    rolls: tuple[int, ...] = Field(
        description="Individual die outcomes, in the order they were drawn.",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return sum(self.rolls) + self.expression.modifier

    @property
    def natural(self) -> int | None:
        """The raw die of a single-die roll, None for multi-dice rolls."""
        if self.expression.count != 1 or not self.rolls:
            return None
        return self.rolls[0]

    def is_critical(self) -> bool:
        """
        Determines if the roll is a critical (raw die equal to its sides).
        """
        return self.natural == self.expression.sides

    def is_fumble(self) -> bool:
        """
        Determines if the roll is a fumble (raw die equal to 1).
        """
        return self.natural == 1

    @property
    def description(self) -> str:
        """Human readable breakdown, e.g. `2d6(3+4)+2 = 9`."""
        expr = self.expression
        if expr.count == 1:
            detail = f"d{expr.sides}({self.rolls[0]})"
        else:
            detail = f"{expr.count}d{expr.sides}({'+'.join(map(str, self.rolls))})"
        if expr.modifier:
            detail += f"{expr.modifier:+d}"
        return f"{detail} = {self.total}"

    def __str__(self) -> str:
        return self.description


# ---- Tokenizer ----


@dataclass(frozen=True)
class Token:
    """A lexical token of a dice expression."""

    kind: str
    text: str
    position: int


NUMBER = "NUMBER"
DIE = "DIE"
PLUS = "PLUS"
MINUS = "MINUS"
END = "END"

_SYMBOLS = {"d": DIE, "D": DIE, "+": PLUS, "-": MINUS}


def tokenize(expression: str) -> list[Token]:
    """
    Splits a dice expression into tokens.

    Args:
        expression (str): The expression to tokenize.

    Returns:
        list[Token]: The tokens, always terminated by an END token.

    Raises:
        MalformedExpression: If an unexpected character or an overlong
            number is found.

    """
    tokens: list[Token] = []
    index = 0
    while index < len(expression):
        char = expression[index]
        if char.isspace():
            index += 1
        elif char.isascii() and char.isdigit():
            start = index
            while (
                index < len(expression)
                and expression[index].isascii()
                and expression[index].isdigit()
            ):
                index += 1
            if index - start > MAX_NUMBER_DIGITS:
                raise report(
                    MalformedExpression(
                        f"Number at position {start} is longer than {MAX_NUMBER_DIGITS} digits",
                        {"expression": expression, "position": start},
                    )
                )
            tokens.append(Token(NUMBER, expression[start:index], start))
        elif char in _SYMBOLS:
            tokens.append(Token(_SYMBOLS[char], char, index))
            index += 1
        else:
            raise report(
                MalformedExpression(
                    f"Unexpected character {char!r} at position {index}",
                    {"expression": expression, "position": index},
                )
            )
    tokens.append(Token(END, "", len(expression)))
    return tokens


# ---- Parser ----


class _Parser:
    """Recursive-descent parser for `count 'd' sides [sign modifier]`."""

    def __init__(self, expression: str, implicit_count: bool) -> None:
        self.expression = expression
        self.implicit_count = implicit_count
        self.tokens = tokenize(expression)
        self.index = 0

    def peek(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def fail(self, message: str, token: Token) -> MalformedExpression:
        return report(
            MalformedExpression(
                message,
                {"expression": self.expression, "position": token.position},
            )
        )

    def expect(self, kind: str, what: str) -> Token:
        token = self.peek()
        if token.kind != kind:
            found = token.text or "end of expression"
            raise self.fail(f"Expected {what}, found {found!r}", token)
        return self.advance()

    def parse(self) -> DiceExpression:
        if self.peek().kind == DIE and self.implicit_count:
            count = 1
        else:
            count = int(self.expect(NUMBER, "dice count").text)
        self.expect(DIE, "'d'")
        sides_token = self.expect(NUMBER, "number of sides")
        sides = int(sides_token.text)

        modifier = 0
        if self.peek().kind in (PLUS, MINUS):
            sign = -1 if self.advance().kind == MINUS else 1
            modifier = sign * int(self.expect(NUMBER, "modifier").text)
        self.expect(END, "end of expression")

        if count < 1:
            raise self.fail(f"Dice count must be at least 1, got {count}", self.tokens[0])
        if count > MAX_DICE_COUNT:
            raise self.fail(
                f"Too many dice: {count} (limit: {MAX_DICE_COUNT})", self.tokens[0]
            )
        if sides < 2:
            raise self.fail(f"A die needs at least 2 sides, got {sides}", sides_token)
        if sides > MAX_DICE_SIDES:
            raise self.fail(
                f"Too many sides: {sides} (limit: {MAX_DICE_SIDES})", sides_token
            )
        return DiceExpression(count=count, sides=sides, modifier=modifier)


def parse(expression: str, implicit_count: bool = False) -> DiceExpression:
    """
    Parses a dice expression such as `3d6+2` or `1d20`.

    Args:
        expression (str):
            The expression to parse.
        implicit_count (bool):
            Accept a missing count (`d20`) as a single die. Defaults to False.

    Returns:
        DiceExpression: The parsed expression.

    Raises:
        MalformedExpression: If the expression does not follow the grammar.

    """
    if not isinstance(expression, str) or not expression.strip():
        raise report(
            MalformedExpression("Empty dice expression", {"expression": expression})
        )
    return _Parser(expression, implicit_count).parse()


# ---- Rolling ----


def roll(expression: DiceExpression, rng: RandomSource) -> RollResult:
    """
    Rolls every die of an expression using the given random source.

    Args:
        expression (DiceExpression): The expression to roll.
        rng (RandomSource): Source of the individual die outcomes.

    Returns:
        RollResult: The individual outcomes and their total.

    """
    rolls = tuple(rng.randint(1, expression.sides) for _ in range(expression.count))
    result = RollResult(expression=expression, rolls=rolls)
    log_debug(f"Rolled {expression} → {result.description}")
    return result


def roll_expression(expression: str, rng: RandomSource) -> RollResult:
    """
    Parses and rolls a dice expression.

    Args:
        expression (str): The dice expression to roll.
        rng (RandomSource): Source of the individual die outcomes.

    Returns:
        RollResult: The result of the roll.

    """
    return roll(parse(expression), rng)


def get_min_roll(expression: str) -> int:
    """Returns the minimum possible total of a dice expression."""
    return parse(expression).min_total()


def get_max_roll(expression: str) -> int:
    """Returns the maximum possible total of a dice expression."""
    return parse(expression).max_total()
