"""
Tests for dice expression parsing and rolling.
"""

import random

import pytest
from pydantic import ValidationError

from tabletop_engine.core.dice_parser import (
    DiceExpression,
    get_max_roll,
    get_min_roll,
    parse,
    roll,
    roll_expression,
    tokenize,
)
from tabletop_engine.core.error_handling import EngineError, MalformedExpression


def test_parse_full_expression():
    """
    Test that count, sides and modifier are all read.
    """
    assert parse("3d6+2") == DiceExpression(count=3, sides=6, modifier=2)


def test_parse_without_modifier():
    expression = parse("1d20")
    assert expression.count == 1
    assert expression.sides == 20
    assert expression.modifier == 0


def test_parse_negative_modifier_with_whitespace_and_uppercase():
    assert parse(" 2D8 - 1 ") == DiceExpression(count=2, sides=8, modifier=-1)


def test_parse_implicit_count_only_when_allowed():
    """
    Test that a missing count is accepted only when explicitly allowed.
    """
    assert parse("d20", implicit_count=True) == DiceExpression(count=1, sides=20)
    with pytest.raises(MalformedExpression):
        parse("d20")


@pytest.mark.parametrize(
    "expression",
    [
        "d6",
        "2dX",
        "0d6",
        "",
        "   ",
        "3d6+",
        "1d1",
        "1d0",
        "101d6",
        "1d1001",
        "1d6+2+3",
        "-1d6",
        "3d",
        "six",
        "1d6 2",
    ],
)
def test_parse_rejects_malformed_expressions(expression):
    with pytest.raises(MalformedExpression):
        parse(expression)


def test_malformed_expression_carries_context():
    with pytest.raises(MalformedExpression) as exc_info:
        parse("2dX")
    error = exc_info.value
    assert isinstance(error, EngineError)
    assert error.context["expression"] == "2dX"
    assert error.context["position"] == 2


@pytest.mark.parametrize(
    "expression", ["9" * 5000 + "d6", "1d" + "6" * 5000, "1d6+" + "1" * 5000, "1234567d6"]
)
def test_parse_rejects_overlong_numbers(expression):
    with pytest.raises(MalformedExpression) as exc_info:
        parse(expression)
    assert "digits" in str(exc_info.value)


def test_six_digit_modifier_is_accepted():
    assert parse("1d20+100000").modifier == 100000


def test_parse_rejects_non_string():
    with pytest.raises(MalformedExpression):
        parse(None)  # type: ignore[arg-type]


def test_tokenize_terminates_with_end_token():
    tokens = tokenize("2d6+1")
    assert [token.kind for token in tokens] == ["NUMBER", "DIE", "NUMBER", "PLUS", "NUMBER", "END"]
    assert [token.text for token in tokens[:-1]] == ["2", "d", "6", "+", "1"]


@pytest.mark.parametrize("expression", ["3d6+2", "1d20", "2d4-1", "10d10"])
def test_canonical_text_is_preserved(expression):
    assert str(parse(expression)) == expression


def test_expression_bounds():
    assert get_min_roll("3d6+2") == 5
    assert get_max_roll("3d6+2") == 20
    assert get_min_roll("1d4-3") == -2


def test_with_modifier_returns_copy():
    base = parse("1d8")
    bumped = base.with_modifier(3)
    assert str(bumped) == "1d8+3"
    assert base.modifier == 0


def test_dice_expression_validates_limits():
    with pytest.raises(ValidationError):
        DiceExpression(count=0, sides=6)
    with pytest.raises(ValidationError):
        DiceExpression(count=1, sides=1)


def test_roll_uses_one_draw_per_die(scripted):
    """
    Test that each die consumes exactly one value from the random source.
    """
    rng = scripted(3, 4, 5)
    result = roll(parse("3d6+2"), rng)
    assert result.rolls == (3, 4, 5)
    assert result.total == 14
    assert result.description == "3d6(3+4+5)+2 = 14"
    assert rng.remaining == 0
    assert rng.draws == 3


def test_roll_single_die_natural_and_description(scripted):
    result = roll_expression("1d20+5", scripted(15))
    assert result.total == 20
    assert result.natural == 15
    assert result.description == "d20(15)+5 = 20"
    assert not result.is_critical()
    assert not result.is_fumble()


def test_critical_and_fumble_on_single_die(scripted):
    assert roll_expression("1d20", scripted(20)).is_critical()
    assert roll_expression("1d20", scripted(1)).is_fumble()


def test_multi_dice_roll_has_no_natural(scripted):
    result = roll_expression("2d6", scripted(6, 6))
    assert result.natural is None
    assert not result.is_critical()


@pytest.mark.parametrize("expression", ["1d20", "3d6+2", "4d4-2", "10d12+7", "100d2"])
def test_random_rolls_stay_within_bounds(expression):
    """
    Test that every roll has `count` outcomes in [1, sides] and a total
    between the expression's minimum and maximum.
    """
    rng = random.Random(1234)
    parsed = parse(expression)
    for _ in range(200):
        result = roll(parsed, rng)
        assert len(result.rolls) == parsed.count
        assert all(1 <= value <= parsed.sides for value in result.rolls)
        assert parsed.min_total() <= result.total <= parsed.max_total()


def test_seeded_rolls_are_reproducible():
    first = [roll_expression("3d6", random.Random(7)).total for _ in range(5)]
    second = [roll_expression("3d6", random.Random(7)).total for _ in range(5)]
    assert first == second


def test_roll_result_serializes_total(scripted):
    dumped = roll_expression("2d6+1", scripted(2, 3)).model_dump()
    assert dumped["total"] == 6
    assert dumped["rolls"] == (2, 3)
