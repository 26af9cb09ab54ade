import pytest

from evaluator import evaluate, trunc_div
from lexer import tokenize
from models import BinaryExpr, ErrorKind, ExprError, IntegerLiteral, UnaryExpr
from orchestrator import evaluate_expression
from parser import parse


@pytest.mark.parametrize("source, expected", [
    ("0", 0), ("42", 42), ("-7", -7),
    ("2 + 3", 5), ("10 - 15", -5), ("3 * 4", 12), ("7 * 0", 0), ("10 / 5", 2),
    ("2 + 3 * 4", 14), ("10 - 6 / 2", 7), ("2 * 3 + 4 * 5", 26),
    ("(2 + 3) * 4", 20), ("2 * (3 + 4)", 14), ("((1 + 2) * (3 - 1))", 6),
    ("((2 + 3) * (4 - 1)) / 3", 5), ("((10 - 5) * (3 + 2)) / (1 + 4)", 5),
    ("-5 + 3", -2), ("3 + -5", -2), ("-(2 + 3)", -5), ("-(5 - 8)", 3),
    ("--5", 5), ("---5", -5), ("-2 * -3", 6), ("-(3 + 4 * 2) / 5", -2),
    ("1 - 2 - 3", -4), ("20 / 4 / 2", 2), ("1 + 2 + 3 + 4", 10),
    ("100 / 5 + 3 * 2", 26), ("  2  +  3  ", 5), ("(  1 + 2  ) * 3", 9),
    ("999999 * 2", 1999998),
])
def test_evaluate_expression(source, expected):
    assert evaluate_expression(source) == expected


@pytest.mark.parametrize("source, expected", [
    ("7 / 3", 2), ("-7 / 3", -2), ("7 / -3", -2), ("-7 / -3", 2),
    ("0 / 5", 0), ("6 / -3", -2), ("1 / 2", 0), ("-1 / 2", 0),
])
def test_division_truncates_toward_zero(source, expected):
    assert evaluate_expression(source) == expected


def test_trunc_div_differs_from_floor_div():
    assert trunc_div(-7, 2) == -3
    assert -7 // 2 == -4


def test_negative_zero_is_zero():
    assert evaluate_expression("-0") == 0
    assert evaluate_expression("-0") == evaluate_expression("0")


def test_no_overflow_ceiling():
    assert evaluate_expression("99999999999 * 99999999999") == 99999999999 ** 2


@pytest.mark.parametrize("source, index", [("5 / 0", 2), ("10 / (5 - 5)", 3), ("1 + 8 / (2 - 2)", 6)])
def test_division_by_zero(source, index):
    with pytest.raises(ExprError) as exc:
        evaluate_expression(source)
    assert exc.value.kind is ErrorKind.EVAL
    assert "Division by zero" in exc.value.message
    assert exc.value.index == index


def test_hand_built_tree():
    tree = BinaryExpr(
        operator="-",
        left=UnaryExpr(operand=IntegerLiteral(value=4, index=1), index=0),
        right=IntegerLiteral(value=6, index=5),
        index=3,
    )
    assert evaluate(tree) == -10


def test_reevaluation_is_stable():
    tree = parse(tokenize("(17 - 3) * -2 / 5"))
    assert {evaluate(tree) for _ in range(5)} == {-5}


def test_unknown_node():
    with pytest.raises(TypeError):
        evaluate(object())


@pytest.mark.parametrize("source, kind", [
    ("2 + x", ErrorKind.LEX),
    ("1 +", ErrorKind.PARSE),
    ("   ", ErrorKind.PARSE),
    ("5 / 0", ErrorKind.EVAL),
    # lexing fails before the missing operand or the zero divisor is seen
    ("5 / 0 +  @", ErrorKind.LEX),
    ("5 / 0 +", ErrorKind.PARSE),
])
def test_first_failing_stage_propagates(source, kind):
    with pytest.raises(ExprError) as exc:
        evaluate_expression(source)
    assert exc.value.kind is kind


@pytest.mark.parametrize("source, expected", [
    ("(" * 200 + "3" + ")" * 200, 3),
    ("-" * 999 + "5", -5),
    ("-" * 1000 + "5", 5),
    (" + ".join(["1"] * 5000), 5000),
    ("2" + " * -1" * 2000, 2),
])
def test_deep_input(source, expected):
    assert evaluate_expression(source) == expected


def test_deep_hand_built_tree():
    tree = IntegerLiteral(value=9, index=0)
    for _ in range(5000):
        tree = UnaryExpr(operand=tree, index=0)
    assert evaluate(tree) == 9


def test_left_operand_fails_first():
    with pytest.raises(ExprError) as exc:
        evaluate_expression("(1/0) + (2/0)")
    assert exc.value.index == 2
