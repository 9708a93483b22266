import pytest

from stepchecker import check_step
from stepchecker.arithmetic import identifier, number
from stepchecker.expression import (
    Add, Constant, Div, Eq, Exp, InvalidExpressionError, Mul, Neg, Operator,
    assert_valid, assert_valid_tree, children,
)


x, y = identifier("x"), identifier("y")


def test_nodes_are_immutable_values() -> None:
    node = Add([x, number(2)])
    assert node.args == (x, number("2"))
    assert node == Add((x, number("2")))
    assert hash(node) == hash(Add([x, number("2")]))
    with pytest.raises(AttributeError):
        node.args = ()


def test_implicit_multiplication_is_cosmetic() -> None:
    assert Mul([x, y], implicit=True) == Mul([x, y], implicit=False)


def test_type_discriminants() -> None:
    assert number(1).type == "number"
    assert x.type == "identifier"
    assert Neg(x).type == "neg"
    assert Div([x, y]).type == "div"
    assert Operator("lt", [x, y]).type == "lt"
    assert Constant("pi").type == "pi"


@pytest.mark.parametrize(
    "node",
    [
        Add([x]),
        Mul([]),
        Eq([x]),
        Div([x]),
        Exp([x, y, x]),
        Operator("frobnicate", [x]),
        Constant("tau"),
    ],
)
def test_assert_valid_rejects_bad_shapes(node) -> None:
    with pytest.raises(InvalidExpressionError):
        assert_valid(node)


def test_invalid_expression_error_is_value_error() -> None:
    assert issubclass(InvalidExpressionError, ValueError)


def test_assert_valid_tree_finds_nested_problems() -> None:
    nested = Neg(Div([Add([x]), y]))
    assert_valid(nested)
    with pytest.raises(InvalidExpressionError):
        assert_valid_tree(nested)


def test_check_step_rejects_invalid_trees() -> None:
    with pytest.raises(InvalidExpressionError):
        check_step(Add([x]), x)
    with pytest.raises(InvalidExpressionError):
        check_step(x, Mul([Mul([y]), x]))


def test_children() -> None:
    assert children(Neg(x)) == (x,)
    assert children(Add([x, y])) == (x, y)
    assert children(number(3)) == ()
    assert children(identifier("a", subscript=number(1))) == (number(1),)
