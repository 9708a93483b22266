import pytest
from sympy import Rational

from stepchecker import arithmetic
from stepchecker.arithmetic import (
    ONE, ZERO, add, decompose_factors, div, get_factors, get_terms, identifier, mul,
    neg, number,
)
from stepchecker.expression import Add, Mul


a, b, c = identifier("a"), identifier("b"), identifier("c")


def test_terms_and_factors() -> None:
    assert get_terms(Add([a, b])) == [a, b]
    assert get_terms(Mul([a, b])) == [Mul([a, b])]
    assert get_factors(Mul([a, b, c])) == [a, b, c]
    assert get_factors(a) == [a]


def test_add_and_mul_collapse_short_lists() -> None:
    assert add([]) == ZERO
    assert mul([]) == ONE
    assert add([a]) == a
    assert mul([a]) == a
    assert add([a, b]) == Add([a, b])
    assert mul((a, b)) == Mul([a, b])


def test_negative_vs_subtraction() -> None:
    assert arithmetic.is_negative(neg(a))
    assert not arithmetic.is_negative(neg(a, subtraction=True))
    assert arithmetic.is_subtraction(neg(a, subtraction=True))
    assert not arithmetic.is_subtraction(a)


def test_numeric_value_is_exact() -> None:
    assert arithmetic.numeric_value(number("1.50")) == Rational(3, 2)
    assert arithmetic.numeric_value(neg(number("2"))) == -2
    assert arithmetic.numeric_value(neg(neg(number("2")))) == 2
    assert arithmetic.numeric_value(a) is None
    assert arithmetic.numeric_value(number("abc")) is None


@pytest.mark.parametrize(
    "left,right,expected",
    [
        ("1", "1.0", True),
        ("0.1", "0.10", True),
        ("2", "3", False),
        ("abc", "abc", True),
        ("abc", "abd", False),
    ],
)
def test_numbers_equal(left: str, right: str, expected: bool) -> None:
    assert arithmetic.numbers_equal(number(left), number(right)) is expected


def test_numbers_equal_with_tolerance() -> None:
    assert not arithmetic.numbers_equal(number("0.3333"), number("0.3334"))
    assert arithmetic.numbers_equal(number("0.3333"), number("0.3334"), tolerance=1e-3)
    assert arithmetic.numbers_equal(neg(number("1")), number("-1"))


@pytest.mark.parametrize(
    "value,expected",
    [
        (12, [2, 2, 3]),
        (30, [2, 3, 5]),
        ("24", [2, 2, 2, 3]),
        (17, [17]),
        (1, []),
        (0, []),
        ("17.8", []),
        ("-6", []),
    ],
)
def test_prime_decomp(value, expected) -> None:
    assert arithmetic.prime_decomp(value) == expected


def test_decompose_factors_keeps_non_numbers() -> None:
    factors = decompose_factors([number("6"), a, number("1")])
    assert factors == [number("2"), number("3"), a, number("1")]
    assert decompose_factors([number("2.5")]) == [number("2.5")]


def test_numeric_value_of_fractions() -> None:
    assert arithmetic.numeric_value(div(number(1), number(3))) == Rational(1, 3)
    assert arithmetic.numeric_value(neg(div(number(5), number(2)))) == Rational(-5, 2)
    assert arithmetic.numeric_value(div(number(1), number(0))) is None
    assert arithmetic.numeric_value(div(a, number(2))) is None
    assert not arithmetic.is_signed_number(div(number(1), number(2)))
    assert arithmetic.is_signed_number(neg(number(2)))


def test_prime_decomp_respects_the_size_limit() -> None:
    big = 10 ** 39 + 7
    assert arithmetic.prime_decomp(big, limit=10 ** 12) == []
    assert arithmetic.prime_decomp(30, limit=30) == [2, 3, 5]
    assert decompose_factors([number(big), number(6)], limit=10) == [
        number(big), number(2), number(3),
    ]
