import pytest

from stepchecker import check_step
from stepchecker.arithmetic import ONE, div, identifier, mul, number
from stepchecker.fraction import CANCEL_REASON


a, b, c, d = (identifier(name) for name in "abcd")
n = number

RECIPROCAL = "dividing by a fraction is the same as multiplying by the reciprocal"
SAME = "division by the same value"
BY_ONE = "division by one"
MUL_FRACS = "multiplying fractions"
MUL_IDENTITY = "multiplication with identity"
EVAL_MUL = "evaluation of multiplication"


def test_prime_factorization_end_to_end() -> None:
    assert check_step(div(n(30), n(6)), n(5)).messages == [
        "prime factorization", CANCEL_REASON, SAME, MUL_IDENTITY, BY_ONE,
    ]


@pytest.mark.parametrize(
    "prev,next_",
    [
        (div(n(24), n(6)), n(4)),
        (div(mul([n(24), a, b]), mul([n(6), a])), mul([n(4), b])),
    ],
)
def test_prime_factorization_then_evaluation(prev, next_) -> None:
    assert check_step(prev, next_).messages == [
        "prime factorization", CANCEL_REASON, SAME, MUL_IDENTITY, EVAL_MUL, BY_ONE,
    ]


def test_canceling_common_factors() -> None:
    assert check_step(div(mul([n(2), a]), a), n(2)).messages == [
        CANCEL_REASON, SAME, MUL_IDENTITY, BY_ONE,
    ]
    assert check_step(div(mul([n(2), a, b, c]), mul([a, b])), mul([n(2), c])).messages == [
        CANCEL_REASON, SAME, MUL_IDENTITY, BY_ONE,
    ]
    assert check_step(
        div(mul([n(2), a, b, c]), mul([a, b])), div(mul([n(2), b, c]), b),
    ).messages == [CANCEL_REASON, SAME, MUL_IDENTITY]


def test_canceling_cannot_introduce_new_factors() -> None:
    result = check_step(div(mul([n(2), a]), a), mul([n(2), b]))
    assert not result.equivalent
    assert result.reasons == ()


def test_division_by_the_same_value() -> None:
    assert check_step(ONE, div(a, a)).messages == [SAME]
    assert check_step(div(a, a), ONE).messages == [SAME]


def test_division_by_one() -> None:
    assert check_step(a, div(a, ONE)).messages == [BY_ONE]
    assert check_step(mul([a, b]), div(mul([a, b]), ONE)).messages == [BY_ONE]


def test_multiplying_fractions() -> None:
    product = mul([div(a, b), div(c, d)])
    combined = div(mul([a, c]), mul([b, d]))
    assert check_step(product, combined).messages == [MUL_FRACS]
    assert check_step(combined, product).messages == [MUL_FRACS]


def test_multiplying_by_a_unit_fraction() -> None:
    assert check_step(mul([div(a, b), div(ONE, d)]), div(a, mul([b, d]))).messages == [
        MUL_FRACS, MUL_IDENTITY,
    ]
    assert check_step(mul([a, div(ONE, b)]), div(a, b)).messages == [MUL_FRACS, MUL_IDENTITY]


def test_fraction_times_its_reciprocal() -> None:
    assert check_step(mul([div(a, b), div(b, a)]), ONE).messages == [
        MUL_FRACS, "commutative property", SAME,
    ]


def test_dividing_by_a_fraction() -> None:
    assert check_step(div(a, div(b, c)), mul([a, div(c, b)])).messages == [RECIPROCAL]
    assert check_step(div(ONE, div(a, b)), div(b, a)).messages == [RECIPROCAL, MUL_IDENTITY]
    assert check_step(div(ONE, div(ONE, a)), a).messages == [RECIPROCAL, MUL_IDENTITY, BY_ONE]
    assert check_step(div(a, div(ONE, b)), mul([a, b])).messages == [
        RECIPROCAL, MUL_FRACS, BY_ONE,
    ]


def test_multiplying_by_the_same_value_over_itself() -> None:
    assert check_step(mul([a, div(b, b)]), a).messages == [SAME, MUL_IDENTITY]
    assert check_step(a, mul([a, div(b, b)])).messages == [SAME, MUL_IDENTITY]


def test_swapping_numerator_and_denominator_is_rejected() -> None:
    assert not check_step(div(a, b), div(b, a)).equivalent


def test_large_numbers_are_not_split_into_primes() -> None:
    assert check_step(div(n(30), n(6)), n(5), {"max_factor_value": 10}).equivalent is False
    assert check_step(div(n(30), n(6)), n(5), {"max_factor_value": 30}).equivalent is True
