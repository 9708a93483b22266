"""
StepChecker — Builders and small pure helpers over expression trees.

Numeric values are handled with SymPy ``Rational`` so that decimal text
such as ``"0.1"`` is never rounded through a float.
"""

from typing import Optional

import numpy as np
import sympy
from sympy import Rational

from stepchecker.expression import Add, Div, Identifier, Mul, Neg, Number


# ── Builders ────────────────────────────────────────────────────────────

def number(value) -> Number:
    return Number(str(value))


def identifier(name: str, subscript=None) -> Identifier:
    return Identifier(name, subscript)


def neg(arg, subtraction: bool = False) -> Neg:
    return Neg(arg, subtraction)


def div(numerator, denominator) -> Div:
    return Div((numerator, denominator))


ZERO = number("0")
ONE = number("1")
NEG_ONE = neg(ONE)


def add(terms):
    """Inverse of :func:`get_terms`: ``[]`` → ``0``, ``[x]`` → ``x``."""
    terms = list(terms)
    if len(terms) == 0:
        return ZERO
    if len(terms) == 1:
        return terms[0]
    return Add(terms)


def mul(factors, implicit: bool = False):
    """Inverse of :func:`get_factors`: ``[]`` → ``1``, ``[x]`` → ``x``."""
    factors = list(factors)
    if len(factors) == 0:
        return ONE
    if len(factors) == 1:
        return factors[0]
    return Mul(factors, implicit)


def get_terms(expr) -> list:
    return list(expr.args) if isinstance(expr, Add) else [expr]


def get_factors(expr) -> list:
    return list(expr.args) if isinstance(expr, Mul) else [expr]


def is_negative(expr) -> bool:
    """Unary minus, e.g. the ``-a`` in ``b + -a``."""
    return isinstance(expr, Neg) and not expr.subtraction


def is_subtraction(expr) -> bool:
    """The implicit negation carried by binary minus, e.g. ``b - a``."""
    return isinstance(expr, Neg) and expr.subtraction


# ── Numbers ─────────────────────────────────────────────────────────────

def _parse(text: str) -> Optional[Rational]:
    try:
        return Rational(text)
    except (TypeError, ValueError, sympy.SympifyError):
        return None


def numeric_value(expr) -> Optional[Rational]:
    """Exact value of a number, a negated number or a fraction of numbers.

    ``-(1/3)`` → ``-1/3``. Anything else, including division by zero,
    gives ``None``.
    """
    if isinstance(expr, Number):
        return _parse(expr.value)
    if isinstance(expr, Neg):
        inner = numeric_value(expr.arg)
        return -inner if inner is not None else None
    if isinstance(expr, Div):
        numerator, denominator = (numeric_value(arg) for arg in expr.args)
        if numerator is None or denominator is None or denominator == 0:
            return None
        return numerator / denominator
    return None


def is_numeric(expr) -> bool:
    return numeric_value(expr) is not None


def is_signed_number(expr) -> bool:
    """A number literal, possibly negated; fractions don't count."""
    while isinstance(expr, Neg):
        expr = expr.arg
    return isinstance(expr, Number) and _parse(expr.value) is not None


def values_equal(x: Rational, y: Rational, tolerance: float = 0.0) -> bool:
    if tolerance > 0:
        return bool(np.isclose(float(x), float(y), rtol=0.0, atol=tolerance))
    return x == y


def numbers_equal(a, b, tolerance: float = 0.0) -> bool:
    """Compare two numeric nodes by value.

    ``"1"`` and ``"1.0"`` are equal. With a positive *tolerance* the values
    are compared as floats with ``numpy.isclose``. Text that doesn't parse
    as a number falls back to plain string comparison.
    """
    x, y = numeric_value(a), numeric_value(b)
    if x is None or y is None:
        return (
            isinstance(a, Number) and isinstance(b, Number)
            and a.value == b.value
        )
    return values_equal(x, y, tolerance)


def prime_decomp(n, limit: Optional[int] = None) -> list[int]:
    """Prime factors of *n* in ascending order, with repetition.

    ``12`` → ``[2, 2, 3]``. Non-integers, values below 2 and values above
    *limit* give ``[]``.
    """
    value = n if isinstance(n, Rational) else _parse(str(n))
    if value is None or not value.is_integer or value < 2:
        return []
    # factorint has no upper bound on its running time
    if limit is not None and value > limit:
        return []
    primes = []
    for prime, power in sorted(sympy.factorint(int(value)).items()):
        primes.extend([prime] * power)
    return primes


def decompose_factors(factors, limit: Optional[int] = None) -> list:
    """Replace every integer number factor up to *limit* with its prime factors."""
    result = []
    for factor in factors:
        if isinstance(factor, Number):
            primes = prime_decomp(factor.value, limit)
            if primes:
                result.extend(number(p) for p in primes)
                continue
        result.append(factor)
    return result
