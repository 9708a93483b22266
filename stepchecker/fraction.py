"""
StepChecker — Fraction rules.

Covers dividing by one, by the same value and by a fraction, multiplying
fractions together, and cancelling common factors between numerator and
denominator (with a prime-factorization retry for numbers like 30/6).
"""

from stepchecker.arithmetic import (
    ONE, decompose_factors, div, get_factors, mul,
)
from stepchecker.expression import Div, Mul
from stepchecker.result import NOT_EQUIVALENT, Reason, Result

CANCEL_REASON = "extract common factors from numerator and denominator"


class FractionChecker:

    def __init__(self, checker):
        self.checker = checker

    def div_by_frac(self, prev, next_) -> Result:
        """``a / (b/c)`` → ``a · c/b``."""
        if not isinstance(prev, Div):
            return NOT_EQUIVALENT
        numerator, denominator = prev.args
        if not isinstance(denominator, Div):
            return NOT_EQUIVALENT

        reciprocal = div(denominator.args[1], denominator.args[0])
        new_prev = mul([numerator, reciprocal])
        result = self.checker.check_step(new_prev, next_)
        if not result.equivalent:
            return NOT_EQUIVALENT
        reason = Reason(
            "dividing by a fraction is the same as multiplying by the reciprocal",
            (prev, new_prev),
        )
        return Result(True, (reason, *result.reasons))

    def div_by_one(self, prev, next_) -> Result:
        """``x / 1`` → ``x``."""
        if not isinstance(prev, Div):
            return NOT_EQUIVALENT
        numerator, denominator = prev.args
        if not self.checker.equality_check(denominator, ONE):
            return NOT_EQUIVALENT
        result = self.checker.check_step(numerator, next_)
        if not result.equivalent:
            return NOT_EQUIVALENT
        return Result(True, (*result.reasons, Reason("division by one", (prev, numerator))))

    def div_by_same(self, prev, next_) -> Result:
        """``x / x`` → ``1``."""
        if not isinstance(prev, Div):
            return NOT_EQUIVALENT
        numerator, denominator = prev.args
        result1 = self.checker.check_step(numerator, denominator)
        if not result1.equivalent:
            return NOT_EQUIVALENT
        result2 = self.checker.check_step(next_, ONE)
        if not result2.equivalent:
            return NOT_EQUIVALENT
        return Result(True, (
            *result1.reasons,
            Reason("division by the same value", (prev, ONE)),
            *result2.reasons,
        ))

    def mul_by_frac(self, prev, next_) -> Result:
        """``a/b · c/d`` → ``ac / bd``; plain factors join the numerator."""
        if not isinstance(prev, Mul) or not any(isinstance(arg, Div) for arg in prev.args):
            return NOT_EQUIVALENT

        num_factors, den_factors = [], []
        for arg in prev.args:
            if isinstance(arg, Div):
                numerator, denominator = arg.args
                num_factors.extend(get_factors(numerator))
                den_factors.extend(get_factors(denominator))
            else:
                num_factors.extend(get_factors(arg))

        new_prev = div(mul(num_factors), mul(den_factors))
        result = self.checker.check_step(new_prev, next_)
        if not result.equivalent:
            return NOT_EQUIVALENT
        reason = Reason("multiplying fractions", (prev, new_prev))
        return Result(True, (reason, *result.reasons))

    def check_division_canceling(self, prev, next_) -> Result:
        """``ab / ac`` → ``b / c`` by pulling ``a/a`` out as a factor of one."""
        checker = self.checker
        if not isinstance(prev, Div):
            return NOT_EQUIVALENT

        num_factors_a = get_factors(prev.args[0])
        den_factors_a = get_factors(prev.args[1])
        # ab/a → b is treated as ab/a → b/1
        if isinstance(next_, Div):
            numerator_b, denominator_b = next_.args
        else:
            numerator_b, denominator_b = next_, ONE
        num_factors_b = get_factors(numerator_b)
        den_factors_b = get_factors(denominator_b)

        # Nothing may be added to either side apart from factors equal to one.
        added_num = checker.difference(num_factors_b, num_factors_a)
        added_den = checker.difference(den_factors_b, den_factors_a)
        if not (
            checker.equality_check(mul(added_num), ONE)
            and checker.equality_check(mul(added_den), ONE)
        ):
            return self._prime_factorization(
                prev, next_, num_factors_a, den_factors_a, num_factors_b, den_factors_b,
            )

        removed_num = checker.difference(num_factors_a, num_factors_b)
        remaining_num = checker.intersection(num_factors_a, num_factors_b) or [ONE]
        removed_den = checker.difference(den_factors_a, den_factors_b)
        remaining_den = checker.intersection(den_factors_a, den_factors_b) or [ONE]

        if not removed_num or len(removed_num) != len(removed_den):
            return NOT_EQUIVALENT
        if not checker.equality(removed_num, removed_den):
            return NOT_EQUIVALENT

        # ab/ac → a/a · b/c
        product = mul([
            div(mul(removed_num), mul(removed_den)),
            div(mul(remaining_num), mul(remaining_den)),
        ])
        result = checker.check_step(product, next_)
        if not result.equivalent:
            return NOT_EQUIVALENT
        return Result(True, (Reason(CANCEL_REASON, (prev, product)), *result.reasons))

    def _prime_factorization(self, prev, next_, num_a, den_a, num_b, den_b) -> Result:
        """Retry cancelling after splitting numbers into primes (30/6 → 5)."""
        limit = self.checker.max_factor_value
        factored_num_a = decompose_factors(num_a, limit)
        factored_den_a = decompose_factors(den_a, limit)
        if len(factored_num_a) == len(num_a) and len(factored_den_a) == len(den_a):
            return NOT_EQUIVALENT

        new_prev = div(mul(factored_num_a), mul(factored_den_a))
        new_next = div(
            mul(decompose_factors(num_b, limit)), mul(decompose_factors(den_b, limit)),
        )

        # Both ends were rewritten, so the rewritten next must lead back to next
        result1 = self.check_division_canceling(new_prev, new_next)
        if not result1.equivalent:
            return NOT_EQUIVALENT
        result2 = self.checker.check_step(new_next, next_)
        if not result2.equivalent:
            return NOT_EQUIVALENT
        return Result(True, (
            Reason("prime factorization", (prev, new_prev)),
            *result1.reasons,
            *result2.reasons,
        ))

    def check_step(self, prev, next_) -> Result:
        for rule in (
            self.div_by_frac,
            self.div_by_one,
            self.div_by_same,
            self.mul_by_frac,
            # relies on div_by_one having been tried first
            self.check_division_canceling,
        ):
            for a, b in ((prev, next_), (next_, prev)):
                result = rule(a, b)
                if result.equivalent:
                    return result
        return NOT_EQUIVALENT
