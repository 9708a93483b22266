"""
StepChecker — Rules about signs: inverses, subtraction and negation.

Each rule takes a ``reverse`` flag. A reversed rule rewrites ``next``
instead of ``prev``, so a step that *introduces* ``a + -a`` or ``--a``
is recognised as well as one that removes it.
"""

from stepchecker.arithmetic import (
    NEG_ONE, add, get_factors, get_terms, is_negative, is_subtraction, mul,
    neg, numeric_value,
)
from stepchecker.expression import Add, Mul, Neg
from stepchecker.result import NOT_EQUIVALENT, Reason, Result


class IntegerChecker:

    def __init__(self, checker):
        self.checker = checker

    def _recurse(self, prev, next_, new_prev, message: str, reverse: bool) -> Result:
        """Check *new_prev* (the rewritten ``prev``) against ``next`` and
        attach *message* on the side the rewrite happened."""
        if reverse:
            result = self.checker.check_step(next_, new_prev)
            if result.equivalent:
                reason = Reason(message, (new_prev, prev))
                return Result(True, (*result.reasons, reason))
        else:
            result = self.checker.check_step(new_prev, next_)
            if result.equivalent:
                reason = Reason(message, (prev, new_prev))
                return Result(True, (reason, *result.reasons))
        return NOT_EQUIVALENT

    def add_inverse(self, prev, next_, reverse: bool = False) -> Result:
        """``a + -a + b`` → ``b`` (also ``a - a`` → ``0``)."""
        if reverse:
            prev, next_ = next_, prev
        if not isinstance(prev, Add):
            return NOT_EQUIVALENT

        terms = get_terms(prev)
        for i, term in enumerate(terms):
            for j, other in enumerate(terms):
                if i == j or not isinstance(other, Neg):
                    continue
                if self.checker.equality_check(term, other.arg):
                    remaining = [t for k, t in enumerate(terms) if k not in (i, j)]
                    return self._recurse(
                        prev, next_, add(remaining), "adding inverse", reverse,
                    )
        return NOT_EQUIVALENT

    def sub_is_neg(self, prev, next_, reverse: bool = False) -> Result:
        """``a - b`` → ``a + -b``."""
        if reverse:
            prev, next_ = next_, prev
        if not is_subtraction(prev):
            return NOT_EQUIVALENT
        return self._recurse(
            prev, next_, neg(prev.arg),
            "subtracting is the same as adding the inverse", reverse,
        )

    def mul_two_negs_is_pos(self, prev, next_, reverse: bool = False) -> Result:
        """``(-a)(-b)`` → ``ab``."""
        if reverse:
            prev, next_ = next_, prev
        # TODO: handle products with more than two factors
        if not (isinstance(prev, Mul) and isinstance(next_, Mul)):
            return NOT_EQUIVALENT
        if len(prev.args) != 2 or len(next_.args) != 2:
            return NOT_EQUIVALENT
        first, second = prev.args
        if not (isinstance(first, Neg) and isinstance(second, Neg)):
            return NOT_EQUIVALENT
        return self._recurse(
            prev, next_, mul([first.arg, second.arg]),
            "multiplying two negatives is a positive", reverse,
        )

    def double_negative(self, prev, next_, reverse: bool = False) -> Result:
        """``--a`` → ``a``."""
        if reverse:
            prev, next_ = next_, prev
        if not (is_negative(prev) and is_negative(prev.arg)):
            return NOT_EQUIVALENT
        return self._recurse(
            prev, next_, prev.arg.arg,
            "negative of a negative is positive", reverse,
        )

    def neg_is_mul_neg_one(self, prev, next_, reverse: bool = False) -> Result:
        """``-a`` → ``-1 · a``."""
        if reverse:
            prev, next_ = next_, prev
        if not isinstance(prev, Neg):
            return NOT_EQUIVALENT
        # -1 would expand forever
        if numeric_value(prev.arg) == 1:
            return NOT_EQUIVALENT
        new_prev = mul([NEG_ONE, *get_factors(prev.arg)])
        return self._recurse(
            prev, next_, new_prev,
            "negation is the same as multiplying by negative one", reverse,
        )

    @staticmethod
    def _shortest(forward: Result, backward: Result) -> Result:
        if forward.equivalent and backward.equivalent:
            if len(forward.reasons) < len(backward.reasons):
                return forward
            return backward
        if forward.equivalent:
            return forward
        return backward

    def check_step(self, prev, next_) -> Result:
        for reverse in (False, True):
            result = self.add_inverse(prev, next_, reverse)
            if result.equivalent:
                return result

        result = self._shortest(
            self.sub_is_neg(prev, next_, False),
            self.sub_is_neg(prev, next_, True),
        )
        if result.equivalent:
            return result

        for reverse in (False, True):
            result = self.mul_two_negs_is_pos(prev, next_, reverse)
            if result.equivalent:
                return result

        # Both directions can succeed (e.g. --a vs ----a); keep the shorter trail
        result = self._shortest(
            self.double_negative(prev, next_, False),
            self.double_negative(prev, next_, True),
        )
        if result.equivalent:
            return result

        # Must come after double_negative, which gives a shorter path for --a → a
        for reverse in (False, True):
            result = self.neg_is_mul_neg_one(prev, next_, reverse)
            if result.equivalent:
                return result

        return NOT_EQUIVALENT
