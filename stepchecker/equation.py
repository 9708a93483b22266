"""
StepChecker — Doing the same thing to both sides of an equation.

Each rule also runs backwards: going from ``x + 5 = y + 5`` to ``x = y``
is subtracting 5 from both sides, and going from ``5x = 5y`` to ``x = y``
is dividing both sides by 5.
"""

from typing import Optional

from stepchecker.arithmetic import add, get_factors, get_terms, is_subtraction, mul
from stepchecker.expression import Add, Div, Eq, Mul
from stepchecker.result import NOT_EQUIVALENT, Reason, Result

ADDING = "adding the same value to both sides"
SUBTRACTING = "subtracting the same value from both sides"
MULTIPLYING = "multiplying both sides by the same value"
DIVIDING = "dividing both sides by the same value"


class EquationChecker:

    def __init__(self, checker):
        self.checker = checker

    def _same_delta(self, lhs_new: list, rhs_new: list, combine) -> bool:
        """True when both sides gained something and it is literally the same."""
        if not lhs_new or not rhs_new:
            return False
        result = self.checker.check_step(combine(lhs_new), combine(rhs_new))
        # An equivalent-but-rewritten delta (2+3 vs 5) doesn't count
        return result.equivalent and len(result.reasons) == 0

    def _added_terms(self, prev: Eq, next_: Eq) -> Optional[list]:
        """Terms added to the left side going from *prev* to *next_*."""
        checker = self.checker
        lhs_a, rhs_a = prev.args
        lhs_b, rhs_b = next_.args
        if not (isinstance(lhs_b, Add) and isinstance(rhs_b, Add)):
            return None

        lhs_new = checker.difference(get_terms(lhs_b), get_terms(lhs_a))
        rhs_new = checker.difference(get_terms(rhs_b), get_terms(rhs_a))
        if not self._same_delta(lhs_new, rhs_new, add):
            return None
        return lhs_new

    def _added_factors(self, prev: Eq, next_: Eq) -> bool:
        checker = self.checker
        lhs_a, rhs_a = prev.args
        lhs_b, rhs_b = next_.args
        if not (isinstance(lhs_b, Mul) and isinstance(rhs_b, Mul)):
            return False

        lhs_new = checker.difference(get_factors(lhs_b), get_factors(lhs_a))
        rhs_new = checker.difference(get_factors(rhs_b), get_factors(rhs_a))
        return self._same_delta(lhs_new, rhs_new, mul)

    def _divided(self, prev: Eq, next_: Eq) -> bool:
        checker = self.checker
        lhs_a, rhs_a = prev.args
        lhs_b, rhs_b = next_.args
        if not (isinstance(lhs_b, Div) and isinstance(rhs_b, Div)):
            return False

        # The old sides must be carried over untouched as the numerators
        if not (
            checker.exact_match(lhs_a, lhs_b.args[0]).equivalent
            and checker.exact_match(rhs_a, rhs_b.args[0]).equivalent
        ):
            return False
        return checker.equality_check(lhs_b.args[1], rhs_b.args[1])

    # ── Rules ───────────────────────────────────────────────────────────

    def check_add_sub(self, prev: Eq, next_: Eq) -> Result:
        added = self._added_terms(prev, next_)
        if added is None:
            return NOT_EQUIVALENT
        message = SUBTRACTING if is_subtraction(added[0]) else ADDING
        return Result(True, (Reason(message, (prev, next_)),))

    def check_mul(self, prev: Eq, next_: Eq) -> Result:
        if not self._added_factors(prev, next_):
            return NOT_EQUIVALENT
        return Result(True, (Reason(MULTIPLYING, (prev, next_)),))

    def check_div(self, prev: Eq, next_: Eq) -> Result:
        if not self._divided(prev, next_):
            return NOT_EQUIVALENT
        return Result(True, (Reason(DIVIDING, (prev, next_)),))

    def undo_add_sub(self, prev: Eq, next_: Eq) -> Result:
        """``x + 5 = y + 5`` → ``x = y``."""
        removed = self._added_terms(next_, prev)
        if removed is None:
            return NOT_EQUIVALENT
        # Taking away a subtraction adds the value back
        message = ADDING if is_subtraction(removed[0]) else SUBTRACTING
        return Result(True, (Reason(message, (prev, next_)),))

    def undo_mul(self, prev: Eq, next_: Eq) -> Result:
        """``5x = 5y`` → ``x = y``."""
        if not self._added_factors(next_, prev):
            return NOT_EQUIVALENT
        return Result(True, (Reason(DIVIDING, (prev, next_)),))

    def undo_div(self, prev: Eq, next_: Eq) -> Result:
        """``x/5 = y/5`` → ``x = y``."""
        if not self._divided(next_, prev):
            return NOT_EQUIVALENT
        return Result(True, (Reason(MULTIPLYING, (prev, next_)),))

    def check_step(self, prev, next_) -> Result:
        if not (isinstance(prev, Eq) and isinstance(next_, Eq)):
            return NOT_EQUIVALENT
        if len(prev.args) != 2 or len(next_.args) != 2:
            return NOT_EQUIVALENT

        for rule in (
            self.check_add_sub, self.check_mul, self.check_div,
            self.undo_add_sub, self.undo_mul, self.undo_div,
        ):
            result = rule(prev, next_)
            if result.equivalent:
                return result
        return NOT_EQUIVALENT
