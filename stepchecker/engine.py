"""
StepChecker — Decides whether one expression follows from another in a
single algebraic step, and explains why.

``StepChecker.check_step`` tries a fixed list of rewrite rules and stops at
the first one that succeeds. Most rules call back into ``check_step`` on
sub-expressions, so each rule is small and the recursion does the work.
The fraction, integer and equation rules live in their own modules and
receive the checker in their constructor.
"""

import logging
from typing import Optional

from stepchecker.arithmetic import (
    ONE, ZERO, add, get_factors, get_terms, is_numeric, is_signed_number, mul,
    numbers_equal, numeric_value, values_equal,
)
from stepchecker.config import merge_settings
from stepchecker.equation import EquationChecker
from stepchecker.expression import (
    COMMUTATIVE_TYPES, Add, Constant, Eq, Identifier, Mul, Neg, Number,
    assert_valid, assert_valid_tree,
)
from stepchecker.fraction import FractionChecker
from stepchecker.integer import IntegerChecker
from stepchecker.result import NOT_EQUIVALENT, Reason, Result

logger = logging.getLogger(__name__)


class StepChecker:
    """Recursive step checker.

    An instance tracks its own recursion depth, so share one only within a
    single thread. :func:`check_step` builds a fresh one per call.
    """

    def __init__(self, settings: Optional[dict] = None):
        self.settings = merge_settings(settings)
        self.max_depth = self.settings["max_depth"]
        self.max_factor_value = self.settings["max_factor_value"]
        self.tolerance = self.settings["numeric_tolerance"]
        self._depth = 0

        self.fraction_checker = FractionChecker(self)
        self.integer_checker = IntegerChecker(self)
        self.equation_checker = EquationChecker(self)

    # ── Set-like helpers over expression lists ──────────────────────────

    def equality_check(self, a, b) -> bool:
        return self.check_step(a, b).equivalent

    def intersection(self, as_: list, bs: list) -> list:
        """Elements of *as_* with an equivalent in *bs*.

        Each element of *bs* can be matched only once.
        """
        bs = list(bs)
        result = []
        for a in as_:
            for index, b in enumerate(bs):
                if self.equality_check(a, b):
                    result.append(a)
                    del bs[index]
                    break
        return result

    def difference(self, as_: list, bs: list) -> list:
        """Elements of *as_* left over once each is matched against *bs*."""
        bs = list(bs)
        result = []
        for a in as_:
            for index, b in enumerate(bs):
                if self.equality_check(a, b):
                    del bs[index]
                    break
            else:
                result.append(a)
        return result

    def equality(self, as_: list, bs: list) -> bool:
        """Every element of each list has an equivalent in the other."""
        return (
            all(any(self.equality_check(a, b) for b in bs) for a in as_)
            and all(any(self.equality_check(a, b) for a in as_) for b in bs)
        )

    def check_args(self, prev, next_) -> Result:
        """Same args in any order.

        This is a coverage check rather than a strict permutation: equal
        arity, and every arg on each side has an equivalent on the other.
        """
        if len(prev.args) != len(next_.args):
            return NOT_EQUIVALENT

        reasons = []
        for prev_arg in prev.args:
            for next_arg in next_.args:
                result = self.check_step(prev_arg, next_arg)
                if result.equivalent:
                    reasons.extend(result.reasons)
                    break
            else:
                return NOT_EQUIVALENT

        for next_arg in next_.args:
            if not any(self.equality_check(prev_arg, next_arg) for prev_arg in prev.args):
                return NOT_EQUIVALENT
        return Result(True, reasons)

    def _check_positional(self, prev, next_) -> Result:
        if len(prev.args) != len(next_.args):
            return NOT_EQUIVALENT
        reasons = []
        for prev_arg, next_arg in zip(prev.args, next_.args):
            result = self.check_step(prev_arg, next_arg)
            if not result.equivalent:
                return NOT_EQUIVALENT
            reasons.extend(result.reasons)
        return Result(True, reasons)

    # ── Identity ────────────────────────────────────────────────────────

    def add_zero(self, prev, next_) -> Result:
        if not isinstance(prev, Add):
            return NOT_EQUIVALENT
        # TODO: offer a friendlier wording ("adding zero doesn't change anything")
        return self._check_identity(prev, next_, add, ZERO, "addition with identity")

    def mul_one(self, prev, next_) -> Result:
        if not isinstance(prev, Mul):
            return NOT_EQUIVALENT
        return self._check_identity(prev, next_, mul, ONE, "multiplication with identity")

    def _check_identity(self, prev, next_, op, identity, message: str) -> Result:
        identity_reasons = []
        remaining = []
        for arg in prev.args:
            result = self.check_step(arg, identity)
            if result.equivalent:
                identity_reasons.extend(result.reasons)
            else:
                remaining.append(arg)

        # No identity was removed, so this rule doesn't apply
        if len(remaining) == len(prev.args):
            return NOT_EQUIVALENT

        new_prev = op(remaining)
        result = self.check_step(new_prev, next_)
        if not result.equivalent:
            return NOT_EQUIVALENT
        return Result(True, (
            *identity_reasons,
            Reason(message, (prev, new_prev)),
            *result.reasons,
        ))

    # ── Evaluation ──────────────────────────────────────────────────────

    def evaluate_add(self, prev, next_) -> Result:
        """``2 + 3`` → ``5``, also inside a longer sum (``x + 2 + 3`` → ``x + 5``).

        Fractions of numbers take part too: ``1 - 1/3`` → ``2/3``.
        """
        if not (isinstance(prev, Add) or isinstance(next_, Add)):
            return NOT_EQUIVALENT
        return self._evaluate(prev, next_, get_terms, sum, "evaluation of addition")

    def evaluate_mul(self, prev, next_) -> Result:
        """``2 · 3`` → ``6``, ``1/2 · 1/3`` → ``1/6``."""
        if not (isinstance(prev, Mul) or isinstance(next_, Mul)):
            return NOT_EQUIVALENT
        return self._evaluate(
            prev, next_, get_factors, _product, "evaluation of multiplication",
        )

    def decompose_sum(self, prev, next_) -> Result:
        """``5`` → ``2 + 3``."""
        if not (isinstance(prev, Add) or isinstance(next_, Add)):
            return NOT_EQUIVALENT
        return self._evaluate(
            next_, prev, get_terms, sum, "decompose sum", nodes=(prev, next_),
        )

    def decompose_product(self, prev, next_) -> Result:
        """``6`` → ``2 · 3``."""
        if not (isinstance(prev, Mul) or isinstance(next_, Mul)):
            return NOT_EQUIVALENT
        return self._evaluate(
            next_, prev, get_factors, _product, "decompose product", nodes=(prev, next_),
        )

    def _evaluate(self, prev, next_, split, combine, message: str, nodes=None) -> Result:
        """Several numbers in *prev* combine into fewer numbers in *next_*.

        The decomposition rules call this with the two sides swapped.
        """
        prev_items, next_items = split(prev), split(next_)
        prev_nums = [item for item in prev_items if is_numeric(item)]
        next_nums = [item for item in next_items if is_numeric(item)]

        # Only the numbers that changed need to agree
        common = self.intersection(prev_nums, next_nums)
        prev_uniq = self.difference(prev_nums, common)
        next_uniq = self.difference(next_nums, common)
        if not next_uniq or len(prev_uniq) <= len(next_uniq):
            return NOT_EQUIVALENT

        prev_value = combine(numeric_value(item) for item in prev_uniq)
        next_value = combine(numeric_value(item) for item in next_uniq)
        if not values_equal(prev_value, next_value, self.tolerance):
            return NOT_EQUIVALENT

        # Whatever isn't a number must be left alone
        prev_rest = [item for item in prev_items if not is_numeric(item)]
        next_rest = [item for item in next_items if not is_numeric(item)]
        if self.difference(prev_rest, next_rest) or self.difference(next_rest, prev_rest):
            return NOT_EQUIVALENT
        return Result(True, (Reason(message, nodes or (prev, next_)),))

    # ── Commutativity ───────────────────────────────────────────────────

    def commute_addition(self, prev, next_) -> Result:
        return self._commute(prev, next_, Add, "commutative property")

    def commute_multiplication(self, prev, next_) -> Result:
        return self._commute(prev, next_, Mul, "commutative property")

    def symmetric_property(self, prev, next_) -> Result:
        return self._commute(prev, next_, Eq, "symmetric property", reason_first=True)

    def _commute(self, prev, next_, node_cls, message: str, reason_first: bool = False) -> Result:
        if not (isinstance(prev, node_cls) and isinstance(next_, node_cls)):
            return NOT_EQUIVALENT
        if len(prev.args) != len(next_.args):
            return NOT_EQUIVALENT

        result = self.check_args(prev, next_)
        if not result.equivalent:
            return NOT_EQUIVALENT

        # If every arg still lines up with its partner nothing was reordered
        reordered = any(
            not self.equality_check(first, second)
            for first, second in zip(prev.args, next_.args)
        )
        if not reordered:
            return NOT_EQUIVALENT

        reason = Reason(message, (prev, next_))
        if reason_first:
            return Result(True, (reason, *result.reasons))
        return Result(True, (*result.reasons, reason))

    # ── Distribution / factoring ────────────────────────────────────────

    def check_distribution(self, prev, next_) -> Result:
        if not (isinstance(prev, Mul) and isinstance(next_, Add)):
            return NOT_EQUIVALENT
        return self._distribution_factoring(next_, prev, "distribution")

    def check_factoring(self, prev, next_) -> Result:
        if not (isinstance(prev, Add) and isinstance(next_, Mul)):
            return NOT_EQUIVALENT
        return self._distribution_factoring(prev, next_, "factoring")

    def _distribution_factoring(self, add_node: Add, mul_node: Mul, message: str) -> Result:
        # TODO: distribute across products with more than two factors
        if len(mul_node.args) != 2:
            return NOT_EQUIVALENT

        distributing = message == "distribution"
        left, right = mul_node.args
        for x, y, x_first in ((left, right, True), (right, left, False)):
            if not isinstance(y, Add) or len(y.args) != len(add_node.args):
                continue

            sub_reasons = []
            for term, inner in zip(add_node.args, y.args):
                # Keep the factor on the side it was written on
                product = mul([x, inner]) if x_first else mul([inner, x])
                # Sub-steps run in the same direction as the step itself
                if distributing:
                    result = self.check_step(product, term)
                else:
                    result = self.check_step(term, product)
                if not result.equivalent:
                    break
                sub_reasons.extend(result.reasons)
            else:
                if distributing:
                    reason = Reason(message, (mul_node, add_node))
                    return Result(True, (reason, *sub_reasons))
                reason = Reason(message, (add_node, mul_node))
                return Result(True, (*sub_reasons, reason))
        return NOT_EQUIVALENT

    def mul_by_zero(self, prev, next_) -> Result:
        """``a · 0`` → ``0``."""
        if not isinstance(prev, Mul):
            return NOT_EQUIVALENT
        if not any(self.equality_check(arg, ZERO) for arg in prev.args):
            return NOT_EQUIVALENT
        result = self.check_step(next_, ZERO)
        if not result.equivalent:
            return NOT_EQUIVALENT
        return Result(True, (
            *result.reasons,
            Reason("multiplication by zero", (prev, next_)),
        ))

    # ── Dispatcher ──────────────────────────────────────────────────────

    def exact_match(self, prev, next_) -> Result:
        return Result(prev == next_, ())

    def check_step(self, prev, next_) -> Result:
        """Return a :class:`Result` saying whether *prev* → *next_* is valid.

        Only the top-level nodes are validated here; the module-level
        :func:`check_step` validates whole trees once up front.
        """
        assert_valid(prev)
        assert_valid(next_)

        if self._depth >= self.max_depth:
            logger.debug("Depth budget of %d reached; treating step as invalid", self.max_depth)
            return NOT_EQUIVALENT

        self._depth += 1
        try:
            return self._dispatch(prev, next_)
        finally:
            self._depth -= 1

    def _dispatch(self, prev, next_) -> Result:
        result = self.exact_match(prev, next_)
        if result.equivalent:
            return result

        # Order matters: simpler explanations are tried first. Integer rules
        # run before fraction rules so a sign is rewritten before a quotient
        # is split or cancelled. mul_by_frac belongs to the fraction group,
        # so a product holding both a fraction and a sum has its fractions
        # combined before distribution is tried.
        for rule, a, b in (
            (self.evaluate_mul, prev, next_),
            (self.evaluate_add, prev, next_),
            (self.decompose_product, prev, next_),
            (self.decompose_sum, prev, next_),
            (self.symmetric_property, prev, next_),
            (self.commute_addition, prev, next_),
            (self.commute_multiplication, prev, next_),
            (self.add_zero, prev, next_),
            (self.add_zero, next_, prev),
            (self.mul_one, prev, next_),
            (self.mul_one, next_, prev),
            (self.integer_checker.check_step, prev, next_),
            (self.fraction_checker.check_step, prev, next_),
            (self.check_distribution, prev, next_),
            (self.check_factoring, prev, next_),
            (self.mul_by_zero, prev, next_),
            (self.mul_by_zero, next_, prev),
            (self.equation_checker.check_step, prev, next_),
        ):
            result = rule(a, b)
            if result.equivalent:
                logger.debug("%s matched %s -> %s", rule.__qualname__, prev.type, next_.type)
                return result

        return self._structural(prev, next_)

    def _structural(self, prev, next_) -> Result:
        """Fallback when no named rule applies: compare node by node."""
        if prev.type == next_.type:
            if isinstance(prev, Neg):
                if prev.subtraction != next_.subtraction:
                    return NOT_EQUIVALENT
                result = self.check_step(prev.arg, next_.arg)
                return result if result.equivalent else NOT_EQUIVALENT
            if isinstance(prev, Number):
                return Result(numbers_equal(prev, next_, self.tolerance), ())
            if isinstance(prev, Identifier):
                return Result(
                    prev.name == next_.name and prev.subscript == next_.subscript, (),
                )
            if isinstance(prev, Constant):
                return Result(True, ())
            if prev.type in COMMUTATIVE_TYPES:
                return self.check_args(prev, next_)
            return self._check_positional(prev, next_)

        # e.g. the number -1 against the negation of 1
        if is_signed_number(prev) and is_signed_number(next_):
            return Result(numbers_equal(prev, next_, self.tolerance), ())
        return NOT_EQUIVALENT


def _product(values):
    total = 1
    for value in values:
        total = total * value
    return total


def check_step(prev, next_, settings: Optional[dict] = None) -> Result:
    """Check that *next_* follows from *prev* in one algebraic step.

    Raises :class:`~stepchecker.expression.InvalidExpressionError` if either
    tree is malformed.
    """
    assert_valid_tree(prev)
    assert_valid_tree(next_)
    return StepChecker(settings).check_step(prev, next_)
