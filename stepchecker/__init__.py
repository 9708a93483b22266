"""
StepChecker — checks that one algebraic expression follows from another
in a single step and explains which rule was used.
"""

from stepchecker.arithmetic import (
    NEG_ONE, ONE, ZERO, add, div, identifier, mul, neg, number,
)
from stepchecker.engine import StepChecker, check_step
from stepchecker.expression import (
    Add, Constant, Div, Eq, Exp, Identifier, InvalidExpressionError, Mul, Neg,
    Number, Operator,
)
from stepchecker.result import Reason, Result

__all__ = [
    "check_step", "StepChecker", "Result", "Reason", "InvalidExpressionError",
    "Add", "Constant", "Div", "Eq", "Exp", "Identifier", "Mul", "Neg",
    "Number", "Operator",
    "add", "div", "identifier", "mul", "neg", "number", "ZERO", "ONE", "NEG_ONE",
]
