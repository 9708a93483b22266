"""
StepChecker — Expression tree consumed by the step checker.

Every node is a frozen dataclass carrying a ``type`` discriminant, so two
trees compare equal exactly when they have the same shape and contents.
Argument lists are stored as tuples; builders may pass plain lists.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


class InvalidExpressionError(ValueError):
    """Raised when a tree breaks an arity rule (e.g. an ``add`` with one arg).

    This always points at a bug in whatever built the tree, never at a
    wrong algebra step, so the checker lets it propagate.
    """


def _freeze(node, attr: str = "args") -> None:
    # Dataclasses are frozen, so normalise list args through object.__setattr__
    value = getattr(node, attr)
    if not isinstance(value, tuple):
        object.__setattr__(node, attr, tuple(value))


# ── Atoms ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Number:
    value: str
    type: str = field(default="number", init=False)

    def __post_init__(self):
        if not isinstance(self.value, str):
            object.__setattr__(self, "value", str(self.value))


@dataclass(frozen=True)
class Identifier:
    name: str
    subscript: Optional["Expression"] = None
    type: str = field(default="identifier", init=False)


@dataclass(frozen=True)
class Constant:
    """Nullary node such as ``pi``, ``infinity`` or a named set like ``reals``."""

    kind: str

    @property
    def type(self) -> str:
        return self.kind


# ── Arithmetic ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Add:
    args: tuple
    type: str = field(default="add", init=False)

    def __post_init__(self):
        _freeze(self)


@dataclass(frozen=True)
class Mul:
    args: tuple
    # ``ab`` vs ``a*b`` only matters when printing
    implicit: bool = field(default=False, compare=False)
    type: str = field(default="mul", init=False)

    def __post_init__(self):
        _freeze(self)


@dataclass(frozen=True)
class Neg:
    arg: "Expression"
    subtraction: bool = False
    type: str = field(default="neg", init=False)


@dataclass(frozen=True)
class Div:
    args: tuple  # (numerator, denominator)
    type: str = field(default="div", init=False)

    def __post_init__(self):
        _freeze(self)


@dataclass(frozen=True)
class Exp:
    args: tuple  # (base, exponent)
    type: str = field(default="exp", init=False)

    def __post_init__(self):
        _freeze(self)


@dataclass(frozen=True)
class Eq:
    args: tuple
    type: str = field(default="eq", init=False)

    def __post_init__(self):
        _freeze(self)


# ── Everything else ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Operator:
    """Relational, logical, set and other numeric nodes.

    None of these take part in a named rewrite rule; the checker compares
    them structurally, so one shape (``kind`` plus ``args``) covers them all.
    Its ``type`` is the ``kind`` itself (``"lt"``, ``"union"``, ...).
    """

    kind: str
    args: tuple = ()

    def __post_init__(self):
        _freeze(self)

    @property
    def type(self) -> str:
        return self.kind


Expression = Union[
    Number, Identifier, Constant, Add, Mul, Neg, Div, Exp, Eq, Operator,
]

OPERATOR_KINDS = frozenset({
    # relational
    "neq", "lt", "lte", "gt", "gte",
    # logical
    "and", "or", "xor", "not", "implies", "iff",
    # sets
    "set", "union", "intersection", "set_diff", "cartesian_product",
    "in", "not_in", "subset", "proper_subset", "superset",
    "proper_superset", "not_subset",
    # other numeric
    "mod", "root", "log", "abs", "func", "sum", "prod", "limit", "diff",
    "int",
})

CONSTANT_KINDS = frozenset({
    "ellipsis", "infinity", "pi", "true", "false", "empty",
    "naturals", "integers", "rationals", "reals", "complexes",
})

# Argument order carries no meaning for these kinds.
COMMUTATIVE_TYPES = frozenset({
    "add", "mul", "eq", "neq", "and", "or", "xor", "iff",
    "union", "intersection", "set",
})

_NARY_TYPES = {"add", "mul", "eq"}
_BINARY_TYPES = {"div", "exp"}


def children(node) -> tuple:
    """Direct sub-expressions of *node*, in order."""
    if isinstance(node, Neg):
        return (node.arg,)
    if isinstance(node, Identifier):
        return (node.subscript,) if node.subscript is not None else ()
    return getattr(node, "args", ())


def assert_valid(node) -> None:
    """Check the arity rules for *node* itself (not its children)."""
    node_type = getattr(node, "type", None)
    if node_type in _NARY_TYPES:
        if len(node.args) < 2:
            raise InvalidExpressionError(
                f"{node!r} is not valid because it has less than two args"
            )
    elif node_type in _BINARY_TYPES:
        if len(node.args) != 2:
            raise InvalidExpressionError(
                f"{node!r} is not valid because it needs exactly two args"
            )
    elif isinstance(node, Operator):
        if node.kind not in OPERATOR_KINDS:
            raise InvalidExpressionError(f"Unknown operator kind '{node.kind}'")
    elif isinstance(node, Constant):
        if node.kind not in CONSTANT_KINDS:
            raise InvalidExpressionError(f"Unknown constant kind '{node.kind}'")
    elif not isinstance(node, (Number, Identifier, Neg)):
        raise InvalidExpressionError(f"{node!r} is not an expression node")


def assert_valid_tree(node) -> None:
    """Run :func:`assert_valid` over *node* and every descendant."""
    stack = [node]
    while stack:
        current = stack.pop()
        assert_valid(current)
        stack.extend(children(current))
