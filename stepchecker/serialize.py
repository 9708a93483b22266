"""
StepChecker — Plain-dict (JSON) form of expression trees.

    {"type": "add", "args": [{"type": "identifier", "name": "x"},
                             {"type": "number", "value": "2"}]}
"""

from stepchecker.expression import (
    CONSTANT_KINDS, OPERATOR_KINDS, Add, Constant, Div, Eq, Exp, Identifier,
    Mul, Neg, Number, Operator,
)

_ARG_NODES = {"add": Add, "div": Div, "exp": Exp, "eq": Eq}


def to_dict(expr) -> dict:
    if isinstance(expr, Number):
        return {"type": "number", "value": expr.value}
    if isinstance(expr, Identifier):
        data = {"type": "identifier", "name": expr.name}
        if expr.subscript is not None:
            data["subscript"] = to_dict(expr.subscript)
        return data
    if isinstance(expr, Neg):
        return {"type": "neg", "arg": to_dict(expr.arg), "subtraction": expr.subtraction}
    if isinstance(expr, Constant):
        return {"type": expr.kind}
    if isinstance(expr, Mul):
        return {
            "type": "mul",
            "args": [to_dict(arg) for arg in expr.args],
            "implicit": expr.implicit,
        }
    if hasattr(expr, "args"):
        return {"type": expr.type, "args": [to_dict(arg) for arg in expr.args]}
    raise ValueError(f"Cannot serialize {expr!r}")


def _require(data: dict, key: str):
    if key not in data:
        raise ValueError(f"'{data.get('type')}' node is missing '{key}'")
    return data[key]


def from_dict(data: dict):
    """Build an expression from its dict form.

    Raises ValueError for unknown node types or missing fields. Arity is
    not checked here; the checker does that.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object, got {type(data).__name__}")
    node_type = data.get("type")

    if node_type == "number":
        return Number(str(_require(data, "value")))
    if node_type == "identifier":
        subscript = data.get("subscript")
        return Identifier(
            _require(data, "name"),
            from_dict(subscript) if subscript is not None else None,
        )
    if node_type == "neg":
        return Neg(from_dict(_require(data, "arg")), bool(data.get("subtraction", False)))
    if node_type in CONSTANT_KINDS:
        return Constant(node_type)

    if node_type != "mul" and node_type not in _ARG_NODES and node_type not in OPERATOR_KINDS:
        raise ValueError(f"Unknown expression type '{node_type}'")

    args = [from_dict(arg) for arg in _require(data, "args")]
    if node_type == "mul":
        return Mul(args, bool(data.get("implicit", False)))
    if node_type in _ARG_NODES:
        return _ARG_NODES[node_type](args)
    return Operator(node_type, args)
