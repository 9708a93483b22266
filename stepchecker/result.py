"""
StepChecker — Result and Reason values returned by every rule.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Reason:
    """One justification in the chain from ``prev`` to ``next``.

    ``nodes`` holds the (before, after) pair the rule matched on, when the
    rule records it. It is empty for rules that don't.
    """

    message: str
    nodes: tuple = ()

    def __post_init__(self):
        if not isinstance(self.nodes, tuple):
            object.__setattr__(self, "nodes", tuple(self.nodes))


@dataclass(frozen=True)
class Result:
    equivalent: bool
    reasons: tuple = ()

    def __post_init__(self):
        if not isinstance(self.reasons, tuple):
            object.__setattr__(self, "reasons", tuple(self.reasons))

    @property
    def messages(self) -> list[str]:
        """Just the reason strings, in order."""
        return [reason.message for reason in self.reasons]

    def to_dict(self) -> dict:
        # Imported here to keep result.py free of the codec at import time
        from stepchecker.serialize import to_dict

        return {
            "equivalent": self.equivalent,
            "reasons": [
                {
                    "message": reason.message,
                    "nodes": [to_dict(node) for node in reason.nodes],
                }
                for reason in self.reasons
            ],
        }


NOT_EQUIVALENT = Result(False, ())
