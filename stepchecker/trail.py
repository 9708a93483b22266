"""
StepChecker — Step trail report.

Wraps a check in the report shape the web front end consumes:
numbered steps plus a summary with timing and library information.
"""

import time
from datetime import datetime
from typing import Optional

import sympy

from stepchecker.engine import check_step
from stepchecker.serialize import to_dict


def check_step_trail(prev, next_, settings: Optional[dict] = None) -> dict:
    """Check *prev* → *next_* and return the result as a trail dict."""
    start_time = time.perf_counter()
    result = check_step(prev, next_, settings)
    elapsed_ms = (time.perf_counter() - start_time) * 1000

    steps = []
    for i, reason in enumerate(result.reasons, start=1):
        steps.append({
            "step_number": i,
            "description": reason.message,
            "nodes": [to_dict(node) for node in reason.nodes],
        })

    if not result.equivalent:
        status = "not equivalent"
    elif steps:
        status = "verified"
    else:
        status = "unchanged"

    return {
        "before": to_dict(prev),
        "after": to_dict(next_),
        "equivalent": result.equivalent,
        "steps": steps,
        "summary": {
            "runtime_ms": round(elapsed_ms, 2),
            "total_steps": len(steps),
            "validation_status": status,
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": f"SymPy {sympy.__version__}",
        },
    }
