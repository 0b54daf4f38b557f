"""
Cost annotation for parsed plans.

EXPLAIN reports costs as decimal strings ("1.20"). Each node gets:
  cost_percent          = own cost / root total * 100   (only when total > 0)
  relative_cost_percent = own cost / parent basis * 100 (only when basis > 0)

Zero-cost containers are transparent: their children are compared against the
nearest ancestor with a nonzero cost.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from .nodes import PlanNode

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def parse_cost(value: Any) -> float:
    """First decimal numeral in value, else 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    m = _NUMBER_RE.search(str(value))
    return float(m.group(0)) if m else 0.0


def node_cost(cost_info: Optional[Dict[str, Any]]) -> float:
    """query_cost, else prefix_cost, else read_cost + eval_cost."""
    if not cost_info:
        return 0.0
    for k in ("query_cost", "prefix_cost"):
        if cost_info.get(k) is not None:
            return parse_cost(cost_info[k])
    if cost_info.get("read_cost") is not None or cost_info.get("eval_cost") is not None:
        return parse_cost(cost_info.get("read_cost")) + parse_cost(cost_info.get("eval_cost"))
    return 0.0


def annotate(root: PlanNode) -> PlanNode:
    """Set cost_percent / relative_cost_percent in place (pre-order). Idempotent."""
    total = node_cost(root.cost_info)
    stack: List[Tuple[PlanNode, float]] = [(root, 0.0)]
    while stack:
        node, basis = stack.pop()
        own = node_cost(node.cost_info)
        node.cost_percent = own / total * 100 if total > 0 else None
        node.relative_cost_percent = own / basis * 100 if basis > 0 else None
        child_basis = own if own != 0 else basis
        for child in reversed(node.children):
            stack.append((child, child_basis))
    return root
