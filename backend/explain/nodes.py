"""
Plan node types produced by the EXPLAIN parser.

A PlanNode is either a table (leaf) or an operation (container). Containers own
their children exclusively; join chains are expressed by nesting, each chain
element being the child of the previous one.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional

KIND_TABLE = "table"
KIND_OPERATION = "operation"

LABEL_ORDER_BY = "ORDER BY"
LABEL_GROUP_BY = "GROUP BY"
LABEL_NESTED_LOOP = "nested_loop"
LABEL_QUERY_BLOCK = "query_block"


class FlatEdge(NamedTuple):
    source: str
    target: str


@dataclass
class PlanNode:
    id: str
    kind: str
    operation_label: str
    is_critical: bool = False
    children: List["PlanNode"] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)
    table_name: Optional[str] = None
    access_type: Optional[str] = None
    key: Optional[str] = None
    rows_examined: Optional[int] = None
    cost_info: Optional[Dict[str, Any]] = None
    attached_condition: Optional[str] = None
    used_columns: Optional[List[str]] = None
    cost_percent: Optional[float] = None
    relative_cost_percent: Optional[float] = None

    def _fields_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "type": self.kind,
            "operationType": self.operation_label,
            "isCritical": self.is_critical,
        }
        optional = {
            "tableName": self.table_name,
            "accessType": self.access_type,
            "key": self.key,
            "rowsExamined": self.rows_examined,
            "costInfo": self.cost_info,
            "attachedCondition": self.attached_condition,
            "usedColumns": self.used_columns,
            "costPercent": self.cost_percent,
            "relativeCostPercent": self.relative_cost_percent,
        }
        for k, v in optional.items():
            if v is not None:
                out[k] = v
        out["raw"] = self.raw
        return out

    def to_dict(self, include_children: bool = True) -> Dict[str, Any]:
        """
        Render for the frontend (camelCase keys, unset optionals omitted).

        Join chains nest one level per element; the subtree is walked with an
        explicit stack.
        """
        out = self._fields_dict()
        if not include_children:
            return out
        stack = [(self, out)]
        while stack:
            node, rendered = stack.pop()
            rendered["children"] = []
            for child in node.children:
                child_out = child._fields_dict()
                rendered["children"].append(child_out)
                stack.append((child, child_out))
        return out


@dataclass
class ParsedPlan:
    root: PlanNode
    chain_edges: List[FlatEdge] = field(default_factory=list)


@dataclass
class FlatGraph:
    """Flattened plan: nodes in pre-order, tree edges followed by chain edges."""
    nodes: List[PlanNode]
    tree_edges: List[FlatEdge]
    chain_edges: List[FlatEdge]

    @property
    def edges(self) -> List[FlatEdge]:
        return self.tree_edges + self.chain_edges
