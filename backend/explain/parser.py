"""
MySQL EXPLAIN FORMAT=JSON parser.

Recursive descent over the sparse EXPLAIN schema. Only the top-level
"query_block" field is required; every other field may be missing.

Shapes:
  table               -> leaf node, critical on full / fulltext scan
  ordering_operation  -> "ORDER BY" node
  grouping_operation  -> "GROUP BY" node
  nested_loop element -> "nested_loop" node (or inlined table, see _parse_chain)
  query_block         -> root node
"""

from typing import Any, Dict, List, Optional, Tuple

import orjson

from .errors import EmptyInput, MalformedSyntax, UnrecognizedFormat
from .nodes import (
    KIND_OPERATION,
    KIND_TABLE,
    LABEL_GROUP_BY,
    LABEL_NESTED_LOOP,
    LABEL_ORDER_BY,
    LABEL_QUERY_BLOCK,
    FlatEdge,
    ParsedPlan,
    PlanNode,
)

CRITICAL_ACCESS_TYPES = frozenset({"ALL", "fulltext"})

# Child slots per container kind, in the order children are emitted.
OPERATION_SLOTS: Tuple[str, ...] = ("table", "nested_loop")
CHAIN_ELEMENT_SLOTS: Tuple[str, ...] = ("table", "ordering_operation", "grouping_operation", "nested_loop")
QUERY_BLOCK_SLOTS: Tuple[str, ...] = ("table", "ordering_operation", "grouping_operation", "nested_loop")


class _IdCounter:
    """Per-parse node id sequence: node_0, node_1, ..."""

    def __init__(self) -> None:
        self._next = 0

    def next_id(self) -> str:
        nid = f"node_{self._next}"
        self._next += 1
        return nid


def _as_dict(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


def _as_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_int(value: Any) -> Optional[int]:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


def _any_critical(children: List[PlanNode]) -> bool:
    """True if any node in the given subtrees is critical (chain tables do not propagate)."""
    stack = list(children)
    while stack:
        node = stack.pop()
        if node.is_critical:
            return True
        stack.extend(node.children)
    return False


def _parse_table(table: Dict[str, Any], ids: _IdCounter) -> PlanNode:
    access_type = _as_str(table.get("access_type"))
    used_columns = table.get("used_columns")
    return PlanNode(
        id=ids.next_id(),
        kind=KIND_TABLE,
        operation_label=access_type or "unknown",
        table_name=_as_str(table.get("table_name")),
        access_type=access_type,
        key=_as_str(table.get("key")),
        rows_examined=_as_int(table.get("rows_examined_per_scan")),
        cost_info=_as_dict(table.get("cost_info")),
        attached_condition=_as_str(table.get("attached_condition")),
        used_columns=[c for c in used_columns if isinstance(c, str)] if isinstance(used_columns, list) else None,
        is_critical=access_type in CRITICAL_ACCESS_TYPES,
        raw=table,
    )


def _parse_slot(slot: str, record: Dict[str, Any], ids: _IdCounter) -> List[PlanNode]:
    """Parse one optional slot of a container record. Nested loops here are sub-plans, not chains."""
    if slot == "nested_loop":
        return [_parse_chain_element(nl, ids) for nl in _as_list(record.get(slot))]
    sub = _as_dict(record.get(slot))
    if sub is None:
        return []
    if slot == "table":
        return [_parse_table(sub, ids)]
    if slot == "ordering_operation":
        return [_parse_operation(sub, LABEL_ORDER_BY, ids)]
    if slot == "grouping_operation":
        return [_parse_operation(sub, LABEL_GROUP_BY, ids)]
    raise ValueError(f"Unknown slot: {slot}")


def _parse_operation(op: Dict[str, Any], label: str, ids: _IdCounter) -> PlanNode:
    """ORDER BY / GROUP BY step. Critical on filesort or temporary table, or via children."""
    nid = ids.next_id()
    children: List[PlanNode] = []
    for slot in OPERATION_SLOTS:
        children.extend(_parse_slot(slot, op, ids))
    own_critical = bool(op.get("using_filesort") or op.get("using_temporary_table"))
    return PlanNode(
        id=nid,
        kind=KIND_OPERATION,
        operation_label=label,
        cost_info=_as_dict(op.get("cost_info")),
        is_critical=own_critical or _any_critical(children),
        children=children,
        raw=op,
    )


def _parse_chain_element(nl: Dict[str, Any], ids: _IdCounter) -> PlanNode:
    nid = ids.next_id()
    children: List[PlanNode] = []
    for slot in CHAIN_ELEMENT_SLOTS:
        children.extend(_parse_slot(slot, nl, ids))
    return PlanNode(
        id=nid,
        kind=KIND_OPERATION,
        operation_label=LABEL_NESTED_LOOP,
        is_critical=_any_critical(children),
        children=children,
        raw={},
    )


def _is_bare_table(nl: Dict[str, Any]) -> bool:
    if _as_dict(nl.get("table")) is None:
        return False
    return all(nl.get(slot) is None for slot in CHAIN_ELEMENT_SLOTS if slot != "table")


def _parse_chain(elements: List[Dict[str, Any]], ids: _IdCounter) -> Tuple[Optional[PlanNode], List[FlatEdge]]:
    """
    Parse a join chain. Elements execute in sequence, so each node becomes the
    child of the previous one. An element holding only a table is inlined as the
    table node; anything else is wrapped in a nested_loop node.
    Returns (first node or None, chain edges in input order).
    """
    nodes: List[PlanNode] = []
    for nl in elements:
        if _is_bare_table(nl):
            nodes.append(_parse_table(nl["table"], ids))
        else:
            nodes.append(_parse_chain_element(nl, ids))
    if not nodes:
        return None, []

    # Link back to front so each wrapper sees its finished successor.
    for i in range(len(nodes) - 2, -1, -1):
        prev, cur = nodes[i], nodes[i + 1]
        prev.children.append(cur)
        if prev.kind == KIND_OPERATION:
            prev.is_critical = prev.is_critical or _any_critical([cur])

    chain_edges = [FlatEdge(a.id, b.id) for a, b in zip(nodes, nodes[1:])]
    return nodes[0], chain_edges


def _parse_query_block(qb: Dict[str, Any]) -> ParsedPlan:
    ids = _IdCounter()
    nid = ids.next_id()
    children: List[PlanNode] = []
    chain_edges: List[FlatEdge] = []

    for slot in QUERY_BLOCK_SLOTS:
        if slot == "nested_loop":
            first, chain_edges = _parse_chain(_as_list(qb.get(slot)), ids)
            if first is not None:
                children.append(first)
        else:
            children.extend(_parse_slot(slot, qb, ids))

    root = PlanNode(
        id=nid,
        kind=KIND_OPERATION,
        operation_label=LABEL_QUERY_BLOCK,
        cost_info=_as_dict(qb.get("cost_info")),
        is_critical=_any_critical(children),
        children=children,
        raw={},
    )
    return ParsedPlan(root=root, chain_edges=chain_edges)


def parse(text: str) -> ParsedPlan:
    """
    Parse EXPLAIN FORMAT=JSON text into a plan tree plus join-chain edges.

    Raises EmptyInput, MalformedSyntax or UnrecognizedFormat.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        raise EmptyInput("Input is empty")

    try:
        data = orjson.loads(trimmed)
    except orjson.JSONDecodeError as e:
        raise MalformedSyntax(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise UnrecognizedFormat("JSON must be an object")
    if "query_block" not in data:
        raise UnrecognizedFormat('Missing "query_block" field - not a valid EXPLAIN output')
    qb = data["query_block"]
    if not isinstance(qb, dict):
        raise UnrecognizedFormat('"query_block" must be an object')

    return _parse_query_block(qb)
