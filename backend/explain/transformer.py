"""
Flatten a parsed plan into node / edge lists and build the renderer payload.

Edges are tree edges (parent -> child, one per non-root node, pre-order)
followed by the join-chain edges recorded by the parser. The two sets are
not deduplicated: chain edges coincide with tree edges by construction, and
both are kept so edge ids stay stable.
"""

from typing import Any, Dict, List, Optional, Tuple

from layout import compute_layout
from layout.constants import (
    DEFAULT_NODE_H,
    DEFAULT_NODE_SEP,
    DEFAULT_NODE_W,
    DEFAULT_RANK_SEP,
    DEFAULT_RANKDIR,
)

from .nodes import FlatEdge, FlatGraph, ParsedPlan, PlanNode

NODE_TYPE = "explainNode"
EDGE_TYPE = "smoothstep"


def flatten(parsed: ParsedPlan) -> FlatGraph:
    """Pre-order walk (explicit stack): parent before children, children left to right."""
    nodes: List[PlanNode] = []
    tree_edges: List[FlatEdge] = []
    stack: List[Tuple[PlanNode, Optional[str]]] = [(parsed.root, None)]
    while stack:
        node, parent_id = stack.pop()
        nodes.append(node)
        if parent_id is not None:
            tree_edges.append(FlatEdge(parent_id, node.id))
        for child in reversed(node.children):
            stack.append((child, node.id))
    return FlatGraph(nodes=nodes, tree_edges=tree_edges, chain_edges=list(parsed.chain_edges))


def transform_to_flow(parsed: ParsedPlan, settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Flatten and lay out a parsed plan.

    Returns {nodes: [{id, type, position: {x, y}, data}], edges: [{id, source, target, type, animated}]}.
    settings keys (optional): nodeWidth, nodeHeight, nodeSep, rankSep, rankdir.
    """
    settings = settings or {}
    graph = flatten(parsed)
    edges = graph.edges
    positions = compute_layout(
        [n.id for n in graph.nodes],
        edges,
        node_w=settings.get("nodeWidth", DEFAULT_NODE_W),
        node_h=settings.get("nodeHeight", DEFAULT_NODE_H),
        node_sep=settings.get("nodeSep", DEFAULT_NODE_SEP),
        rank_sep=settings.get("rankSep", DEFAULT_RANK_SEP),
        rankdir=settings.get("rankdir", DEFAULT_RANKDIR),
    )

    nodes_out = [
        {
            "id": n.id,
            "type": NODE_TYPE,
            "position": positions.get(n.id, {"x": 0, "y": 0}),
            "data": n.to_dict(include_children=False),
        }
        for n in graph.nodes
    ]
    edges_out = [
        {
            "id": f"edge-{i}",
            "source": e.source,
            "target": e.target,
            "type": EDGE_TYPE,
            "animated": False,
        }
        for i, e in enumerate(edges)
    ]
    return {"nodes": nodes_out, "edges": edges_out}
