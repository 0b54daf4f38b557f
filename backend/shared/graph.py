"""
Graph utilities for flattened plan graphs.
Shared by the explain pipeline (flattening) and layout.
"""

from typing import Iterable, List, Tuple

import networkx as nx


def build_plan_graph(node_ids: Iterable[str], edges: Iterable[Tuple[str, str]]) -> nx.DiGraph:
    """
    Build a directed graph from node ids and (source, target) edges.
    Node insertion order follows node_ids; duplicate edges collapse; edges to
    unknown nodes and self-loops are dropped.
    """
    G = nx.DiGraph()
    for nid in node_ids:
        G.add_node(nid)
    for src, dst in edges:
        if src == dst or src not in G or dst not in G:
            continue
        G.add_edge(src, dst)
    return G


def components_in_order(G: nx.DiGraph) -> List[List[str]]:
    """Weakly connected components, each in node insertion order, ordered by first node."""
    order = {n: i for i, n in enumerate(G.nodes())}
    comps = [sorted(c, key=order.__getitem__) for c in nx.weakly_connected_components(G)]
    comps.sort(key=lambda c: order[c[0]])
    return comps


def break_cycles(G: nx.DiGraph) -> List[Tuple[str, str]]:
    """Remove one edge per cycle until G is acyclic. Returns removed edges."""
    removed: List[Tuple[str, str]] = []
    while not nx.is_directed_acyclic_graph(G):
        cycle = nx.find_cycle(G)
        u, v = cycle[-1][0], cycle[-1][1]
        G.remove_edge(u, v)
        removed.append((u, v))
    return removed
