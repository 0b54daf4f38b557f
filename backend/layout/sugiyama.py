"""
Sugiyama layered graph layout for plan graphs.

Implements the standard Sugiyama framework:
1. Layer assignment (longest-path)
2. Dummy node insertion (for long edges)
3. Crossing minimization (barycenter heuristic, multi-pass)
4. Coordinate assignment (median-based with iterative refinement)

Each weakly connected component is laid out on its own and placed beside the
previous one. No randomness: same nodes and edges give the same coordinates.
"""

from itertools import combinations
from typing import Dict, Iterable, List, Set, Tuple

import networkx as nx

from shared.graph import break_cycles, build_plan_graph, components_in_order

from .constants import (
    DEFAULT_NODE_H,
    DEFAULT_NODE_SEP,
    DEFAULT_NODE_W,
    DEFAULT_RANK_SEP,
    DEFAULT_RANKDIR,
    RANKDIRS,
)


def compute_layout(
    node_ids: Iterable[str],
    edges: Iterable[Tuple[str, str]],
    node_w: float = DEFAULT_NODE_W,
    node_h: float = DEFAULT_NODE_H,
    node_sep: float = DEFAULT_NODE_SEP,
    rank_sep: float = DEFAULT_RANK_SEP,
    rankdir: str = DEFAULT_RANKDIR,
) -> Dict[str, Dict[str, float]]:
    """
    Compute a layered layout for a directed graph.

    Returns {id: {x, y}} where (x, y) is the top-left corner of the node box.
    With rankdir TB, rank grows along y; with LR, along x.
    """
    if rankdir not in RANKDIRS:
        raise ValueError(f"rankdir must be one of {RANKDIRS}, got {rankdir!r}")

    G = build_plan_graph(node_ids, edges)
    if G.number_of_nodes() == 0:
        return {}

    # Breadth: extent within a rank. Depth: extent along the rank axis.
    breadth, depth = (node_w, node_h) if rankdir == "TB" else (node_h, node_w)

    centers: Dict[str, Tuple[float, float]] = {}
    offset = breadth / 2.0
    for comp in components_in_order(G):
        sub = _component_graph(G, comp)
        break_cycles(sub)
        along = _layout_component(sub, breadth, depth, node_sep, rank_sep)
        min_u = min(u for u, _ in along.values())
        max_u = max(u for u, _ in along.values())
        for nid, (u, v) in along.items():
            centers[nid] = (u - min_u + offset, v)
        offset += max_u - min_u + breadth + node_sep

    result: Dict[str, Dict[str, float]] = {}
    for nid in G.nodes():
        cu, cv = centers[nid]
        cx, cy = (cu, cv) if rankdir == "TB" else (cv, cu)
        result[nid] = {"x": round(cx - node_w / 2.0, 1), "y": round(cy - node_h / 2.0, 1)}
    return result


def _component_graph(G: nx.DiGraph, comp: List[str]) -> nx.DiGraph:
    """Copy of one component keeping node and edge insertion order."""
    sub = nx.DiGraph()
    sub.add_nodes_from(comp)
    for u in comp:
        for v in G.successors(u):
            sub.add_edge(u, v)
    return sub


def _layout_component(
    G: nx.DiGraph, breadth: float, depth: float, node_sep: float, rank_sep: float
) -> Dict[str, Tuple[float, float]]:
    """Lay out one acyclic component. Returns {id: (center along rank, center across ranks)}."""
    layers = _assign_layers(G)
    layers, dummy_nodes = _insert_dummy_nodes(G, layers)
    _minimize_crossings(G, layers)
    positions = _assign_coordinates(G, layers, dummy_nodes, breadth, node_sep)

    out: Dict[str, Tuple[float, float]] = {}
    for layer_idx, layer in enumerate(layers):
        cv = layer_idx * (depth + rank_sep) + depth / 2.0
        for nid in layer:
            if nid in dummy_nodes:
                continue
            out[nid] = (positions[nid] + breadth / 2.0, cv)
    return out


# ---------------------------------------------------------------------------
# 1. Layer assignment (longest path from sources)
# ---------------------------------------------------------------------------

def _assign_layers(G: nx.DiGraph) -> List[List[str]]:
    """Assign each node to a layer using longest-path; layer order follows insertion order."""
    node_layer: Dict[str, int] = {}
    for n in nx.topological_sort(G):
        preds = list(G.predecessors(n))
        node_layer[n] = max(node_layer[p] for p in preds) + 1 if preds else 0

    max_layer = max(node_layer.values()) if node_layer else 0
    layers: List[List[str]] = [[] for _ in range(max_layer + 1)]
    for n in G.nodes():
        layers[node_layer[n]].append(n)
    return layers


# ---------------------------------------------------------------------------
# 2. Dummy node insertion
# ---------------------------------------------------------------------------

def _insert_dummy_nodes(
    G: nx.DiGraph, layers: List[List[str]]
) -> Tuple[List[List[str]], Set[str]]:
    """Insert dummy nodes for edges spanning more than one layer."""
    node_layer: Dict[str, int] = {}
    for i, layer in enumerate(layers):
        for n in layer:
            node_layer[n] = i

    dummy_nodes: Set[str] = set()
    counter = 0

    for u, v in list(G.edges()):
        lu, lv = node_layer[u], node_layer[v]
        if lv - lu <= 1:
            continue

        G.remove_edge(u, v)
        prev = u
        for step in range(1, lv - lu):
            counter += 1
            d = f"__d{counter}"
            dummy_nodes.add(d)
            G.add_edge(prev, d)
            layers[lu + step].append(d)
            prev = d
        G.add_edge(prev, v)

    return layers, dummy_nodes


# ---------------------------------------------------------------------------
# 3. Crossing minimization (barycenter heuristic)
# ---------------------------------------------------------------------------

def _layer_pair_crossings(G: nx.DiGraph, upper: List[str], lower: List[str]) -> int:
    """Edge pairs between two adjacent layers whose endpoints are in opposite order."""
    slot = {n: i for i, n in enumerate(lower)}
    spans = [(i, slot[v]) for i, u in enumerate(upper) for v in G.successors(u) if v in slot]
    return sum(1 for (a1, b1), (a2, b2) in combinations(spans, 2) if (a1 - a2) * (b1 - b2) < 0)


def _crossings(G: nx.DiGraph, layers: List[List[str]]) -> int:
    return sum(_layer_pair_crossings(G, upper, lower) for upper, lower in zip(layers, layers[1:]))


def _barycenter_sort(
    G: nx.DiGraph, fixed_layer: List[str], free_layer: List[str], downward: bool
) -> List[str]:
    """Reorder free_layer by mean neighbour position in fixed_layer. Ties keep current order."""
    fixed_pos = {n: i for i, n in enumerate(fixed_layer)}
    anchored: List[Tuple[float, int, str]] = []
    unanchored: List[Tuple[int, str]] = []

    for idx, n in enumerate(free_layer):
        neighbors = G.predecessors(n) if downward else G.successors(n)
        relevant = [fixed_pos[nb] for nb in neighbors if nb in fixed_pos]
        if relevant:
            anchored.append((sum(relevant) / len(relevant), idx, n))
        else:
            unanchored.append((idx, n))

    anchored.sort()
    result = [n for _, _, n in anchored]

    # Nodes with no neighbours in the fixed layer keep their relative slot.
    for idx, u in unanchored:
        best = len(result)
        for i, r in enumerate(result):
            if free_layer.index(r) > idx:
                best = i
                break
        result.insert(best, u)

    return result


def _sweep(G: nx.DiGraph, layers: List[List[str]], downward: bool) -> None:
    """One barycenter sweep, reordering each layer against its already-sorted neighbour."""
    if downward:
        for i in range(1, len(layers)):
            layers[i] = _barycenter_sort(G, layers[i - 1], layers[i], downward=True)
    else:
        for i in reversed(range(len(layers) - 1)):
            layers[i] = _barycenter_sort(G, layers[i + 1], layers[i], downward=False)


def _minimize_crossings(G: nx.DiGraph, layers: List[List[str]], passes: int = 24) -> None:
    """Alternate down/up sweeps and keep the ordering with the fewest crossings (in-place)."""
    if len(layers) < 2:
        return

    fewest = _crossings(G, layers)
    snapshot = [list(layer) for layer in layers]
    for sweep in range(passes):
        if fewest == 0:
            break
        _sweep(G, layers, downward=sweep % 2 == 0)
        count = _crossings(G, layers)
        if count < fewest:
            fewest, snapshot = count, [list(layer) for layer in layers]

    layers[:] = snapshot


# ---------------------------------------------------------------------------
# 4. Coordinate assignment (median-based, iterative)
# ---------------------------------------------------------------------------

def _assign_coordinates(
    G: nx.DiGraph,
    layers: List[List[str]],
    dummy_nodes: Set[str],
    breadth: float,
    node_sep: float,
) -> Dict[str, float]:
    """Leading-edge position of every node within its layer (median placement, order kept)."""
    positions: Dict[str, float] = {}
    widths = {n: (0.0 if n in dummy_nodes else float(breadth)) for layer in layers for n in layer}

    for layer in layers:
        u = 0.0
        for nid in layer:
            positions[nid] = u
            u += widths[nid] + node_sep

    for _ in range(12):
        for layer_idx in range(1, len(layers)):
            _align_to_connected(G, layers[layer_idx], positions, widths, node_sep)
        for layer_idx in range(len(layers) - 2, -1, -1):
            _align_to_connected(G, layers[layer_idx], positions, widths, node_sep)

    return positions


def _align_to_connected(
    G: nx.DiGraph,
    layer: List[str],
    positions: Dict[str, float],
    widths: Dict[str, float],
    node_sep: float,
) -> None:
    """Shift nodes in a layer toward the median center of connected nodes, preserving order."""
    if not layer:
        return

    ideal: Dict[str, float] = {}
    for nid in layer:
        connected = list(G.predecessors(nid)) + list(G.successors(nid))
        cxs = sorted(positions[nb] + widths[nb] / 2.0 for nb in connected)
        if not cxs:
            ideal[nid] = positions[nid]
            continue

        mid = len(cxs) // 2
        median_cx = cxs[mid] if len(cxs) % 2 == 1 else (cxs[mid - 1] + cxs[mid]) / 2.0
        ideal[nid] = median_cx - widths[nid] / 2.0

    _place_with_order(layer, ideal, positions, widths, node_sep)


def _place_with_order(
    layer: List[str],
    ideal: Dict[str, float],
    positions: Dict[str, float],
    widths: Dict[str, float],
    node_sep: float,
) -> None:
    """Move each node to its ideal position, clamped so layer order and node_sep gaps hold."""
    placed = [ideal[nid] for nid in layer]

    # Push right past the left neighbour, then pull left inside the right neighbour.
    for i, left in enumerate(layer[:-1], start=1):
        placed[i] = max(placed[i], placed[i - 1] + widths[left] + node_sep)
    for i in reversed(range(len(layer) - 1)):
        placed[i] = min(placed[i], placed[i + 1] - node_sep - widths[layer[i]])

    positions.update(zip(layer, placed))
