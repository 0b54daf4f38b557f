"""Tests for flattening and the renderer payload."""

import json

from explain.cost import annotate
from explain.nodes import KIND_TABLE, FlatEdge
from explain.parser import parse
from explain.transformer import flatten, transform_to_flow


class TestFlatten:
    def test_three_bare_tables(self, bare_chain_json):
        graph = flatten(parse(bare_chain_json))
        tables = [n for n in graph.nodes if n.kind == KIND_TABLE]
        assert len(tables) == 3
        assert len(graph.nodes) == 4
        assert len(graph.chain_edges) == 2
        root_id = graph.nodes[0].id
        assert [e for e in graph.tree_edges if e.source == root_id] == [FlatEdge(root_id, tables[0].id)]
        # chain edges coincide with the nested tree edges; both are kept
        assert graph.chain_edges == graph.tree_edges[1:]
        assert len(graph.edges) == 5

    def test_preorder(self, complex_json):
        graph = flatten(parse(complex_json))
        assert [n.id for n in graph.nodes] == [f"node_{i}" for i in range(10)]

    def test_one_tree_edge_per_non_root(self, complex_json):
        graph = flatten(parse(complex_json))
        targets = [e.target for e in graph.tree_edges]
        assert sorted(targets) == sorted(n.id for n in graph.nodes[1:])
        assert len(set(targets)) == len(targets)

    def test_chain_edges_follow_input_order(self):
        parsed = parse(json.dumps({
            "query_block": {
                "nested_loop": [
                    {"table": {"table_name": "a"}},
                    {"grouping_operation": {"table": {"table_name": "g"}}},
                    {"table": {"table_name": "b"}},
                    {"table": {"table_name": "c"}},
                ]
            }
        }))
        graph = flatten(parsed)
        assert len(graph.chain_edges) == 3
        by_id = {n.id: n for n in graph.nodes}
        chain = [graph.chain_edges[0].source] + [e.target for e in graph.chain_edges]
        assert [by_id[nid].operation_label for nid in chain] == ["unknown", "nested_loop", "unknown", "unknown"]
        assert [by_id[nid].table_name for nid in chain] == ["a", None, "b", "c"]

    def test_edges_are_tree_then_chain(self, bare_chain_json):
        graph = flatten(parse(bare_chain_json))
        assert graph.edges == graph.tree_edges + graph.chain_edges

    def test_deep_chain(self):
        elements = [{"table": {"table_name": f"t{i}"}} for i in range(2000)]
        graph = flatten(parse(json.dumps({"query_block": {"nested_loop": elements}})))
        assert len(graph.nodes) == 2001
        assert len(graph.chain_edges) == 1999


class TestTransformToFlow:
    def test_payload_shape(self, filesort_json):
        parsed = parse(filesort_json)
        annotate(parsed.root)
        flow = transform_to_flow(parsed)
        assert [n["id"] for n in flow["nodes"]] == ["node_0", "node_1", "node_2"]
        for node in flow["nodes"]:
            assert node["type"] == "explainNode"
            assert set(node["position"]) == {"x", "y"}
            assert "children" not in node["data"]
        assert flow["nodes"][1]["data"]["operationType"] == "ORDER BY"
        assert flow["nodes"][0]["data"]["costPercent"] == 100
        assert flow["edges"] == [
            {"id": "edge-0", "source": "node_0", "target": "node_1", "type": "smoothstep", "animated": False},
            {"id": "edge-1", "source": "node_1", "target": "node_2", "type": "smoothstep", "animated": False},
        ]

    def test_edge_ids_cover_union(self, bare_chain_json):
        flow = transform_to_flow(parse(bare_chain_json))
        assert [e["id"] for e in flow["edges"]] == [f"edge-{i}" for i in range(5)]

    def test_positions_follow_edges(self, complex_json):
        flow = transform_to_flow(parse(complex_json))
        pos = {n["id"]: n["position"] for n in flow["nodes"]}
        for e in flow["edges"]:
            assert pos[e["target"]]["y"] > pos[e["source"]]["y"]

    def test_rankdir_setting(self, bare_chain_json):
        flow = transform_to_flow(parse(bare_chain_json), {"rankdir": "LR"})
        pos = {n["id"]: n["position"] for n in flow["nodes"]}
        for e in flow["edges"]:
            assert pos[e["target"]]["x"] > pos[e["source"]]["x"]

    def test_table_data_fields(self, full_scan_json):
        flow = transform_to_flow(parse(full_scan_json))
        data = flow["nodes"][1]["data"]
        assert data["type"] == "table"
        assert data["tableName"] == "users"
        assert data["accessType"] == "ALL"
        assert data["isCritical"] is True
        assert "costPercent" not in data
        assert data["raw"] == {"table_name": "users", "access_type": "ALL"}


def test_raw_tree_of_deep_chain():
    elements = [{"table": {"table_name": f"t{i}"}} for i in range(2000)]
    tree = parse(json.dumps({"query_block": {"nested_loop": elements}})).root.to_dict()
    depth, node = 0, tree
    while node["children"]:
        node = node["children"][0]
        depth += 1
    assert depth == 2000
    assert node["tableName"] == "t1999"
    assert node["children"] == []
