"""Pytest configuration and fixtures for explain-flow tests."""

import json

import pytest


# =============================================================================
# EXPLAIN INPUT FIXTURES
# =============================================================================

@pytest.fixture
def full_scan_json() -> str:
    """Single table, full scan."""
    return '{"query_block":{"table":{"table_name":"users","access_type":"ALL"}}}'


@pytest.fixture
def filesort_json() -> str:
    """ORDER BY with filesort over an index lookup."""
    return json.dumps({
        "query_block": {
            "cost_info": {"query_cost": "10.00"},
            "ordering_operation": {
                "using_filesort": True,
                "table": {"table_name": "orders", "access_type": "ref", "key": "idx_user"},
            },
        }
    })


@pytest.fixture
def bare_chain_json() -> str:
    """Join chain of three bare tables."""
    return json.dumps({
        "query_block": {
            "nested_loop": [
                {"table": {"table_name": "a", "access_type": "ref"}},
                {"table": {"table_name": "b", "access_type": "eq_ref"}},
                {"table": {"table_name": "c", "access_type": "ALL"}},
            ]
        }
    })


@pytest.fixture
def complex_json() -> str:
    """Every container kind, costs on most nodes."""
    return json.dumps({
        "query_block": {
            "select_id": 1,
            "cost_info": {"query_cost": "200.00"},
            "table": {
                "table_name": "config",
                "access_type": "const",
                "cost_info": {"read_cost": "0.50", "eval_cost": "0.50"},
            },
            "grouping_operation": {
                "using_temporary_table": True,
                "nested_loop": [
                    {"table": {"table_name": "g1", "access_type": "index"}},
                ],
            },
            "nested_loop": [
                {
                    "table": {
                        "table_name": "customers",
                        "access_type": "range",
                        "key": "idx_created",
                        "rows_examined_per_scan": 500,
                        "cost_info": {"prefix_cost": "50.00"},
                        "attached_condition": "(`customers`.`created` > '2024-01-01')",
                        "used_columns": ["id", "created"],
                    }
                },
                {
                    "ordering_operation": {
                        "using_filesort": False,
                        "cost_info": {"query_cost": "120.00"},
                        "table": {
                            "table_name": "orders",
                            "access_type": "ref",
                            "cost_info": {"prefix_cost": "150.00"},
                        },
                    }
                },
                {"table": {"table_name": "items", "access_type": "ALL", "cost_info": {"prefix_cost": "190.00"}}},
            ],
        }
    })
