"""Shared utilities for the explain pipeline and layout."""

from .graph import break_cycles, build_plan_graph, components_in_order

__all__ = ["break_cycles", "build_plan_graph", "components_in_order"]
