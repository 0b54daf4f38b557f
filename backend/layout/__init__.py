"""Layout module - computes layered graph layouts for plan graphs."""

from .sugiyama import compute_layout

__all__ = ["compute_layout"]
