"""
Layout constants for the plan graph.
Node boxes are fixed-size; the renderer draws each box at its top-left corner.
"""

# Node box dimensions
DEFAULT_NODE_W = 250
DEFAULT_NODE_H = 120

# Spacing between neighbouring nodes within a rank
DEFAULT_NODE_SEP = 80

# Spacing between ranks (layers)
DEFAULT_RANK_SEP = 100

# TB: ranks stacked top to bottom; LR: ranks left to right
DEFAULT_RANKDIR = "TB"
RANKDIRS = ("TB", "LR")

# Debounce window for interactive re-parses
DEFAULT_DEBOUNCE_MS = 500
