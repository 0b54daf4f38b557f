"""
Explain - MySQL EXPLAIN FORMAT=JSON to laid-out plan graph.

parse -> annotate -> flatten -> layout. Pure in-memory; the API layer and
sessions call run_pipeline.
"""

from .cost import annotate
from .errors import EmptyInput, ExplainParseError, MalformedSyntax, UnrecognizedFormat
from .index import EXAMPLE_EXPLAIN, run_pipeline
from .parser import parse
from .session import ExplainSession
from .transformer import flatten, transform_to_flow

__all__ = [
    "EXAMPLE_EXPLAIN",
    "EmptyInput",
    "ExplainParseError",
    "ExplainSession",
    "MalformedSyntax",
    "UnrecognizedFormat",
    "annotate",
    "flatten",
    "parse",
    "run_pipeline",
    "transform_to_flow",
]
