"""
Explain pipeline: parse -> annotate -> flatten -> layout.
Each call starts from scratch; nothing is shared between runs.
"""

from typing import Any, Dict, Optional

from loguru import logger

from .cost import annotate
from .errors import PARSE_ERROR, ExplainParseError
from .parser import parse
from .transformer import transform_to_flow

EXAMPLE_EXPLAIN = """{
  "query_block": {
    "select_id": 1,
    "cost_info": {
      "query_cost": "1.20"
    },
    "table": {
      "table_name": "users",
      "access_type": "ALL",
      "rows_examined_per_scan": 1000,
      "rows_produced_per_join": 100,
      "filtered": "10.00",
      "cost_info": {
        "read_cost": "1.00",
        "eval_cost": "0.10"
      },
      "used_columns": ["id", "name", "email"]
    }
  }
}"""


def run_pipeline(text: str, settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Run the full pipeline on EXPLAIN JSON text.

    Returns {nodes, edges, rawTree}. Raises ExplainParseError; unexpected faults
    are wrapped as PARSE_ERROR with the original message.
    """
    try:
        parsed = parse(text)
        annotate(parsed.root)
        flow = transform_to_flow(parsed, settings)
        raw_tree = parsed.root.to_dict()
    except ExplainParseError:
        raise
    except Exception as e:
        logger.exception("Explain pipeline failed")
        raise ExplainParseError(str(e) or e.__class__.__name__, PARSE_ERROR) from e

    logger.debug("Explain pipeline: {} nodes, {} edges", len(flow["nodes"]), len(flow["edges"]))
    return {**flow, "rawTree": raw_tree}
