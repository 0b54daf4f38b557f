"""Pydantic request/response schemas for API."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExplainVisualizeRequest(BaseModel):
    """EXPLAIN FORMAT=JSON text to parse and lay out. rankdir overrides the stored setting."""
    input: str = Field(default="", description="EXPLAIN FORMAT=JSON output")
    rankdir: Optional[Literal["TB", "LR"]] = None


class ExplainInputEvent(BaseModel):
    """Socket.io explain-input payload."""
    model_config = ConfigDict(extra="ignore")
    input: str = ""
