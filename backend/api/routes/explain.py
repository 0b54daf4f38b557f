"""Explain API - visualize, example."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger

from db import get_layout_settings
from explain import EXAMPLE_EXPLAIN, ExplainParseError, run_pipeline

from ..schemas import ExplainVisualizeRequest

router = APIRouter()


@router.post("/visualize")
async def visualize(body: ExplainVisualizeRequest):
    """Parse EXPLAIN JSON and return laid-out nodes and edges."""
    settings = await get_layout_settings()
    if body.rankdir:
        settings["rankdir"] = body.rankdir
    try:
        return run_pipeline(body.input, settings)
    except ExplainParseError as e:
        logger.info("Explain input rejected: {}", e.code)
        return JSONResponse(status_code=400, content={"error": e.to_dict()})


@router.get("/example")
async def example():
    return {"input": EXAMPLE_EXPLAIN}
