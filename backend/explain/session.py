"""
Debounced explain session.

Rapid submissions are coalesced: each submit cancels the pending run and
schedules a new one after the debounce window. The output buffer is replaced
only when a run completes; a failed run clears it and records the error.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger

from layout.constants import DEFAULT_DEBOUNCE_MS

from .errors import PARSE_ERROR, ExplainParseError
from .index import run_pipeline

UpdateCallback = Callable[[Dict[str, Any]], Awaitable[None]]


class ExplainSession:
    """One input stream (e.g. one connected client)."""

    def __init__(
        self,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        on_update: Optional[UpdateCallback] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        self.debounce_ms = debounce_ms
        self.on_update = on_update
        self.settings = settings or {}
        self.nodes: List[Dict[str, Any]] = []
        self.edges: List[Dict[str, Any]] = []
        self.raw_tree: Optional[Dict[str, Any]] = None
        self.error: Optional[Dict[str, str]] = None
        self._task: Optional[asyncio.Task] = None

    def submit(self, text: str) -> asyncio.Task:
        """Schedule a pipeline run for text, superseding any pending run."""
        if self._task and not self._task.done():
            logger.debug("Explain run superseded")
            self._task.cancel()
        self._task = asyncio.create_task(self._run(text))
        return self._task

    async def flush(self) -> None:
        """Wait for the pending run, if any."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    def close(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None

    def snapshot(self) -> Dict[str, Any]:
        return {"nodes": self.nodes, "edges": self.edges, "error": self.error}

    async def _run(self, text: str) -> None:
        await asyncio.sleep(self.debounce_ms / 1000.0)
        try:
            result = run_pipeline(text, self.settings)
        except ExplainParseError as e:
            logger.warning("Explain parse failed: {} ({})", e.message, e.code)
            self._fail(e)
        except Exception as e:
            logger.exception("Explain run failed")
            self._fail(ExplainParseError(str(e) or e.__class__.__name__, PARSE_ERROR))
        else:
            self.nodes, self.edges, self.raw_tree, self.error = (
                result["nodes"], result["edges"], result["rawTree"], None
            )
        if self.on_update is None:
            return
        try:
            await self.on_update(self.snapshot())
        except Exception:
            logger.exception("Explain update callback failed")

    def _fail(self, error: ExplainParseError) -> None:
        self.nodes, self.edges, self.raw_tree, self.error = [], [], None, error.to_dict()
