"""
EXPLAIN Flow Backend - FastAPI + Socket.io entry point.
Parses MySQL EXPLAIN FORMAT=JSON into laid-out plan graphs for the frontend.
"""

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import ValidationError

from api import register_routes
from api import state as api_state
from api.schemas import ExplainInputEvent
from db import get_layout_settings
from explain import ExplainSession

# Socket.io
sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins="*")
app = FastAPI(title="EXPLAIN Flow Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ========== API ROUTES ==========

register_routes(app)


@app.get("/health")
async def health():
    return {"status": "ok"}


# Socket.io events
def _make_emitter(sid: str):
    async def on_update(snapshot):
        if snapshot["error"]:
            await sio.emit("explain-error", snapshot["error"], to=sid)
        else:
            await sio.emit("explain-graph", {"nodes": snapshot["nodes"], "edges": snapshot["edges"]}, to=sid)
    return on_update


@sio.event
async def connect(sid, environ, auth=None):
    logger.info("Client connected: {}", sid)
    settings = await get_layout_settings()
    api_state.sessions[sid] = ExplainSession(
        debounce_ms=settings["debounceMs"],
        on_update=_make_emitter(sid),
        settings=settings,
    )


@sio.on("explain-input")
async def explain_input(sid, data):
    try:
        event = ExplainInputEvent.model_validate(data if isinstance(data, dict) else {"input": data})
    except ValidationError as e:
        await sio.emit("explain-error", {"code": "INVALID_FORMAT", "message": str(e)}, to=sid)
        return
    session = api_state.sessions.get(sid)
    if session is None:
        logger.warning("explain-input from unknown client: {}", sid)
        return
    session.submit(event.input)


@sio.event
def disconnect(sid):
    logger.info("Client disconnected: {}", sid)
    api_state.drop_session(sid)


# ASGI app for uvicorn (Socket.io + FastAPI)
asgi_app = socketio.ASGIApp(sio, app)
