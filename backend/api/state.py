"""
Shared API state - per-client explain sessions.
Populated by the Socket.io handlers in main.py.
"""

from typing import Dict

from explain import ExplainSession

# sid -> session; each connected client has its own debounce window and output buffer
sessions: Dict[str, ExplainSession] = {}


def drop_session(sid: str) -> None:
    session = sessions.pop(sid, None)
    if session is not None:
        session.close()
